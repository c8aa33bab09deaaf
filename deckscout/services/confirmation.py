"""
Confirmation Service — Deterministic Auto-Confirm Logic.

Decides whether the leading candidate is strong enough to stop
predicting and start tracking.

INVARIANT: Same candidates + policy + card count -> same decision.
"""

import logging
from collections.abc import Sequence

from deckscout.config import Settings
from deckscout.models.confirmation import (
    ConfirmationDecision,
    ConfirmationPolicy,
    ConfirmationSource,
)
from deckscout.models.prediction import ScoredCandidate

logger = logging.getLogger(__name__)


def create_policy(config: Settings) -> ConfirmationPolicy:
    """Build a confirmation policy from settings."""
    return ConfirmationPolicy(
        probability_threshold=config.confirmation_threshold,
        min_cards=config.min_cards_for_confirmation,
    )


def evaluate_confirmation(
    predictions: Sequence[ScoredCandidate],
    cards_observed: int,
    policy: ConfirmationPolicy,
) -> ConfirmationDecision:
    """
    Evaluate whether the top-ranked candidate should be auto-confirmed.

    Rules (authoritative, in order):
    1. No candidates → not confirmed
    2. Too few observed cards → not confirmed
    3. Detected colors outside the deck → not confirmed
    4. Confidence below the required tier → not confirmed
    5. Probability below threshold → not confirmed
    6. Otherwise → confirmed

    Args:
        predictions: Ranked candidates, best first
        cards_observed: Number of cards observed this game
        policy: Thresholds to apply

    Returns:
        ConfirmationDecision with the outcome and its reason
    """
    if not predictions:
        return ConfirmationDecision(confirmed=False, reason="No candidates")

    top = predictions[0]

    if cards_observed < policy.min_cards:
        return ConfirmationDecision(
            confirmed=False,
            reason=f"Only {cards_observed} cards observed, need {policy.min_cards}",
            candidate=top,
        )

    if top.breakdown.color_penalized:
        return ConfirmationDecision(
            confirmed=False,
            reason="Detected colors are outside the deck's identity",
            candidate=top,
        )

    if top.confidence != policy.required_confidence:
        return ConfirmationDecision(
            confirmed=False,
            reason=f"Confidence is {top.confidence.value}, need {policy.required_confidence.value}",
            candidate=top,
        )

    if top.probability < policy.probability_threshold:
        return ConfirmationDecision(
            confirmed=False,
            reason=(
                f"Probability {top.probability:.2f} below threshold "
                f"{policy.probability_threshold:.2f}"
            ),
            candidate=top,
        )

    logger.info("Auto-confirming %s at %.1f%%", top.deck.name, top.probability * 100)
    return ConfirmationDecision(
        confirmed=True,
        reason="All confirmation thresholds met",
        candidate=top,
        source=ConfirmationSource.AUTOMATIC,
    )


def confirm_by_id(
    predictions: Sequence[ScoredCandidate],
    deck_id: str,
) -> ConfirmationDecision:
    """
    Manually confirm a deck among the current predictions.

    Thresholds do not apply. The only requirement is that the deck was
    part of the latest ranking.
    """
    for candidate in predictions:
        if candidate.deck.id == deck_id:
            logger.info("Manually confirmed %s", candidate.deck.name)
            return ConfirmationDecision(
                confirmed=True,
                reason="Confirmed manually",
                candidate=candidate,
                source=ConfirmationSource.MANUAL,
            )
    return ConfirmationDecision(
        confirmed=False,
        reason=f"Deck '{deck_id}' is not among the current predictions",
    )
