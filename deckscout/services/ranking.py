"""
Catalog Ranking — Score Every Deck, Keep the Best, Normalize.

A ranking pass scores the whole catalog from scratch, drops decks with
no positive evidence, keeps the top N by score and blends each
probability with the candidate's share of the top-N score mass.

INVARIANT: 0 <= probability <= 0.99 for every ranked candidate.
INVARIANT: The top-scoring candidate's probability is at least the floor.
INVARIANT: One malformed deck never aborts the pass.
"""

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass, replace

from deckscout.models.deck_profile import DeckProfile
from deckscout.models.observation import GameContext, ObservedCard
from deckscout.models.prediction import ScoredCandidate
from deckscout.services.scoring import (
    DEFAULT_SIGNATURE_MULTIPLIER,
    MAX_PROBABILITY,
    build_candidate,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_PREDICTIONS = 5
DEFAULT_TOP_PROBABILITY_FLOOR = 0.4

PROBABILITY_BLEND_WEIGHT = 0.7
SCORE_SHARE_BLEND_WEIGHT = 0.3


@dataclass(frozen=True)
class CatalogScan:
    """
    Result of scoring a catalog.

    Attributes:
        candidates: One scored candidate per deck that scored cleanly
        skipped: Diagnostic reasons for decks that could not be scored
    """

    candidates: tuple[ScoredCandidate, ...] = ()
    skipped: tuple[str, ...] = ()


def score_catalog(
    decks: Sequence[DeckProfile],
    observed: Sequence[ObservedCard],
    context: GameContext,
    *,
    signature_multiplier: float = DEFAULT_SIGNATURE_MULTIPLIER,
    consistency_weight: float = 0.0,
    rng: random.Random | None = None,
) -> CatalogScan:
    """
    Score every deck in the catalog.

    A deck whose scoring raises is skipped and its reason recorded;
    the rest of the catalog is still scored.
    """
    candidates: list[ScoredCandidate] = []
    skipped: list[str] = []

    for deck in decks:
        try:
            candidates.append(
                build_candidate(
                    deck,
                    observed,
                    context,
                    signature_multiplier=signature_multiplier,
                    consistency_weight=consistency_weight,
                    rng=rng,
                )
            )
        except Exception as exc:  # noqa: BLE001  Per-deck isolation
            deck_name = getattr(deck, "name", None) or repr(deck)[:60]
            reason = f"{deck_name}: {type(exc).__name__}: {exc}"
            logger.warning("Skipping deck during scoring: %s", reason)
            skipped.append(reason)

    return CatalogScan(candidates=tuple(candidates), skipped=tuple(skipped))


def rank_candidates(
    candidates: Sequence[ScoredCandidate],
    *,
    max_predictions: int = DEFAULT_MAX_PREDICTIONS,
    top_probability_floor: float = DEFAULT_TOP_PROBABILITY_FLOOR,
) -> list[ScoredCandidate]:
    """
    Rank scored candidates and normalize their probabilities.

    Steps:
    1. Drop candidates with total_score <= 0
    2. Sort by total_score, descending
    3. Keep the top max_predictions
    4. Blend: p = p * 0.7 + (score / sum of kept scores) * 0.3
    5. Floor the top-scoring candidate at top_probability_floor
    6. Stable re-sort by blended probability, descending

    Returns:
        New candidate instances; the inputs are not modified
    """
    positive = [candidate for candidate in candidates if candidate.total_score > 0]
    positive.sort(key=lambda candidate: candidate.total_score, reverse=True)
    kept = positive[:max_predictions]

    if not kept:
        return []

    score_mass = sum(candidate.total_score for candidate in kept)
    ranked: list[ScoredCandidate] = []
    for index, candidate in enumerate(kept):
        share = candidate.total_score / score_mass
        probability = (
            candidate.probability * PROBABILITY_BLEND_WEIGHT + share * SCORE_SHARE_BLEND_WEIGHT
        )
        if index == 0:
            probability = max(probability, top_probability_floor)
        probability = max(0.0, min(probability, MAX_PROBABILITY))
        ranked.append(replace(candidate, probability=probability))

    ranked.sort(key=lambda candidate: candidate.probability, reverse=True)
    return ranked
