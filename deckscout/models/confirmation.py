"""
Confirmation Policy — Thresholds for Locking In a Deck.

INVARIANT: Auto-confirmation needs every threshold to hold at once.
INVARIANT: A color-penalized candidate is never auto-confirmed.
INVARIANT: Manual confirmation bypasses all thresholds.
"""

from dataclasses import dataclass
from enum import Enum

from deckscout.models.prediction import Confidence, ScoredCandidate

DEFAULT_CONFIRMATION_THRESHOLD = 0.95
DEFAULT_MIN_CARDS_FOR_CONFIRMATION = 3


class ConfirmationSource(str, Enum):
    """How a deck came to be confirmed."""

    AUTOMATIC = "automatic"
    MANUAL = "manual"


@dataclass(frozen=True)
class ConfirmationPolicy:
    """
    Thresholds the top candidate must meet to be auto-confirmed.

    Attributes:
        probability_threshold: Minimum blended probability
        required_confidence: Confidence tier the candidate must have
        min_cards: Minimum number of observed cards
    """

    probability_threshold: float = DEFAULT_CONFIRMATION_THRESHOLD
    required_confidence: Confidence = Confidence.VERY_HIGH
    min_cards: int = DEFAULT_MIN_CARDS_FOR_CONFIRMATION


@dataclass(frozen=True)
class ConfirmationDecision:
    """
    The result of evaluating the top candidate.

    Attributes:
        confirmed: Whether the candidate should be locked in
        reason: Why this decision was made
        candidate: The evaluated candidate (None when there was none)
        source: How the confirmation happened, when confirmed
    """

    confirmed: bool
    reason: str
    candidate: ScoredCandidate | None = None
    source: ConfirmationSource | None = None
