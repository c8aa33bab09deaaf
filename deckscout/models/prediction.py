"""
Prediction models — scored candidates and session outcomes.

ScoredCandidate objects are rebuilt on every scoring pass and never
mutated afterwards; normalization produces new instances.
"""

from dataclasses import dataclass, field
from enum import Enum

from deckscout.models.deck_profile import DeckProfile


class Confidence(str, Enum):
    """Discrete trust level of a candidate, gated by score and sample size."""

    VERY_LOW = "very-low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very-high"


class SessionState(str, Enum):
    """Lifecycle of a prediction session."""

    EMPTY = "empty"
    PREDICTING = "predicting"
    CONFIRMED = "confirmed"


class MatchType(str, Enum):
    """Which part of a deck profile an observed card matched."""

    SIGNATURE = "signature"
    KEY = "key"


@dataclass(frozen=True, slots=True)
class CardMatch:
    """An observed card credited to a deck."""

    card: str
    match_type: MatchType
    score: float
    turn: int
    role: str | None = None


@dataclass(frozen=True, slots=True)
class ScoreBreakdown:
    """Per-factor contributions to a deck's total score."""

    signature: float = 0.0
    key_cards: float = 0.0
    colors: float = 0.0
    timing: float = 0.0
    meta_bonus: float = 0.0
    archetype_multiplier: float = 1.0
    consistency: float = 0.0

    @property
    def color_penalized(self) -> bool:
        """True when detected colors fall outside the deck's identity."""
        return self.colors < 0


@dataclass(frozen=True)
class DeckScore:
    """Raw output of scoring one deck."""

    total: float
    breakdown: ScoreBreakdown
    matched_cards: tuple[CardMatch, ...] = ()
    reasoning: tuple[str, ...] = ()


@dataclass(frozen=True)
class ScoredCandidate:
    """
    A deck ranked against the observed evidence.

    Attributes:
        deck: The catalog entry
        total_score: Final score after the archetype multiplier
        breakdown: Contribution of each scoring factor
        probability: Likelihood in [0, 0.99]
        confidence: Discrete trust level
        matched_cards: Observed cards credited to this deck
        reasoning: Human-readable trace of the scoring pass
    """

    deck: DeckProfile
    total_score: float
    breakdown: ScoreBreakdown
    probability: float
    confidence: Confidence
    matched_cards: tuple[CardMatch, ...] = ()
    reasoning: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TrackedCard:
    """A card observed after confirmation, checked against the confirmed deck."""

    name: str
    turn: int
    expected: bool


@dataclass(frozen=True)
class ObservationResult:
    """
    What observe_card reports back to the caller.

    When confirmed is True, deck holds the confirmed candidate. Otherwise
    predictions holds the current ranking (possibly empty).
    """

    confirmed: bool
    predictions: tuple[ScoredCandidate, ...] = ()
    deck: ScoredCandidate | None = None
    new_card: TrackedCard | None = None
    cards_analyzed: int = 0
    skipped_decks: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class TopPrediction:
    """Summary of the leading candidate."""

    name: str
    probability: float
    confidence: Confidence


@dataclass(frozen=True)
class SessionStats:
    """Snapshot of a prediction session."""

    state: SessionState
    cards_analyzed: int
    current_turn: int
    colors_detected: tuple[str, ...]
    predictions_count: int
    is_confirmed: bool
    confirmed_deck: str | None
    game_number: int
    top_prediction: TopPrediction | None = None


class SessionEventKind(str, Enum):
    """Notifications a session emits to its listener."""

    PREDICTIONS_UPDATED = "predictions_updated"
    DECK_CONFIRMED = "deck_confirmed"
    CARD_TRACKED = "card_tracked"
    GAME_RESET = "game_reset"


@dataclass(frozen=True)
class SessionEvent:
    """A single session notification."""

    kind: SessionEventKind
    game_number: int
    result: ObservationResult | None = None
    candidate: ScoredCandidate | None = None
    details: dict[str, object] = field(default_factory=dict)
