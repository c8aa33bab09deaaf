from deckscout.models.confirmation import (
    ConfirmationDecision,
    ConfirmationPolicy,
    ConfirmationSource,
)
from deckscout.models.deck_profile import (
    ALL_COLORS,
    Archetype,
    DeckCard,
    DeckProfile,
    KeyCard,
    SignatureCard,
)
from deckscout.models.failure import (
    ApiResponse,
    DeckNotFoundError,
    FailureDetail,
    FailureKind,
    InvalidCardError,
    InvalidTurnError,
    KnownError,
    OutcomeType,
    RefusalError,
)
from deckscout.models.observation import GameContext, ObservedCard, PlayRecord
from deckscout.models.prediction import (
    CardMatch,
    Confidence,
    DeckScore,
    MatchType,
    ObservationResult,
    ScoreBreakdown,
    ScoredCandidate,
    SessionEvent,
    SessionEventKind,
    SessionState,
    SessionStats,
    TopPrediction,
    TrackedCard,
)

__all__ = [
    "ALL_COLORS",
    "ApiResponse",
    "Archetype",
    "CardMatch",
    "Confidence",
    "ConfirmationDecision",
    "ConfirmationPolicy",
    "ConfirmationSource",
    "DeckCard",
    "DeckNotFoundError",
    "DeckProfile",
    "DeckScore",
    "FailureDetail",
    "FailureKind",
    "GameContext",
    "InvalidCardError",
    "InvalidTurnError",
    "KeyCard",
    "KnownError",
    "MatchType",
    "ObservationResult",
    "ObservedCard",
    "OutcomeType",
    "PlayRecord",
    "RefusalError",
    "ScoreBreakdown",
    "ScoredCandidate",
    "SessionEvent",
    "SessionEventKind",
    "SessionState",
    "SessionStats",
    "SignatureCard",
    "TopPrediction",
    "TrackedCard",
]
