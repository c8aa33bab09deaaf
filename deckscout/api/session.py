"""
Session API endpoints.

Exposes one in-process prediction session to an event source (log
watcher, manual input) over HTTP. Transport only: every decision is
made by PredictionSession.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from deckscout.models.failure import ApiResponse, DeckNotFoundError, FailureKind, RefusalError
from deckscout.models.prediction import ObservationResult, ScoredCandidate, SessionStats
from deckscout.services.fallback_catalog import get_fallback_catalog
from deckscout.services.prediction_session import PredictionSession

router = APIRouter(prefix="/session", tags=["session"])

_session: PredictionSession | None = None


def get_prediction_session() -> PredictionSession:
    """Return the process-wide session, creating it on first use."""
    global _session
    if _session is None:
        _session = PredictionSession(get_fallback_catalog())
    return _session


SessionDep = Annotated[PredictionSession, Depends(get_prediction_session)]


class ObserveCardRequest(BaseModel):
    """A card the opponent played."""

    name: str
    turn: int | None = None
    timestamp: float | None = None
    colors: list[str] | None = None


class SetTurnRequest(BaseModel):
    turn: int


class CardMatchResponse(BaseModel):
    card: str
    match_type: str
    score: float
    turn: int
    role: str | None = None


class CandidateResponse(BaseModel):
    """A ranked deck candidate."""

    deck_id: str
    deck_name: str
    colors: list[str]
    archetype: str | None
    meta_share: float
    total_score: float
    probability: float = Field(ge=0.0, le=1.0)
    confidence: str
    breakdown: dict[str, float]
    matched_cards: list[CardMatchResponse] = Field(default_factory=list)
    reasoning: list[str] = Field(default_factory=list)


class TrackedCardResponse(BaseModel):
    name: str
    turn: int
    expected: bool


class ObservationResponse(BaseModel):
    """
    Outcome of one observation.

    When confirmed is True, deck is set. Otherwise predictions holds the
    current ranking, which may be empty.
    """

    confirmed: bool
    cards_analyzed: int
    predictions: list[CandidateResponse] = Field(default_factory=list)
    deck: CandidateResponse | None = None
    new_card: TrackedCardResponse | None = None
    skipped_decks: list[str] = Field(default_factory=list)


class TopPredictionResponse(BaseModel):
    name: str
    probability: float
    confidence: str


class StatsResponse(BaseModel):
    state: str
    cards_analyzed: int
    current_turn: int
    colors_detected: list[str]
    predictions_count: int
    is_confirmed: bool
    confirmed_deck: str | None
    game_number: int
    top_prediction: TopPredictionResponse | None = None


def candidate_to_response(candidate: ScoredCandidate) -> CandidateResponse:
    deck = candidate.deck
    breakdown = candidate.breakdown
    archetype = deck.archetype
    return CandidateResponse(
        deck_id=deck.id,
        deck_name=deck.name,
        colors=sorted(deck.colors or ()),
        archetype=getattr(archetype, "value", archetype),
        meta_share=deck.meta_share or 0.0,
        total_score=candidate.total_score,
        probability=candidate.probability,
        confidence=candidate.confidence.value,
        breakdown={
            "signature": breakdown.signature,
            "key_cards": breakdown.key_cards,
            "colors": breakdown.colors,
            "timing": breakdown.timing,
            "meta_bonus": breakdown.meta_bonus,
            "archetype_multiplier": breakdown.archetype_multiplier,
            "consistency": breakdown.consistency,
        },
        matched_cards=[
            CardMatchResponse(
                card=match.card,
                match_type=match.match_type.value,
                score=match.score,
                turn=match.turn,
                role=match.role,
            )
            for match in candidate.matched_cards
        ],
        reasoning=list(candidate.reasoning),
    )


def observation_to_response(result: ObservationResult) -> ObservationResponse:
    return ObservationResponse(
        confirmed=result.confirmed,
        cards_analyzed=result.cards_analyzed,
        predictions=[candidate_to_response(c) for c in result.predictions],
        deck=candidate_to_response(result.deck) if result.deck is not None else None,
        new_card=(
            TrackedCardResponse(
                name=result.new_card.name,
                turn=result.new_card.turn,
                expected=result.new_card.expected,
            )
            if result.new_card is not None
            else None
        ),
        skipped_decks=list(result.skipped_decks),
    )


def stats_to_response(stats: SessionStats) -> StatsResponse:
    top = stats.top_prediction
    return StatsResponse(
        state=stats.state.value,
        cards_analyzed=stats.cards_analyzed,
        current_turn=stats.current_turn,
        colors_detected=list(stats.colors_detected),
        predictions_count=stats.predictions_count,
        is_confirmed=stats.is_confirmed,
        confirmed_deck=stats.confirmed_deck,
        game_number=stats.game_number,
        top_prediction=(
            TopPredictionResponse(
                name=top.name,
                probability=top.probability,
                confidence=top.confidence.value,
            )
            if top is not None
            else None
        ),
    )


@router.post("/cards", response_model=ApiResponse[ObservationResponse])
async def observe_card(
    request: ObserveCardRequest,
    session: SessionDep,
) -> ApiResponse[ObservationResponse]:
    """Record an opponent card and return the updated predictions."""
    result = await session.observe_card(
        request.name,
        turn=request.turn,
        timestamp=request.timestamp,
        colors=request.colors,
    )
    return ApiResponse.success(observation_to_response(result))


@router.post("/turn", response_model=ApiResponse[StatsResponse])
async def set_turn(request: SetTurnRequest, session: SessionDep) -> ApiResponse[StatsResponse]:
    """Update the current turn."""
    session.set_turn(request.turn)
    return ApiResponse.success(stats_to_response(session.get_stats()))


@router.post("/reset", response_model=ApiResponse[StatsResponse])
async def reset_session(session: SessionDep) -> ApiResponse[StatsResponse]:
    """Start a new game."""
    session.reset()
    return ApiResponse.success(stats_to_response(session.get_stats()))


@router.post("/confirm/{deck_id}", response_model=ApiResponse[CandidateResponse])
async def confirm_deck(deck_id: str, session: SessionDep) -> ApiResponse[CandidateResponse]:
    """Confirm one of the current predictions, ignoring thresholds."""
    candidate = session.confirm_manually(deck_id)
    if candidate is None:
        raise DeckNotFoundError(deck_id)
    return ApiResponse.success(candidate_to_response(candidate))


@router.post("/unconfirm", response_model=ApiResponse[StatsResponse])
async def unconfirm_deck(session: SessionDep) -> ApiResponse[StatsResponse]:
    """Drop the confirmed deck and resume predicting."""
    if not session.unconfirm():
        raise RefusalError(
            kind=FailureKind.NOT_CONFIRMED,
            message="No deck is confirmed in this game.",
            suggestion="Confirm a deck before unconfirming it.",
        )
    return ApiResponse.success(stats_to_response(session.get_stats()))


@router.get("/stats", response_model=ApiResponse[StatsResponse])
async def get_stats(session: SessionDep) -> ApiResponse[StatsResponse]:
    """Summarize the current game."""
    return ApiResponse.success(stats_to_response(session.get_stats()))
