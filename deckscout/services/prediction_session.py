"""
Prediction Session — Per-Match State Machine.

A session owns everything known about the opponent in the current game
and turns each observed card into an updated ranking.

States:
- EMPTY: fewer cards than the prediction minimum; nothing is scored
- PREDICTING: every observation rescans the whole catalog
- CONFIRMED: observations are only checked against the confirmed deck

INVARIANT: CONFIRMED is sticky. Only reset() or unconfirm() leaves it.
INVARIANT: Invalid input is rejected before any state changes.
INVARIANT: reset() replaces all state in a single assignment.
"""

import asyncio
import logging
import random
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from deckscout.config import Settings, settings
from deckscout.models.deck_profile import ALL_COLORS
from deckscout.models.failure import InvalidCardError, InvalidTurnError
from deckscout.models.observation import GameContext, ObservedCard
from deckscout.models.prediction import (
    ObservationResult,
    ScoredCandidate,
    SessionEvent,
    SessionEventKind,
    SessionState,
    SessionStats,
    TopPrediction,
    TrackedCard,
)
from deckscout.services.card_matching import (
    detect_card_colors,
    matches_any,
    normalize_card_name,
)
from deckscout.services.catalog import DeckCatalogProvider, load_catalog
from deckscout.services.confirmation import (
    confirm_by_id,
    create_policy,
    evaluate_confirmation,
)
from deckscout.services.ranking import rank_candidates, score_catalog

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionEvent], None]


@dataclass
class _SessionData:
    """Everything a reset throws away."""

    context: GameContext
    observed_cards: list[ObservedCard] = field(default_factory=list)
    predictions: list[ScoredCandidate] = field(default_factory=list)
    confirmed_deck: ScoredCandidate | None = None


def _is_valid_turn(turn: object, minimum: int) -> bool:
    return isinstance(turn, int) and not isinstance(turn, bool) and turn >= minimum


class PredictionSession:
    """
    Infers the opponent's deck from the cards they play.

    Usage:
        session = PredictionSession(provider)
        session.set_turn(2)
        result = await session.observe_card("Monastery Swiftspear")

    Observations are serialized with an asyncio.Lock; the catalog fetch
    is the only await inside an observation.
    """

    def __init__(
        self,
        provider: DeckCatalogProvider,
        *,
        config: Settings | None = None,
        listener: SessionListener | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self._provider = provider
        self._config = config or settings
        self._policy = create_policy(self._config)
        self._listener = listener
        self._rng = rng
        self._clock = clock
        self._lock = asyncio.Lock()
        self._data = self._new_data(game_number=1)

    def _new_data(self, game_number: int) -> _SessionData:
        return _SessionData(
            context=GameContext.for_game(game_number, self._config.play_pattern_size)
        )

    # =========================================================================
    # STATE ACCESSORS
    # =========================================================================

    @property
    def state(self) -> SessionState:
        data = self._data
        if data.confirmed_deck is not None:
            return SessionState.CONFIRMED
        if len(data.observed_cards) >= self._config.min_cards_for_prediction:
            return SessionState.PREDICTING
        return SessionState.EMPTY

    @property
    def context(self) -> GameContext:
        return self._data.context

    @property
    def observed_cards(self) -> tuple[ObservedCard, ...]:
        return tuple(self._data.observed_cards)

    @property
    def predictions(self) -> tuple[ScoredCandidate, ...]:
        return tuple(self._data.predictions)

    @property
    def confirmed_deck(self) -> ScoredCandidate | None:
        return self._data.confirmed_deck

    # =========================================================================
    # EVENT API
    # =========================================================================

    async def observe_card(
        self,
        name: str,
        turn: int | None = None,
        timestamp: float | None = None,
        colors: Iterable[str] | None = None,
    ) -> ObservationResult:
        """
        Record a card the opponent played and update predictions.

        Args:
            name: Card name
            turn: Turn it was played on (defaults to the current turn)
            timestamp: Epoch seconds (defaults to now)
            colors: Colors the card revealed, if the event source knows them

        Returns:
            ObservationResult; confirmed results carry the deck, others
            carry the current ranking

        Raises:
            InvalidCardError: If name is empty or blank
            InvalidTurnError: If turn is negative or not an integer
        """
        async with self._lock:
            data = self._data
            card = self._make_card(name, turn, timestamp, colors, data.context)

            data.observed_cards.append(card)
            data.context.record_play(card)
            cards_analyzed = len(data.observed_cards)

            if data.confirmed_deck is not None:
                return self._track(data, data.confirmed_deck, card)

            if cards_analyzed < self._config.min_cards_for_prediction:
                logger.debug(
                    "Only %d cards observed, need %d to predict",
                    cards_analyzed,
                    self._config.min_cards_for_prediction,
                )
                data.predictions = []
                return ObservationResult(confirmed=False, cards_analyzed=cards_analyzed)

            decks = await load_catalog(self._provider)
            scan = score_catalog(
                decks,
                list(data.observed_cards),
                data.context,
                signature_multiplier=self._config.signature_multiplier,
                consistency_weight=self._config.consistency_weight,
                rng=self._rng,
            )
            predictions = rank_candidates(
                scan.candidates,
                max_predictions=self._config.max_predictions,
                top_probability_floor=self._config.top_probability_floor,
            )
            decision = evaluate_confirmation(predictions, cards_analyzed, self._policy)
            data.predictions = predictions

            if decision.confirmed and decision.candidate is not None:
                data.confirmed_deck = decision.candidate
                result = ObservationResult(
                    confirmed=True,
                    predictions=tuple(predictions),
                    deck=decision.candidate,
                    cards_analyzed=cards_analyzed,
                    skipped_decks=scan.skipped,
                )
                self._emit(
                    SessionEventKind.DECK_CONFIRMED,
                    data,
                    result=result,
                    candidate=decision.candidate,
                    details={"source": decision.source.value if decision.source else None},
                )
                return result

            if predictions:
                top = predictions[0]
                logger.debug(
                    "Top prediction after %d cards: %s (%.1f%%, %s)",
                    cards_analyzed,
                    top.deck.name,
                    top.probability * 100,
                    decision.reason,
                )
            result = ObservationResult(
                confirmed=False,
                predictions=tuple(predictions),
                cards_analyzed=cards_analyzed,
                skipped_decks=scan.skipped,
            )
            self._emit(SessionEventKind.PREDICTIONS_UPDATED, data, result=result)
            return result

    def set_turn(self, turn: int) -> None:
        """
        Update the current turn.

        Raises:
            InvalidTurnError: If turn is not a positive integer
        """
        if not _is_valid_turn(turn, minimum=1):
            raise InvalidTurnError(turn)
        self._data.context.turn = turn
        logger.debug("Turn updated: %d", turn)

    def reset(self) -> None:
        """Start a new game: drop all evidence and bump the game number."""
        game_number = self._data.context.game_number + 1
        self._data = self._new_data(game_number)
        logger.info("Prediction session reset for game %d", game_number)
        self._emit(SessionEventKind.GAME_RESET, self._data)

    def confirm_manually(self, deck_id: str) -> ScoredCandidate | None:
        """
        Confirm a deck from the current predictions, ignoring thresholds.

        Returns:
            The confirmed candidate, or None if deck_id is not predicted
        """
        data = self._data
        decision = confirm_by_id(data.predictions, deck_id)
        if not decision.confirmed or decision.candidate is None:
            logger.info("Manual confirmation rejected: %s", decision.reason)
            return None

        data.confirmed_deck = decision.candidate
        self._emit(
            SessionEventKind.DECK_CONFIRMED,
            data,
            candidate=decision.candidate,
            details={"source": decision.source.value if decision.source else None},
        )
        return decision.candidate

    def unconfirm(self) -> bool:
        """
        Drop the confirmed deck and resume predicting.

        Returns:
            True if a deck was confirmed
        """
        data = self._data
        if data.confirmed_deck is None:
            return False
        logger.info("Unconfirmed %s", data.confirmed_deck.deck.name)
        data.confirmed_deck = None
        return True

    def get_stats(self) -> SessionStats:
        """Summarize the session."""
        data = self._data
        top = data.predictions[0] if data.predictions else None
        return SessionStats(
            state=self.state,
            cards_analyzed=len(data.observed_cards),
            current_turn=data.context.turn,
            colors_detected=tuple(sorted(data.context.colors_detected)),
            predictions_count=len(data.predictions),
            is_confirmed=data.confirmed_deck is not None,
            confirmed_deck=data.confirmed_deck.deck.name if data.confirmed_deck else None,
            game_number=data.context.game_number,
            top_prediction=(
                TopPrediction(
                    name=top.deck.name,
                    probability=top.probability,
                    confidence=top.confidence,
                )
                if top is not None
                else None
            ),
        )

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _make_card(
        self,
        name: str,
        turn: int | None,
        timestamp: float | None,
        colors: Iterable[str] | None,
        context: GameContext,
    ) -> ObservedCard:
        if not isinstance(name, str) or not name.strip():
            raise InvalidCardError(name)
        if turn is not None and not _is_valid_turn(turn, minimum=0):
            raise InvalidTurnError(turn)

        clean_name = name.strip()
        reported = frozenset(color.upper() for color in colors or () if isinstance(color, str))
        return ObservedCard(
            name=clean_name,
            turn=context.turn if turn is None else turn,
            timestamp=self._clock() if timestamp is None else timestamp,
            normalized_name=normalize_card_name(clean_name),
            colors=(reported & ALL_COLORS) | detect_card_colors(clean_name),
        )

    def _track(
        self,
        data: _SessionData,
        confirmed: ScoredCandidate,
        card: ObservedCard,
    ) -> ObservationResult:
        expected = matches_any(card.name, confirmed.deck.all_card_names())
        if expected:
            logger.debug("Expected card for %s: %s", confirmed.deck.name, card.name)
        else:
            logger.info("Unexpected card for %s: %s", confirmed.deck.name, card.name)

        result = ObservationResult(
            confirmed=True,
            deck=confirmed,
            new_card=TrackedCard(name=card.name, turn=card.turn, expected=expected),
            cards_analyzed=len(data.observed_cards),
        )
        self._emit(SessionEventKind.CARD_TRACKED, data, result=result, candidate=confirmed)
        return result

    def _emit(
        self,
        kind: SessionEventKind,
        data: _SessionData,
        *,
        result: ObservationResult | None = None,
        candidate: ScoredCandidate | None = None,
        details: dict[str, object] | None = None,
    ) -> None:
        if self._listener is None:
            return
        event = SessionEvent(
            kind=kind,
            game_number=data.context.game_number,
            result=result,
            candidate=candidate,
            details=details or {},
        )
        try:
            self._listener(event)
        except Exception:  # noqa: BLE001  A listener must not break the session
            logger.exception("Session listener failed on %s", kind.value)
