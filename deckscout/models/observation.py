"""
Observation models — what the session knows about the current game.

INVARIANT: ObservedCard is immutable once created.
INVARIANT: colors_detected only grows within a game.
"""

from collections import deque
from dataclasses import dataclass, field

DEFAULT_PLAY_PATTERN_SIZE = 10


@dataclass(frozen=True, slots=True)
class ObservedCard:
    """
    A card the opponent was seen playing.

    Attributes:
        name: Card name as reported by the event source
        turn: Turn the card was played on
        timestamp: Epoch seconds when the card was observed
        normalized_name: Lowercased, punctuation-free form of name
        colors: Color codes this card revealed
    """

    name: str
    turn: int
    timestamp: float
    normalized_name: str
    colors: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class PlayRecord:
    """One entry of the recent play pattern."""

    turn: int
    card: str
    colors: frozenset[str] = frozenset()


def _play_pattern_buffer() -> deque[PlayRecord]:
    return deque(maxlen=DEFAULT_PLAY_PATTERN_SIZE)


@dataclass
class GameContext:
    """
    Mutable per-game context owned by a prediction session.

    Attributes:
        turn: Current turn number (0 before the first turn is reported)
        colors_detected: Colors revealed by the opponent so far
        play_pattern: Ring buffer of the most recent plays
        game_number: 1-based game counter, incremented on every reset
    """

    turn: int = 0
    colors_detected: set[str] = field(default_factory=set)
    play_pattern: deque[PlayRecord] = field(default_factory=_play_pattern_buffer)
    game_number: int = 1

    @classmethod
    def for_game(
        cls,
        game_number: int,
        play_pattern_size: int = DEFAULT_PLAY_PATTERN_SIZE,
    ) -> "GameContext":
        """Create a fresh context for the given game."""
        return cls(game_number=game_number, play_pattern=deque(maxlen=play_pattern_size))

    def record_play(self, card: ObservedCard) -> None:
        """Fold an observed card into the context."""
        self.colors_detected.update(card.colors)
        self.play_pattern.append(PlayRecord(turn=card.turn, card=card.name, colors=card.colors))
