"""
Deck Profile — Catalog Entry for a Known Competitive Deck.

A DeckProfile is supplied by the meta-data provider and is read-only to
the prediction engine. Every field except identity is optional in
practice: a profile with missing lists is scored with those
contributions treated as absent.

INVARIANT: Card weights are non-negative.
INVARIANT: signature_cards and key_cards may share names; they are
scored independently.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class Archetype(str, Enum):
    """Common deck archetypes."""

    AGGRO = "aggro"
    MIDRANGE = "midrange"
    CONTROL = "control"
    COMBO = "combo"
    TEMPO = "tempo"
    RAMP = "ramp"


# Standard MTG color codes
COLOR_WHITE = "W"
COLOR_BLUE = "U"
COLOR_BLACK = "B"
COLOR_RED = "R"
COLOR_GREEN = "G"

ALL_COLORS = frozenset({COLOR_WHITE, COLOR_BLUE, COLOR_BLACK, COLOR_RED, COLOR_GREEN})

# Key cards without an explicit weight score as this
DEFAULT_KEY_CARD_WEIGHT = 50.0


@dataclass(frozen=True, slots=True)
class SignatureCard:
    """A card whose presence is near-conclusive evidence for one deck."""

    name: str
    weight: float = 100.0

    def __post_init__(self) -> None:
        if self.weight < 0:
            raise ValueError(f"weight must be non-negative, got {self.weight}")


@dataclass(frozen=True, slots=True)
class KeyCard:
    """
    A supporting card that contributes partial identifying evidence.

    Attributes:
        name: Card name
        weight: Evidence weight in [0, 95]; None means unspecified
        role: Free-form role tag (removal, threat, counter, ...)
    """

    name: str
    weight: float | None = None
    role: str = "threat"

    def __post_init__(self) -> None:
        if self.weight is not None and self.weight < 0:
            raise ValueError(f"weight must be non-negative, got {self.weight}")

    @property
    def effective_weight(self) -> float:
        """Weight used for scoring."""
        return DEFAULT_KEY_CARD_WEIGHT if self.weight is None else self.weight


@dataclass(frozen=True, slots=True)
class DeckCard:
    """A maindeck or sideboard entry."""

    name: str
    quantity: int = 1


@dataclass(frozen=True)
class DeckProfile:
    """
    A competitive deck from the metagame, as seen by the predictor.

    Attributes:
        id: Stable identifier (slug of the name)
        name: Deck archetype name (e.g., "Mono-Red Aggro")
        colors: Color identity as color codes
        meta_share: Percentage of the meta this deck represents (0-100)
        archetype: Play style category, if known
        signature_cards: Near-unique identifiers for this deck
        key_cards: Secondary identifying cards
        expected_curve: Turn number -> card-name fragments typically played then
        mainboard: Full maindeck list (may be empty)
        sideboard: Sideboard list (may be empty)
        rank: Position in the meta ranking (0 when unknown)
        strategy: Short description of the game plan
        weakness: Short description of what beats it
    """

    id: str
    name: str
    colors: frozenset[str] = frozenset()
    meta_share: float = 0.0
    archetype: Archetype | None = None
    signature_cards: tuple[SignatureCard, ...] = ()
    key_cards: tuple[KeyCard, ...] = ()
    expected_curve: Mapping[int, tuple[str, ...]] = field(default_factory=dict)
    mainboard: tuple[DeckCard, ...] = ()
    sideboard: tuple[DeckCard, ...] = ()
    rank: int = 0
    strategy: str = ""
    weakness: str = ""

    def all_card_names(self) -> list[str]:
        """Every card name this deck is known to contain, signature first."""
        names = [card.name for card in self.signature_cards or ()]
        names.extend(card.name for card in self.key_cards or ())
        names.extend(card.name for card in self.mainboard or ())
        return names

    def total_cards(self) -> int:
        """Total number of cards (counting quantities)."""
        main_count = sum(card.quantity for card in self.mainboard or ())
        side_count = sum(card.quantity for card in self.sideboard or ())
        return main_count + side_count
