"""
Deck Catalog — Provider Contract and Raw Deck Processing.

The prediction engine reads the catalog through DeckCatalogProvider.
Providers may be slow, stale or broken; load_catalog turns every
failure into an empty catalog so a prediction pass degrades to "no
predictions" instead of raising.
"""

import logging
import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from deckscout.models.deck_profile import (
    ALL_COLORS,
    Archetype,
    DeckCard,
    DeckProfile,
    KeyCard,
    SignatureCard,
)

logger = logging.getLogger(__name__)

# Raw key cards at or above this weight become signature cards
SIGNATURE_WEIGHT_THRESHOLD = 80
SIGNATURE_WEIGHT = 100.0
MAX_SIGNATURE_CARDS = 3

# Raw key cards below this weight are dropped
KEY_CARD_MIN_WEIGHT = 50
KEY_CARD_MAX_WEIGHT = 95.0
MAX_KEY_CARDS = 12

DECK_ID_MAX_LENGTH = 30

_ARCHETYPE_NAME_HINTS: tuple[tuple[tuple[str, ...], Archetype], ...] = (
    (("aggro", "burn"), Archetype.AGGRO),
    (("control",), Archetype.CONTROL),
    (("midrange", "value"), Archetype.MIDRANGE),
    (("combo",), Archetype.COMBO),
    (("ramp",), Archetype.RAMP),
    (("tempo",), Archetype.TEMPO),
)

_ROLE_HINTS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("bolt", "shock"), "removal"),
    (("teferi", "jace"), "planeswalker"),
    (("counterspell", "negate"), "counter"),
    (("mountain", "island"), "mana"),
)

_STRATEGIES: dict[Archetype, str] = {
    Archetype.AGGRO: "Deal 20 damage as quickly as possible",
    Archetype.CONTROL: "Control the game until you can deploy win conditions",
    Archetype.MIDRANGE: "Trade resources efficiently and deploy threats",
    Archetype.COMBO: "Assemble combo pieces and win quickly",
    Archetype.RAMP: "Accelerate mana to deploy big threats early",
    Archetype.TEMPO: "Deploy cheap threats and protect them",
}

_WEAKNESSES: dict[Archetype, str] = {
    Archetype.AGGRO: "Lifegain, board wipes, and bigger creatures",
    Archetype.CONTROL: "Fast aggro and uncounterable threats",
    Archetype.MIDRANGE: "Combo decks and over-the-top strategies",
    Archetype.COMBO: "Disruption and fast aggro pressure",
    Archetype.RAMP: "Fast aggro and mana disruption",
    Archetype.TEMPO: "Cheap removal and sweepers",
}


@runtime_checkable
class DeckCatalogProvider(Protocol):
    """Read interface of the meta-data provider."""

    async def get_deck_catalog(self) -> list[DeckProfile]:
        """Return the known decks. May be slow, stale, or raise."""
        ...


class StaticDeckCatalog:
    """A provider backed by an in-memory list of decks."""

    def __init__(self, decks: Iterable[DeckProfile]):
        self._decks = list(decks)

    async def get_deck_catalog(self) -> list[DeckProfile]:
        return list(self._decks)

    def __len__(self) -> int:
        return len(self._decks)


async def load_catalog(provider: DeckCatalogProvider) -> list[DeckProfile]:
    """
    Fetch the catalog, degrading any failure to an empty list.

    Missing data is a valid state: the caller shows "no data" rather
    than an error.
    """
    try:
        decks = await provider.get_deck_catalog()
    except Exception:  # noqa: BLE001  Provider failures are non-fatal
        logger.warning("Deck catalog unavailable", exc_info=True)
        return []

    if not decks:
        logger.warning("Deck catalog is empty")
        return []
    return list(decks)


# =============================================================================
# RAW DECK PROCESSING
# =============================================================================


def generate_deck_id(name: str) -> str:
    """Slug a deck name into a stable id."""
    slug = re.sub(r"[^a-z0-9\s]", "", name.lower())
    slug = re.sub(r"\s+", "-", slug.strip())
    return slug[:DECK_ID_MAX_LENGTH]


def detect_archetype(name: str, colors: Sequence[str] = ()) -> Archetype:
    """Guess an archetype from a deck name, falling back on color count."""
    lowered = name.lower()
    for hints, archetype in _ARCHETYPE_NAME_HINTS:
        if any(hint in lowered for hint in hints):
            return archetype

    if len(colors) == 1:
        if "red" in lowered:
            return Archetype.AGGRO
        if "blue" in lowered:
            return Archetype.CONTROL

    return Archetype.MIDRANGE


def infer_card_role(card_name: str) -> str:
    """Guess a card's role from its name."""
    lowered = card_name.lower()
    for hints, role in _ROLE_HINTS:
        if any(hint in lowered for hint in hints):
            return role
    return "threat"


def _weight_of(raw_card: Mapping[str, Any]) -> float:
    try:
        return float(raw_card.get("weight") or 0)
    except (TypeError, ValueError):
        return 0.0


def _signature_cards(raw_key_cards: Sequence[Mapping[str, Any]]) -> tuple[SignatureCard, ...]:
    strong = [card for card in raw_key_cards if _weight_of(card) >= SIGNATURE_WEIGHT_THRESHOLD]
    return tuple(
        SignatureCard(name=card["name"], weight=SIGNATURE_WEIGHT)
        for card in strong[:MAX_SIGNATURE_CARDS]
    )


def _key_cards(raw_key_cards: Sequence[Mapping[str, Any]]) -> tuple[KeyCard, ...]:
    kept = [card for card in raw_key_cards if _weight_of(card) >= KEY_CARD_MIN_WEIGHT]
    processed = [
        KeyCard(
            name=card["name"],
            weight=min(_weight_of(card), KEY_CARD_MAX_WEIGHT),
            role=card.get("role") or infer_card_role(card["name"]),
        )
        for card in kept
    ]
    processed.sort(key=lambda card: card.effective_weight, reverse=True)
    return tuple(processed[:MAX_KEY_CARDS])


def _deck_cards(raw_cards: Iterable[Mapping[str, Any]] | None) -> tuple[DeckCard, ...]:
    return tuple(
        DeckCard(name=card["name"], quantity=int(card.get("quantity") or 1))
        for card in raw_cards or ()
        if card.get("name")
    )


def _expected_curve(raw_curve: Mapping[Any, Iterable[str]] | None) -> dict[int, tuple[str, ...]]:
    if not raw_curve:
        return {}
    return {int(turn): tuple(fragments) for turn, fragments in raw_curve.items()}


def build_deck_profile(raw: Mapping[str, Any]) -> DeckProfile:
    """
    Build a DeckProfile from a raw provider record.

    Raw key cards are split into signature cards (weight >= 80, max 3,
    weight forced to 100) and key cards (weight >= 50, capped at 95,
    heaviest 12 kept).

    Raises:
        ValueError: If the record has no name
    """
    name = (raw.get("name") or "").strip()
    if not name:
        raise ValueError("Deck record has no name")

    colors = [color for color in raw.get("colors") or () if color in ALL_COLORS]
    raw_key_cards = [card for card in raw.get("keyCards") or () if card.get("name")]

    archetype_value = raw.get("archetype")
    try:
        archetype = (
            Archetype(archetype_value) if archetype_value else detect_archetype(name, colors)
        )
    except ValueError:
        archetype = detect_archetype(name, colors)

    try:
        meta_share = float(raw.get("metaShare") or 0)
    except (TypeError, ValueError):
        meta_share = 0.0

    return DeckProfile(
        id=raw.get("id") or generate_deck_id(name),
        name=name,
        colors=frozenset(colors),
        meta_share=meta_share,
        archetype=archetype,
        signature_cards=_signature_cards(raw_key_cards),
        key_cards=_key_cards(raw_key_cards),
        expected_curve=_expected_curve(raw.get("expectedCurve")),
        mainboard=_deck_cards(raw.get("mainboard")),
        sideboard=_deck_cards(raw.get("sideboard")),
        rank=int(raw.get("rank") or 0),
        strategy=raw.get("strategy") or _STRATEGIES[archetype],
        weakness=raw.get("weakness") or _WEAKNESSES[archetype],
    )


def build_catalog(raw_decks: Iterable[Mapping[str, Any]]) -> list[DeckProfile]:
    """Build profiles for every usable raw record, skipping broken ones."""
    profiles: list[DeckProfile] = []
    for raw in raw_decks:
        try:
            profiles.append(build_deck_profile(raw))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping raw deck %r: %s", raw, exc)
    return profiles
