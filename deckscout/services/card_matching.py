"""
Card Matching — Name Normalization and Fuzzy Lookup.

Card names arrive from log parsers and manual input with inconsistent
case and punctuation. Matching is deliberately loose: two names match
when either normalized form contains the other.

NOTE: Bidirectional containment means "Island" matches "Island
Sanctuary". This is kept for compatibility with existing catalogs.
"""

import re
from collections.abc import Iterable

from deckscout.models.deck_profile import (
    COLOR_BLACK,
    COLOR_BLUE,
    COLOR_GREEN,
    COLOR_RED,
    COLOR_WHITE,
)

_NON_ALNUM = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")

# =============================================================================
# COLOR DETECTION
# =============================================================================

# Basic land names reveal a color on sight
_BASIC_LAND_COLORS: dict[str, str] = {
    "plains": COLOR_WHITE,
    "island": COLOR_BLUE,
    "swamp": COLOR_BLACK,
    "mountain": COLOR_RED,
    "forest": COLOR_GREEN,
}


def normalize_card_name(name: str) -> str:
    """Lowercase, strip punctuation and collapse whitespace."""
    normalized = _NON_ALNUM.sub("", name.lower().strip())
    return _WHITESPACE.sub(" ", normalized).strip()


def names_match(a: str, b: str) -> bool:
    """
    Check whether two card names refer to the same card.

    Case-insensitive substring containment in either direction.
    Empty names never match.
    """
    left = normalize_card_name(a)
    right = normalize_card_name(b)
    if not left or not right:
        return False
    return left in right or right in left


def contains_keyword(name: str, keywords: Iterable[str]) -> bool:
    """Check whether a card name contains any of the given fragments."""
    lowered = name.lower()
    return any(keyword in lowered for keyword in keywords)


def detect_card_colors(name: str) -> frozenset[str]:
    """
    Infer the colors a card reveals from its name.

    Only basic lands are recognized; anything else reveals nothing.
    """
    lowered = name.lower()
    return frozenset(color for land, color in _BASIC_LAND_COLORS.items() if land in lowered)


def matches_any(name: str, candidates: Iterable[str]) -> bool:
    """Check whether a card name fuzzy-matches any candidate name."""
    return any(names_match(name, candidate) for candidate in candidates)
