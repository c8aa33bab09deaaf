"""
Deck Scoring — Weighted Evidence Model for One Deck.

Scores a single catalog deck against the cards observed so far. The
total is the sum of five additive factors scaled by an archetype
multiplier:

1. Signature cards (weight x signature multiplier)
2. Key cards (weight, x1.2 when played on the expected turn)
3. Color compatibility (-50 when the opponent showed an off-color)
4. Curve timing (+10 per card played on its expected turn)
5. Meta popularity (tiered bonus)
6. Archetype pattern (multiplier on the running total)

INVARIANT: Pure. Same deck, cards and context -> same score, except for
the consistency placeholder when no seeded random source is supplied.
INVARIANT: Only the final total is floored at 0.
"""

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass

from deckscout.models.deck_profile import Archetype, DeckProfile
from deckscout.models.observation import GameContext, ObservedCard
from deckscout.models.prediction import (
    CardMatch,
    Confidence,
    DeckScore,
    MatchType,
    ScoreBreakdown,
    ScoredCandidate,
)
from deckscout.services.card_matching import contains_keyword, names_match

logger = logging.getLogger(__name__)

# =============================================================================
# WEIGHTS
# =============================================================================

DEFAULT_SIGNATURE_MULTIPLIER = 2.0
TIMING_BONUS_MULTIPLIER = 1.2

COLOR_MISMATCH_PENALTY = -50.0
COLOR_EXACT_BONUS = 25.0 * 1.3
COLOR_COMPATIBLE_BONUS = 15.0

CURVE_MATCH_BONUS = 10.0

# (threshold, bonus), checked in order; meta_share must exceed the threshold
_META_TIERS: tuple[tuple[float, float], ...] = (
    (15.0, 20.0 * 1.5),
    (10.0, 10.0),
    (5.0, 5.0),
)

AGGRO_MULTIPLIER = 1.2
CONTROL_MULTIPLIER = 1.15
RAMP_MULTIPLIER = 1.25

_CONTROL_KEYWORDS = ("counter", "wrath", "verdict", "removal", "draw")
_RAMP_KEYWORDS = (
    "explore",
    "rampant",
    "growth",
    "land",
    "mana",
    "ramp",
    "beanstalk",
    "leyline",
    "domain",
)

# =============================================================================
# PROBABILITY & CONFIDENCE
# =============================================================================

PROBABILITY_SCORE_SCALE = 200.0
MAX_BASE_PROBABILITY = 0.9
META_PROBABILITY_WEIGHT = 0.1
MAX_PROBABILITY = 0.99

# (min total, min observed cards, tier), first hit wins
_CONFIDENCE_TIERS: tuple[tuple[float, int, Confidence], ...] = (
    (150.0, 4, Confidence.VERY_HIGH),
    (100.0, 3, Confidence.HIGH),
    (50.0, 2, Confidence.MEDIUM),
    (25.0, 0, Confidence.LOW),
)

# Consistency placeholder range: 60..99
_CONSISTENCY_BASE = 60
_CONSISTENCY_SPREAD = 40


@dataclass(frozen=True, slots=True)
class TimingRule:
    """A key card that is expected within a turn window."""

    keywords: tuple[str, ...]
    min_turn: int
    max_turn: int | None = None

    def applies(self, card_name: str, turn: int) -> bool:
        if not contains_keyword(card_name, self.keywords):
            return False
        if turn < self.min_turn:
            return False
        return self.max_turn is None or turn <= self.max_turn


_TIMING_RULES: tuple[TimingRule, ...] = (
    # Cheap burn and one-drops
    TimingRule(keywords=("bolt", "guide"), min_turn=1, max_turn=2),
    # Planeswalkers
    TimingRule(keywords=("teferi",), min_turn=3),
    # Top-end finishers
    TimingRule(keywords=("atraxa",), min_turn=5),
)


# =============================================================================
# FACTOR FUNCTIONS
# =============================================================================


def _find_observed(name: str, observed: Sequence[ObservedCard]) -> ObservedCard | None:
    """First observed card that fuzzy-matches name."""
    for card in observed:
        if names_match(name, card.name):
            return card
    return None


def _signature_score(
    deck: DeckProfile,
    observed: Sequence[ObservedCard],
    multiplier: float,
) -> tuple[float, list[CardMatch], list[str]]:
    score = 0.0
    matches: list[CardMatch] = []
    reasoning: list[str] = []

    for signature in deck.signature_cards or ():
        played = _find_observed(signature.name, observed)
        if played is None:
            continue
        card_score = signature.weight * multiplier
        score += card_score
        matches.append(
            CardMatch(
                card=signature.name,
                match_type=MatchType.SIGNATURE,
                score=card_score,
                turn=played.turn,
            )
        )
        reasoning.append(f"SIGNATURE: {signature.name} (+{card_score:.0f})")
        logger.debug("Signature hit for %s: %s (+%.0f)", deck.name, signature.name, card_score)

    return score, matches, reasoning


def _is_expected_timing(card_name: str, turn: int) -> bool:
    return any(rule.applies(card_name, turn) for rule in _TIMING_RULES)


def _key_card_score(
    deck: DeckProfile,
    observed: Sequence[ObservedCard],
) -> tuple[float, list[CardMatch], list[str]]:
    score = 0.0
    matches: list[CardMatch] = []
    reasoning: list[str] = []

    for key_card in deck.key_cards or ():
        played = _find_observed(key_card.name, observed)
        if played is None:
            continue
        card_score = key_card.effective_weight
        if _is_expected_timing(key_card.name, played.turn):
            card_score *= TIMING_BONUS_MULTIPLIER
            reasoning.append(f"TIMING: {key_card.name} on turn {played.turn}")
        score += card_score
        matches.append(
            CardMatch(
                card=key_card.name,
                match_type=MatchType.KEY,
                score=card_score,
                turn=played.turn,
                role=key_card.role,
            )
        )
        reasoning.append(f"KEY: {key_card.name} (+{card_score:.0f})")
        logger.debug("Key card hit for %s: %s (+%.0f)", deck.name, key_card.name, card_score)

    return score, matches, reasoning


def _color_score(deck: DeckProfile, context: GameContext) -> tuple[float, list[str]]:
    detected = set(context.colors_detected)
    deck_colors = set(deck.colors or ())

    if not detected:
        return 0.0, []

    off_colors = sorted(detected - deck_colors)
    if off_colors:
        return COLOR_MISMATCH_PENALTY, [
            f"INCOMPATIBLE: {''.join(off_colors)} not in deck ({COLOR_MISMATCH_PENALTY:.0f})"
        ]

    shown = "".join(sorted(detected))
    if detected == deck_colors:
        return COLOR_EXACT_BONUS, [f"COLOR EXACT: {shown} (+{COLOR_EXACT_BONUS:.1f})"]
    return COLOR_COMPATIBLE_BONUS, [f"COLOR OK: {shown} compatible (+{COLOR_COMPATIBLE_BONUS:.0f})"]


def _timing_score(deck: DeckProfile, observed: Sequence[ObservedCard]) -> tuple[float, list[str]]:
    curve = deck.expected_curve or {}
    score = 0.0
    reasoning: list[str] = []

    for card in observed:
        expected = curve.get(card.turn) or ()
        if any(names_match(card.name, fragment) for fragment in expected):
            score += CURVE_MATCH_BONUS
            reasoning.append(f"CURVE: {card.name} on turn {card.turn} (+{CURVE_MATCH_BONUS:.0f})")

    return score, reasoning


def _meta_bonus(deck: DeckProfile) -> tuple[float, list[str]]:
    meta_share = deck.meta_share or 0.0
    for threshold, bonus in _META_TIERS:
        if meta_share > threshold:
            return bonus, [f"META: {meta_share:.1f}% of the meta (+{bonus:.0f})"]
    return 0.0, []


def average_turn(observed: Sequence[ObservedCard]) -> float:
    """Mean turn of the observed cards, 0 when none."""
    if not observed:
        return 0.0
    return sum(card.turn for card in observed) / len(observed)


def _archetype_of(deck: DeckProfile) -> Archetype | None:
    archetype = deck.archetype
    if archetype is None or isinstance(archetype, Archetype):
        return archetype
    try:
        return Archetype(str(archetype).lower())
    except ValueError:
        return None


def _archetype_multiplier(
    deck: DeckProfile,
    observed: Sequence[ObservedCard],
) -> tuple[float, list[str]]:
    avg_turn = average_turn(observed)

    match _archetype_of(deck):
        case Archetype.AGGRO:
            if len(observed) >= 2 and avg_turn <= 3:
                return AGGRO_MULTIPLIER, ["AGGRO: fast play pattern (x1.2)"]
        case Archetype.CONTROL:
            if avg_turn >= 3 and any(
                contains_keyword(card.name, _CONTROL_KEYWORDS) for card in observed
            ):
                return CONTROL_MULTIPLIER, ["CONTROL: reactive play pattern (x1.15)"]
        case Archetype.RAMP:
            if any(contains_keyword(card.name, _RAMP_KEYWORDS) for card in observed):
                return RAMP_MULTIPLIER, ["RAMP: acceleration detected (x1.25)"]
    return 1.0, []


def consistency_score(deck: DeckProfile, rng: random.Random | None = None) -> int:
    """
    Placeholder consistency metric in [60, 99].

    Drawn at random: it carries no information about the deck yet. Pass
    a seeded random.Random for reproducible results.
    """
    source = rng if rng is not None else random
    return _CONSISTENCY_BASE + source.randrange(_CONSISTENCY_SPREAD)


# =============================================================================
# PUBLIC API
# =============================================================================


def score_deck(
    deck: DeckProfile,
    observed: Sequence[ObservedCard],
    context: GameContext,
    *,
    signature_multiplier: float = DEFAULT_SIGNATURE_MULTIPLIER,
    consistency_weight: float = 0.0,
    rng: random.Random | None = None,
) -> DeckScore:
    """
    Score one deck against the observed evidence.

    Args:
        deck: Catalog entry to score
        observed: Cards seen so far, in play order
        context: Current game context (detected colors)
        signature_multiplier: Factor applied to signature card weights
        consistency_weight: Share of the consistency placeholder added to the total
        rng: Random source for the consistency placeholder

    Returns:
        DeckScore with total, per-factor breakdown, matches and reasoning
    """
    signature, signature_matches, signature_reasons = _signature_score(
        deck, observed, signature_multiplier
    )
    key_cards, key_matches, key_reasons = _key_card_score(deck, observed)
    colors, color_reasons = _color_score(deck, context)
    timing, timing_reasons = _timing_score(deck, observed)
    meta_bonus, meta_reasons = _meta_bonus(deck)
    multiplier, archetype_reasons = _archetype_multiplier(deck, observed)
    consistency = consistency_score(deck, rng)

    partial = signature + key_cards + colors + timing + meta_bonus
    partial += consistency * consistency_weight
    total = max(0.0, partial) * multiplier

    return DeckScore(
        total=total,
        breakdown=ScoreBreakdown(
            signature=signature,
            key_cards=key_cards,
            colors=colors,
            timing=timing,
            meta_bonus=meta_bonus,
            archetype_multiplier=multiplier,
            consistency=float(consistency),
        ),
        matched_cards=tuple(signature_matches + key_matches),
        reasoning=tuple(
            signature_reasons
            + key_reasons
            + color_reasons
            + timing_reasons
            + meta_reasons
            + archetype_reasons
        ),
    )


def calculate_probability(total: float, deck: DeckProfile) -> float:
    """
    Convert a score into a probability in [0, 0.99].

    A score of 200 or more saturates the base at 0.9; meta share adds
    up to another 0.1.
    """
    base = min(total / PROBABILITY_SCORE_SCALE, MAX_BASE_PROBABILITY)
    meta_adjustment = (deck.meta_share or 0.0) / 100 * META_PROBABILITY_WEIGHT
    return max(0.0, min(base + meta_adjustment, MAX_PROBABILITY))


def calculate_confidence(total: float, cards_observed: int) -> Confidence:
    """Tier a score; each tier needs both the score and the sample size."""
    for min_total, min_cards, tier in _CONFIDENCE_TIERS:
        if total >= min_total and cards_observed >= min_cards:
            return tier
    return Confidence.VERY_LOW


def build_candidate(
    deck: DeckProfile,
    observed: Sequence[ObservedCard],
    context: GameContext,
    *,
    signature_multiplier: float = DEFAULT_SIGNATURE_MULTIPLIER,
    consistency_weight: float = 0.0,
    rng: random.Random | None = None,
) -> ScoredCandidate:
    """Score a deck and attach its probability and confidence."""
    score = score_deck(
        deck,
        observed,
        context,
        signature_multiplier=signature_multiplier,
        consistency_weight=consistency_weight,
        rng=rng,
    )
    return ScoredCandidate(
        deck=deck,
        total_score=score.total,
        breakdown=score.breakdown,
        probability=calculate_probability(score.total, deck),
        confidence=calculate_confidence(score.total, len(observed)),
        matched_cards=score.matched_cards,
        reasoning=score.reasoning,
    )
