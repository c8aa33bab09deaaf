"""
Tests for the deck scoring model.

Properties covered:
1. SIGNATURE DOMINANCE: a matching signature card strictly raises the score
2. ADDITIVE COLOR PENALTY: off-colors cost exactly 50 points, nothing more
3. FLOOR: only the final total is clamped at 0
"""

import random

import pytest

from deckscout.models.deck_profile import (
    Archetype,
    DeckProfile,
    KeyCard,
    SignatureCard,
)
from deckscout.models.observation import GameContext, ObservedCard
from deckscout.models.prediction import Confidence, MatchType
from deckscout.services.card_matching import detect_card_colors, normalize_card_name
from deckscout.services.scoring import (
    build_candidate,
    calculate_confidence,
    calculate_probability,
    consistency_score,
    score_deck,
)


def make_card(name: str, turn: int = 1) -> ObservedCard:
    return ObservedCard(
        name=name,
        turn=turn,
        timestamp=0.0,
        normalized_name=normalize_card_name(name),
        colors=detect_card_colors(name),
    )


def context_for(*cards: ObservedCard) -> GameContext:
    context = GameContext()
    for card in cards:
        context.record_play(card)
    return context


MONO_RED = DeckProfile(
    id="mono-red",
    name="Mono Red",
    colors=frozenset({"R"}),
    meta_share=12.0,
    signature_cards=(SignatureCard(name="Torbran, Thane of Red Fell", weight=100),),
)


# =============================================================================
# REFERENCE SCENARIO
# =============================================================================


class TestMonoRedScenario:
    """Forest then Torbran against a single Mono Red deck."""

    def setup_method(self) -> None:
        self.cards = [make_card("Forest", turn=2), make_card("Torbran, Thane of Red Fell", turn=2)]
        self.context = context_for(*self.cards)

    def test_total_score(self) -> None:
        """200 signature - 50 off-color + 10 meta = 160."""
        score = score_deck(MONO_RED, self.cards, self.context)

        assert score.breakdown.signature == 200
        assert score.breakdown.colors == -50
        assert score.breakdown.meta_bonus == 10
        assert score.breakdown.archetype_multiplier == 1.0
        assert score.total == pytest.approx(160)

    def test_probability(self) -> None:
        """min(160/200, 0.9) + 12/100 * 0.1."""
        assert calculate_probability(160, MONO_RED) == pytest.approx(0.812)

    def test_confidence_is_medium(self) -> None:
        """High needs 3 cards; with 2 the score falls to medium."""
        candidate = build_candidate(MONO_RED, self.cards, self.context)
        assert candidate.confidence == Confidence.MEDIUM

    def test_reasoning_trace(self) -> None:
        """Reasoning lists signature before color before meta."""
        score = score_deck(MONO_RED, self.cards, self.context)

        assert score.reasoning[0].startswith("SIGNATURE")
        assert score.reasoning[1].startswith("INCOMPATIBLE")
        assert score.reasoning[2].startswith("META")


# =============================================================================
# SIGNATURE & KEY CARDS
# =============================================================================


class TestSignatureScore:
    """Tests for signature card scoring."""

    def test_signature_strictly_increases_score(self) -> None:
        """Adding a matching signature card always raises the total."""
        base_cards = [make_card("Mountain"), make_card("Shock")]
        with_signature = [*base_cards, make_card("Torbran, Thane of Red Fell")]

        without = score_deck(MONO_RED, base_cards, context_for(*base_cards))
        with_sig = score_deck(MONO_RED, with_signature, context_for(*with_signature))

        assert with_sig.total > without.total

    def test_signature_matches_once(self) -> None:
        """Two copies of a signature card still count once."""
        cards = [make_card("Torbran, Thane of Red Fell"), make_card("Torbran, Thane of Red Fell")]
        score = score_deck(MONO_RED, cards, GameContext())

        assert score.breakdown.signature == 200
        assert len(score.matched_cards) == 1
        assert score.matched_cards[0].match_type == MatchType.SIGNATURE

    def test_fuzzy_signature_match(self) -> None:
        """A short reported name matches the catalog's full name."""
        score = score_deck(MONO_RED, [make_card("Torbran")], GameContext())
        assert score.breakdown.signature == 200

    def test_custom_multiplier(self) -> None:
        """The multiplier is configurable."""
        score = score_deck(
            MONO_RED,
            [make_card("Torbran")],
            GameContext(),
            signature_multiplier=3.0,
        )
        assert score.breakdown.signature == 300


class TestKeyCardScore:
    """Tests for key card scoring and timing bonuses."""

    def _deck(self, *key_cards: KeyCard) -> DeckProfile:
        return DeckProfile(id="d", name="Deck", key_cards=key_cards)

    def test_key_card_weight(self) -> None:
        """A key card adds its weight."""
        deck = self._deck(KeyCard(name="Play with Fire", weight=70))
        score = score_deck(deck, [make_card("Play with Fire", turn=4)], GameContext())
        assert score.breakdown.key_cards == 70

    def test_unspecified_weight_defaults_to_50(self) -> None:
        """A key card without a weight counts as 50."""
        deck = self._deck(KeyCard(name="Play with Fire"))
        score = score_deck(deck, [make_card("Play with Fire", turn=4)], GameContext())
        assert score.breakdown.key_cards == 50

    def test_burn_on_expected_turn_gets_bonus(self) -> None:
        """Bolt on turn 1-2 scores x1.2."""
        deck = self._deck(KeyCard(name="Lightning Bolt", weight=95))

        early = score_deck(deck, [make_card("Lightning Bolt", turn=2)], GameContext())
        late = score_deck(deck, [make_card("Lightning Bolt", turn=3)], GameContext())

        assert early.breakdown.key_cards == pytest.approx(114)
        assert late.breakdown.key_cards == pytest.approx(95)

    def test_planeswalker_timing(self) -> None:
        """Teferi gets the bonus from turn 3."""
        deck = self._deck(KeyCard(name="Teferi, Hero of Dominaria", weight=90))

        on_time = score_deck(deck, [make_card("Teferi", turn=3)], GameContext())
        early = score_deck(deck, [make_card("Teferi", turn=2)], GameContext())

        assert on_time.breakdown.key_cards == pytest.approx(108)
        assert early.breakdown.key_cards == pytest.approx(90)

    def test_finisher_timing(self) -> None:
        """Atraxa gets the bonus from turn 5."""
        deck = self._deck(KeyCard(name="Atraxa, Grand Unifier", weight=90))
        score = score_deck(deck, [make_card("Atraxa, Grand Unifier", turn=5)], GameContext())
        assert score.breakdown.key_cards == pytest.approx(108)

    def test_key_and_signature_scored_independently(self) -> None:
        """A card listed as both signature and key scores twice."""
        deck = DeckProfile(
            id="d",
            name="Deck",
            signature_cards=(SignatureCard(name="Goblin Guide", weight=100),),
            key_cards=(KeyCard(name="Goblin Guide", weight=90),),
        )
        score = score_deck(deck, [make_card("Goblin Guide", turn=4)], GameContext())

        assert score.breakdown.signature == 200
        assert score.breakdown.key_cards == 90
        assert {m.match_type for m in score.matched_cards} == {MatchType.SIGNATURE, MatchType.KEY}


# =============================================================================
# COLORS, CURVE, META
# =============================================================================


class TestColorScore:
    """Tests for color compatibility."""

    def test_no_colors_detected(self) -> None:
        """No detected colors contribute nothing."""
        score = score_deck(MONO_RED, [make_card("Shock")], GameContext())
        assert score.breakdown.colors == 0

    def test_exact_color_match(self) -> None:
        """Detected colors equal to the deck's earn the full bonus."""
        cards = [make_card("Mountain")]
        score = score_deck(MONO_RED, cards, context_for(*cards))
        assert score.breakdown.colors == pytest.approx(32.5)

    def test_compatible_subset(self) -> None:
        """A subset of the deck's colors earns the smaller bonus."""
        deck = DeckProfile(id="gruul", name="Gruul", colors=frozenset({"R", "G"}))
        cards = [make_card("Mountain")]
        score = score_deck(deck, cards, context_for(*cards))
        assert score.breakdown.colors == 15

    def test_off_color_penalty_is_additive(self) -> None:
        """The penalty subtracts 50; the signature evidence still counts."""
        cards = [make_card("Island"), make_card("Torbran")]
        score = score_deck(MONO_RED, cards, context_for(*cards))

        assert score.breakdown.colors == -50
        assert score.breakdown.color_penalized
        assert score.total == pytest.approx(200 - 50 + 10)

    def test_only_final_total_is_floored(self) -> None:
        """Penalty with no other evidence floors at 0, not below."""
        deck = DeckProfile(id="d", name="Deck", colors=frozenset({"W"}))
        cards = [make_card("Mountain")]
        score = score_deck(deck, cards, context_for(*cards))

        assert score.breakdown.colors == -50
        assert score.total == 0


class TestCurveScore:
    """Tests for expected-curve timing."""

    def test_card_on_expected_turn(self) -> None:
        """A card on its curve turn adds 10."""
        deck = DeckProfile(id="d", name="Deck", expected_curve={1: ("Swiftspear",)})

        on_curve = score_deck(deck, [make_card("Monastery Swiftspear", turn=1)], GameContext())
        off_curve = score_deck(deck, [make_card("Monastery Swiftspear", turn=2)], GameContext())

        assert on_curve.breakdown.timing == 10
        assert off_curve.breakdown.timing == 0

    def test_each_card_counts(self) -> None:
        """Every on-curve card counts separately."""
        deck = DeckProfile(
            id="d",
            name="Deck",
            expected_curve={1: ("Swiftspear", "Goblin Guide")},
        )
        cards = [make_card("Monastery Swiftspear"), make_card("Goblin Guide")]
        assert score_deck(deck, cards, GameContext()).breakdown.timing == 20


class TestMetaBonus:
    """Tests for meta share tiers."""

    @pytest.mark.parametrize(
        ("meta_share", "bonus"),
        [(16.0, 30.0), (15.0, 10.0), (10.5, 10.0), (10.0, 5.0), (5.0, 0.0), (0.0, 0.0)],
    )
    def test_tiers(self, meta_share: float, bonus: float) -> None:
        """Each tier boundary is strict."""
        deck = DeckProfile(id="d", name="Deck", meta_share=meta_share)
        assert score_deck(deck, [], GameContext()).breakdown.meta_bonus == bonus


# =============================================================================
# ARCHETYPE MULTIPLIER
# =============================================================================


class TestArchetypeMultiplier:
    """Tests for play-pattern multipliers."""

    def test_aggro_fast_pattern(self) -> None:
        """Aggro gets x1.2 with 2+ cards averaging turn <= 3."""
        deck = DeckProfile(
            id="d",
            name="Deck",
            archetype=Archetype.AGGRO,
            signature_cards=(SignatureCard(name="Goblin Guide", weight=100),),
            meta_share=12.0,
        )
        cards = [make_card("Goblin Guide", turn=1), make_card("Shock", turn=2)]
        score = score_deck(deck, cards, GameContext())

        assert score.breakdown.archetype_multiplier == 1.2
        assert score.total == pytest.approx((200 + 10) * 1.2)

    def test_aggro_needs_two_cards(self) -> None:
        """One fast card is not an aggro pattern."""
        deck = DeckProfile(id="d", name="Deck", archetype=Archetype.AGGRO)
        score = score_deck(deck, [make_card("Goblin Guide", turn=1)], GameContext())
        assert score.breakdown.archetype_multiplier == 1.0

    def test_aggro_slow_pattern(self) -> None:
        """A late average turn is not aggro."""
        deck = DeckProfile(id="d", name="Deck", archetype=Archetype.AGGRO)
        cards = [make_card("Shock", turn=4), make_card("Shock", turn=5)]
        assert score_deck(deck, cards, GameContext()).breakdown.archetype_multiplier == 1.0

    def test_control_pattern(self) -> None:
        """Late reactive cards trigger the control multiplier."""
        deck = DeckProfile(id="d", name="Deck", archetype=Archetype.CONTROL)

        reactive = [make_card("Counterspell", turn=3), make_card("Memory Deluge", turn=4)]
        early = [make_card("Counterspell", turn=1), make_card("Memory Deluge", turn=2)]

        assert score_deck(deck, reactive, GameContext()).breakdown.archetype_multiplier == 1.15
        assert score_deck(deck, early, GameContext()).breakdown.archetype_multiplier == 1.0

    def test_ramp_pattern(self) -> None:
        """Acceleration cards trigger the ramp multiplier."""
        deck = DeckProfile(id="d", name="Deck", archetype=Archetype.RAMP)
        cards = [make_card("Up the Beanstalk", turn=2)]
        assert score_deck(deck, cards, GameContext()).breakdown.archetype_multiplier == 1.25

    def test_archetype_given_as_string(self) -> None:
        """Providers sending plain strings still get the modifier."""
        deck = DeckProfile(id="d", name="Deck", archetype="ramp")  # type: ignore[arg-type]
        cards = [make_card("Explore", turn=2)]
        assert score_deck(deck, cards, GameContext()).breakdown.archetype_multiplier == 1.25

    def test_unknown_archetype(self) -> None:
        """Unknown archetypes keep a multiplier of 1."""
        deck = DeckProfile(id="d", name="Deck", archetype="brew")  # type: ignore[arg-type]
        cards = [make_card("Explore", turn=2), make_card("Shock", turn=1)]
        assert score_deck(deck, cards, GameContext()).breakdown.archetype_multiplier == 1.0


# =============================================================================
# PROBABILITY, CONFIDENCE, CONSISTENCY
# =============================================================================


class TestProbability:
    """Tests for calculate_probability."""

    def test_base_is_capped(self) -> None:
        """The score part never exceeds 0.9."""
        deck = DeckProfile(id="d", name="Deck")
        assert calculate_probability(10_000, deck) == pytest.approx(0.9)

    def test_never_above_099(self) -> None:
        """Meta share cannot push past 0.99."""
        deck = DeckProfile(id="d", name="Deck", meta_share=100.0)
        assert calculate_probability(10_000, deck) == pytest.approx(0.99)

    def test_zero_score(self) -> None:
        """No score, no probability beyond meta share."""
        deck = DeckProfile(id="d", name="Deck", meta_share=20.0)
        assert calculate_probability(0, deck) == pytest.approx(0.02)


class TestConfidence:
    """Tests for confidence tiers."""

    @pytest.mark.parametrize(
        ("total", "cards", "expected"),
        [
            (150, 4, Confidence.VERY_HIGH),
            (150, 3, Confidence.HIGH),
            (100, 3, Confidence.HIGH),
            (100, 2, Confidence.MEDIUM),
            (50, 2, Confidence.MEDIUM),
            (50, 1, Confidence.LOW),
            (25, 0, Confidence.LOW),
            (24.9, 10, Confidence.VERY_LOW),
        ],
    )
    def test_tiers(self, total: float, cards: int, expected: Confidence) -> None:
        """Each tier needs both the score and the card count."""
        assert calculate_confidence(total, cards) == expected


class TestConsistency:
    """Tests for the consistency placeholder."""

    def test_seeded_source_is_reproducible(self) -> None:
        """Equal seeds give equal values."""
        first = consistency_score(MONO_RED, random.Random(7))
        second = consistency_score(MONO_RED, random.Random(7))
        assert first == second

    def test_range(self) -> None:
        """Values stay within 60 to 99."""
        rng = random.Random(1)
        values = {consistency_score(MONO_RED, rng) for _ in range(500)}
        assert min(values) >= 60
        assert max(values) <= 99

    def test_zero_weight_leaves_total_unchanged(self) -> None:
        """The default weight keeps totals as documented."""
        cards = [make_card("Torbran")]
        score = score_deck(MONO_RED, cards, GameContext(), rng=random.Random(3))

        assert 60 <= score.breakdown.consistency <= 99
        assert score.total == pytest.approx(210)

    def test_weight_adds_to_total(self) -> None:
        """A positive weight adds to the total."""
        cards = [make_card("Torbran")]
        expected = consistency_score(MONO_RED, random.Random(3))

        score = score_deck(
            MONO_RED,
            cards,
            GameContext(),
            consistency_weight=0.5,
            rng=random.Random(3),
        )

        assert score.total == pytest.approx(210 + expected * 0.5)


class TestMalformedDecks:
    """Missing deck fields are treated as absent."""

    def test_missing_fields_score_as_absent(self) -> None:
        """None in place of lists and numbers scores as zero."""
        deck = DeckProfile(
            id="bare",
            name="Bare",
            colors=None,  # type: ignore[arg-type]
            meta_share=None,  # type: ignore[arg-type]
            signature_cards=None,  # type: ignore[arg-type]
            key_cards=None,  # type: ignore[arg-type]
            expected_curve=None,  # type: ignore[arg-type]
        )
        cards = [make_card("Mountain"), make_card("Shock")]
        score = score_deck(deck, cards, context_for(*cards))

        assert score.breakdown.signature == 0
        assert score.breakdown.key_cards == 0
        assert score.breakdown.colors == -50
        assert score.total == 0
