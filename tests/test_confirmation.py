"""
Tests for the auto-confirmation policy.

These tests verify:
- Every threshold must hold at once
- Color-penalized decks are never auto-confirmed
- Manual confirmation ignores thresholds
"""

from deckscout.config import Settings
from deckscout.models.confirmation import (
    DEFAULT_CONFIRMATION_THRESHOLD,
    ConfirmationPolicy,
    ConfirmationSource,
)
from deckscout.models.deck_profile import DeckProfile
from deckscout.models.prediction import Confidence, ScoreBreakdown, ScoredCandidate
from deckscout.services.confirmation import (
    confirm_by_id,
    create_policy,
    evaluate_confirmation,
)


def make_candidate(
    deck_id: str = "mono-red",
    probability: float = 0.97,
    confidence: Confidence = Confidence.VERY_HIGH,
    colors: float = 32.5,
) -> ScoredCandidate:
    return ScoredCandidate(
        deck=DeckProfile(id=deck_id, name=deck_id.title()),
        total_score=400,
        breakdown=ScoreBreakdown(signature=300, colors=colors),
        probability=probability,
        confidence=confidence,
    )


class TestConfirmationPolicy:
    """Tests for policy defaults and construction."""

    def test_defaults(self) -> None:
        """Defaults are 0.95, very-high and three cards."""
        policy = ConfirmationPolicy()
        assert policy.probability_threshold == DEFAULT_CONFIRMATION_THRESHOLD == 0.95
        assert policy.required_confidence == Confidence.VERY_HIGH
        assert policy.min_cards == 3

    def test_create_policy_from_settings(self) -> None:
        """Thresholds come from Settings."""
        config = Settings(confirmation_threshold=0.9, min_cards_for_confirmation=4)
        policy = create_policy(config)

        assert policy.probability_threshold == 0.9
        assert policy.min_cards == 4


class TestEvaluateConfirmation:
    """Tests for evaluate_confirmation."""

    def test_confirms_when_all_thresholds_hold(self) -> None:
        """A strong, on-color top candidate is confirmed."""
        decision = evaluate_confirmation([make_candidate()], 4, ConfirmationPolicy())

        assert decision.confirmed is True
        assert decision.source == ConfirmationSource.AUTOMATIC
        assert decision.candidate is not None
        assert decision.candidate.deck.id == "mono-red"

    def test_no_candidates(self) -> None:
        """Nothing to confirm without candidates."""
        decision = evaluate_confirmation([], 5, ConfirmationPolicy())
        assert decision.confirmed is False
        assert decision.candidate is None

    def test_too_few_cards(self) -> None:
        """Fewer than three cards never confirm."""
        decision = evaluate_confirmation([make_candidate()], 2, ConfirmationPolicy())
        assert decision.confirmed is False
        assert "2 cards" in decision.reason

    def test_probability_below_threshold(self) -> None:
        """0.949 misses the 0.95 threshold."""
        decision = evaluate_confirmation(
            [make_candidate(probability=0.949)], 4, ConfirmationPolicy()
        )
        assert decision.confirmed is False

    def test_probability_at_threshold(self) -> None:
        """The threshold itself is enough."""
        decision = evaluate_confirmation(
            [make_candidate(probability=0.95)], 4, ConfirmationPolicy()
        )
        assert decision.confirmed is True

    def test_high_confidence_is_not_enough(self) -> None:
        """Only very-high confidence confirms."""
        decision = evaluate_confirmation(
            [make_candidate(confidence=Confidence.HIGH)], 4, ConfirmationPolicy()
        )
        assert decision.confirmed is False
        assert "high" in decision.reason

    def test_color_penalty_blocks_confirmation(self) -> None:
        """Overwhelming card evidence cannot confirm an off-color deck."""
        decision = evaluate_confirmation(
            [make_candidate(colors=-50)], 6, ConfirmationPolicy()
        )
        assert decision.confirmed is False
        assert "colors" in decision.reason

    def test_only_top_candidate_is_considered(self) -> None:
        """A strong runner-up never confirms."""
        weak_top = make_candidate("weak", probability=0.5, confidence=Confidence.MEDIUM)
        decision = evaluate_confirmation(
            [weak_top, make_candidate("strong")], 4, ConfirmationPolicy()
        )
        assert decision.confirmed is False

    def test_deterministic(self) -> None:
        """Same inputs, same decision."""
        candidates = [make_candidate()]
        first = evaluate_confirmation(candidates, 4, ConfirmationPolicy())
        second = evaluate_confirmation(candidates, 4, ConfirmationPolicy())
        assert first == second


class TestConfirmById:
    """Tests for manual confirmation."""

    def test_confirms_listed_deck_regardless_of_scores(self) -> None:
        """Thresholds do not apply to manual confirmation."""
        weak = make_candidate("weak", probability=0.1, confidence=Confidence.VERY_LOW)
        decision = confirm_by_id([make_candidate(), weak], "weak")

        assert decision.confirmed is True
        assert decision.source == ConfirmationSource.MANUAL
        assert decision.candidate is weak

    def test_unknown_deck(self) -> None:
        """A deck outside the predictions is not confirmed."""
        decision = confirm_by_id([make_candidate()], "azorius-control")

        assert decision.confirmed is False
        assert decision.candidate is None
