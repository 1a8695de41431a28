"""
Tests for the cheating likelihood classifier.
"""
import pytest

from talentproof.core.cheating_detection import (
    calculate_cheating_likelihood,
    detect_cheating_signals,
)


class TestCheatingSignals:
    """Tests for individual signal checks."""

    def test_empty_times_short_circuit(self):
        """No recorded times gives 0.0 even with heavy switching."""
        result = detect_cheating_signals([], 10, 3)

        assert result.likelihood == 0.0
        assert result.signals == []

    def test_natural_behavior_is_clean(self):
        result = detect_cheating_signals([10, 20, 30], 0, 3)

        assert result.likelihood == 0.0
        assert result.signals == []

    def test_uniform_timing(self):
        """Identical times trigger only the uniformity signal."""
        result = detect_cheating_signals([10, 10, 10], 0, 3)

        assert result.signals == ["uniform_timing"]
        assert result.likelihood == pytest.approx(0.3)

    def test_rapid_answers_without_full_completion(self):
        """Fast uniform answers on a partial submission."""
        result = detect_cheating_signals([2, 2, 2, 2], 0, 5)

        assert result.signals == ["rapid_answers", "uniform_timing"]
        assert result.likelihood == pytest.approx(0.7)

    def test_exactly_half_rapid_does_not_trigger(self):
        """More than half the answers must be rapid."""
        result = detect_cheating_signals([1, 20], 0, 5)

        assert "rapid_answers" not in result.signals
        assert result.likelihood == 0.0

    def test_three_seconds_is_not_rapid(self):
        result = detect_cheating_signals([3, 3, 30], 0, 5)
        assert "rapid_answers" not in result.signals

    def test_excessive_switching(self):
        result = detect_cheating_signals([10, 20, 30], 3, 3)

        assert result.signals == ["excessive_switching"]
        assert result.likelihood == pytest.approx(0.2)

    def test_switch_ratio_at_threshold_does_not_trigger(self):
        """A ratio of exactly 0.8 is not excessive."""
        result = detect_cheating_signals([10, 20, 30], 4, 5)
        assert "excessive_switching" not in result.signals

    def test_fast_full_completion_requires_all_answers(self):
        partial = detect_cheating_signals([4, 1], 0, 3)
        complete = detect_cheating_signals([4, 1, 7], 0, 3)

        assert "fast_full_completion" not in partial.signals
        assert "fast_full_completion" in complete.signals

    def test_all_fast_identical_answers(self):
        """Rapid, uniform and fast full completion together reach 1.0."""
        result = detect_cheating_signals([1, 1, 1], 0, 3)

        assert result.signals == [
            "rapid_answers",
            "uniform_timing",
            "fast_full_completion",
        ]
        assert result.likelihood == pytest.approx(1.0)

    def test_likelihood_is_clamped(self):
        """All four signals sum past 1.0 but the result is bounded."""
        result = detect_cheating_signals([1, 1, 1], 3, 3)

        assert len(result.signals) == 4
        assert result.likelihood <= 1.0
        assert result.likelihood == pytest.approx(1.0)

    def test_zero_questions_skips_switching(self):
        result = detect_cheating_signals([10, 20], 5, 0)

        assert "excessive_switching" not in result.signals
        assert result.likelihood == 0.0


class TestCalculateCheatingLikelihood:
    """Tests for the likelihood-only helper."""

    def test_matches_detailed_assessment(self):
        times = [2, 2, 2, 2]
        assert calculate_cheating_likelihood(times, 0, 5) == pytest.approx(
            detect_cheating_signals(times, 0, 5).likelihood
        )

    def test_bounds(self):
        cases = [
            ([], 0, 3),
            ([1], 100, 1),
            ([1, 1, 1, 1], 4, 4),
            ([60, 1, 30], 1, 3),
        ]
        for times, switches, count in cases:
            likelihood = calculate_cheating_likelihood(times, switches, count)
            assert 0.0 <= likelihood <= 1.0
