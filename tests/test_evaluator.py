"""
Tests for quiz submission evaluation.
"""
import re

import pytest

from talentproof.core.answer_verification import OptionMatchVerifier
from talentproof.core.evaluator import (
    QuizEvaluator,
    Telemetry,
    generate_certificate_id,
    generate_encrypted_score,
    level_for_score,
)
from talentproof.core.session_store import SessionNotFoundError

# Longer than the 5-character minimum, so counted correct by the default verifier
LONG_ANSWER = "ciphertext"
NATURAL_TELEMETRY = Telemetry(answer_times=(10, 20, 30), switch_counts=(0, 0, 0))


class TestLevels:
    """Tests for score to level mapping."""

    @pytest.mark.parametrize(
        "score,level",
        [
            (1.0, 5),
            (0.9, 5),
            (0.89, 4),
            (0.7, 4),
            (0.65, 3),
            (0.6, 3),
            (0.55, 2),
            (0.5, 2),
            (0.49, 1),
            (0.0, 1),
        ],
    )
    def test_breakpoints(self, score, level):
        assert level_for_score(score) == level

    def test_flagged_is_minimum_level(self):
        assert level_for_score(1.0, is_flagged=True) == 1


class TestTokens:
    """Tests for opaque score and certificate tokens."""

    def test_encrypted_score_format(self):
        token = generate_encrypted_score(3, "math")
        assert re.fullmatch(r"enc_math_3_[0-9a-f]+", token)

    def test_certificate_format(self):
        token = generate_certificate_id(2, "security", 0.25)
        assert re.fullmatch(r"CERT_SECURITY_2_025_[0-9a-f]{8}", token)

    def test_certificate_severity_truncates(self):
        token = generate_certificate_id(1, "math", 0.079)
        assert token.startswith("CERT_MATH_1_007_")

    def test_tokens_are_salted(self):
        assert generate_encrypted_score(3, "math") != generate_encrypted_score(3, "math")


class TestQuizEvaluator:
    """End-to-end evaluation against a session store."""

    def test_perfect_natural_submission_passes(self, store, evaluator):
        session_id = store.create("alice", "math", 3)

        verdict = evaluator.evaluate(session_id, [LONG_ANSWER] * 3, NATURAL_TELEMETRY)

        assert verdict.correct_answers == 3
        assert verdict.total_questions == 3
        assert verdict.score_percentage == pytest.approx(1.0)
        assert verdict.passed is True
        assert verdict.level == 5
        assert verdict.is_flagged is False
        assert verdict.cheating_likelihood == 0.0
        assert verdict.cheating_signals == []
        assert verdict.quiz_type == "math"
        assert re.fullmatch(r"enc_math_3_[0-9a-f]+", verdict.encrypted_score)
        assert re.fullmatch(r"CERT_MATH_3_000_[0-9a-f]{8}", verdict.certificate_id)

    def test_behavior_analysis_included(self, store, evaluator):
        session_id = store.create("alice", "math", 3)

        verdict = evaluator.evaluate(
            session_id,
            [LONG_ANSWER] * 3,
            Telemetry(answer_times=(10, 20, 30), switch_counts=(1, 0, 2)),
        )

        analysis = verdict.behavior_analysis
        assert analysis.average_time == pytest.approx(20.0)
        assert analysis.switch_frequency == pytest.approx(1.0)
        assert analysis.pattern_deviation == pytest.approx(1.0)

    def test_short_answers_are_incorrect(self, store, evaluator):
        session_id = store.create("alice", "math", 3)

        verdict = evaluator.evaluate(
            session_id, [LONG_ANSWER, "abc", ""], NATURAL_TELEMETRY
        )

        assert verdict.correct_answers == 1
        assert verdict.passed is False
        assert verdict.level == 1

    def test_five_characters_is_not_enough(self, store, evaluator):
        session_id = store.create("alice", "math", 1)
        verdict = evaluator.evaluate(
            session_id, ["abcde"], Telemetry(answer_times=(20,), switch_counts=(0,))
        )
        assert verdict.correct_answers == 0

    def test_missing_answers_count_as_incorrect(self, store, evaluator):
        session_id = store.create("alice", "math", 3)
        verdict = evaluator.evaluate(session_id, [LONG_ANSWER], NATURAL_TELEMETRY)
        assert verdict.correct_answers == 1
        assert verdict.total_questions == 3

    def test_extra_answers_are_ignored(self, store, evaluator):
        session_id = store.create("alice", "math", 3)
        verdict = evaluator.evaluate(session_id, [LONG_ANSWER] * 5, NATURAL_TELEMETRY)
        assert verdict.correct_answers == 3

    def test_topic_threshold(self, store, evaluator):
        """Two of three passes programming (0.6) but not security (0.8)."""
        answers = [LONG_ANSWER, LONG_ANSWER, ""]
        programming = store.create("alice", "programming", 3)
        security = store.create("alice", "security", 3)

        prog_verdict = evaluator.evaluate(programming, answers, NATURAL_TELEMETRY)
        sec_verdict = evaluator.evaluate(security, answers, NATURAL_TELEMETRY)

        assert prog_verdict.passed is True
        assert prog_verdict.level == 3
        assert sec_verdict.passed is False
        assert sec_verdict.level == 3

    def test_unknown_topic_uses_math_threshold(self, store, evaluator):
        """Two of three (0.67) falls short of the math threshold (0.7)."""
        session_id = store.create("alice", "astrology", 3)

        verdict = evaluator.evaluate(
            session_id, [LONG_ANSWER, LONG_ANSWER, ""], NATURAL_TELEMETRY
        )

        assert verdict.quiz_type == "astrology"
        assert verdict.passed is False

    def test_flagged_submission_fails(self, store, evaluator):
        """All correct but implausibly fast answers are flagged and failed."""
        session_id = store.create("alice", "math", 3)

        verdict = evaluator.evaluate(
            session_id,
            [LONG_ANSWER] * 3,
            Telemetry(answer_times=(1, 1, 1), switch_counts=(0, 0, 0)),
        )

        assert verdict.correct_answers == 3
        assert verdict.is_flagged is True
        assert verdict.passed is False
        assert verdict.level == 1
        assert verdict.cheating_likelihood == pytest.approx(1.0)
        assert "rapid_answers" in verdict.cheating_signals
        assert re.fullmatch(r"CERT_MATH_3_\d{3}_[0-9a-f]{8}", verdict.certificate_id)

    def test_flag_threshold_is_configurable(self, store, topics):
        evaluator = QuizEvaluator(store, topics, flag_threshold=1.0)
        session_id = store.create("alice", "math", 3)

        verdict = evaluator.evaluate(
            session_id,
            [LONG_ANSWER] * 3,
            Telemetry(answer_times=(1, 1, 1), switch_counts=(0, 0, 0)),
        )

        assert verdict.is_flagged is False
        assert verdict.passed is True

    def test_classifier_uses_accumulated_telemetry(self, store, evaluator):
        """Full completion is only detected once all times have arrived."""
        session_id = store.create("alice", "math", 3)

        first = evaluator.evaluate(
            session_id, [], Telemetry(answer_times=(1, 1), switch_counts=(0, 0))
        )
        second = evaluator.evaluate(
            session_id, [], Telemetry(answer_times=(1,), switch_counts=(0,))
        )

        assert "fast_full_completion" not in first.cheating_signals
        assert "fast_full_completion" in second.cheating_signals

    def test_analysis_uses_incoming_telemetry(self, store, evaluator):
        session_id = store.create("alice", "math", 3)
        evaluator.evaluate(session_id, [], NATURAL_TELEMETRY)

        verdict = evaluator.evaluate(
            session_id, [], Telemetry(answer_times=(40,), switch_counts=(0,))
        )

        assert verdict.behavior_analysis.average_time == pytest.approx(40.0)

    def test_empty_telemetry(self, store, evaluator):
        session_id = store.create("alice", "math", 3)

        verdict = evaluator.evaluate(session_id, [LONG_ANSWER] * 3, Telemetry())

        assert verdict.cheating_likelihood == 0.0
        assert verdict.behavior_analysis.average_time == 0.0
        assert verdict.passed is True

    def test_zero_question_session(self, store, evaluator):
        session_id = store.create("alice", "math", 0)

        verdict = evaluator.evaluate(session_id, [LONG_ANSWER], NATURAL_TELEMETRY)

        assert verdict.total_questions == 0
        assert verdict.score_percentage == 0.0
        assert verdict.passed is False

    def test_unknown_session(self, evaluator):
        with pytest.raises(SessionNotFoundError):
            evaluator.evaluate("missing", [LONG_ANSWER], NATURAL_TELEMETRY)

    def test_option_match_verifier(self, store, topics):
        evaluator = QuizEvaluator(store, topics, verifier=OptionMatchVerifier())
        session_id = store.create("alice", "math", 3)
        questions = store.get_questions(session_id)

        by_text = evaluator.evaluate(
            session_id, [q.correct_option for q in questions], Telemetry()
        )
        wrong = evaluator.evaluate(session_id, [LONG_ANSWER] * 3, Telemetry())

        assert by_text.correct_answers == 3
        assert wrong.correct_answers == 0
