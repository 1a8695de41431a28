"""
Quiz submission evaluation.

Orchestrates scoring of a submission:
1. Merge the submitted telemetry into the stored session
2. Verify each answer against its question (pluggable verifier)
3. Compare the score to the topic's passing threshold
4. Score cheating likelihood over the accumulated telemetry
5. Derive the level and synthesize the opaque score/certificate tokens

A flagged submission (cheating likelihood above the threshold) always fails
and is assigned the minimum level regardless of correctness.
"""

import logging
import secrets
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from talentproof.core.answer_verification import (
    AnswerVerifier,
    LengthHeuristicVerifier,
)
from talentproof.core.behavior_analysis import BehaviorAnalysis, analyze_behavior
from talentproof.core.cheating_detection import detect_cheating_signals
from talentproof.core.session_store import SessionStore
from talentproof.core.topics import TopicRegistry

logger = logging.getLogger(__name__)

DEFAULT_FLAG_THRESHOLD = 0.6

# Minimum score fraction for each level, highest first
LEVEL_BREAKPOINTS = (
    (0.9, 5),
    (0.7, 4),
    (0.6, 3),
    (0.5, 2),
)
MIN_LEVEL = 1


@dataclass(frozen=True)
class Telemetry:
    """Client-reported behavior data submitted with answers."""

    answer_times: Sequence[int] = ()
    switch_counts: Sequence[int] = ()
    start_time: int = 0
    end_time: int = 0


@dataclass(frozen=True)
class QuizVerdict:
    """Result of evaluating a quiz submission."""

    passed: bool
    encrypted_score: str
    level: int
    correct_answers: int
    total_questions: int
    quiz_type: str
    certificate_id: str
    cheating_likelihood: float
    behavior_analysis: BehaviorAnalysis
    is_flagged: bool
    score_percentage: float
    cheating_signals: List[str] = field(default_factory=list)


def level_for_score(score_percentage: float, is_flagged: bool = False) -> int:
    """Map a score fraction to a level from 1 to 5; flagged results get 1."""
    if is_flagged:
        return MIN_LEVEL
    for minimum, level in LEVEL_BREAKPOINTS:
        if score_percentage >= minimum:
            return level
    return MIN_LEVEL


def generate_encrypted_score(correct_count: int, topic: str) -> str:
    """Opaque display token for a score. Not a verifiable credential."""
    salt = secrets.randbits(32)
    return f"enc_{topic}_{correct_count}_{salt:x}"


def generate_certificate_id(
    correct_count: int, topic: str, cheating_likelihood: float
) -> str:
    """
    Opaque certificate token embedding topic, score and cheating severity.

    Severity is the likelihood as a truncated percentage (0-100).
    """
    severity = int(cheating_likelihood * 100)
    certificate = secrets.randbits(32)
    return f"CERT_{topic.upper()}_{correct_count}_{severity:03d}_{certificate:08x}"


class QuizEvaluator:
    """
    Scores quiz submissions against stored sessions.

    Args:
        store: Session store holding questions and behavior records
        topics: Topic registry providing passing thresholds
        verifier: Answer verification strategy
        flag_threshold: Cheating likelihood above which results are flagged
    """

    def __init__(
        self,
        store: SessionStore,
        topics: TopicRegistry,
        verifier: Optional[AnswerVerifier] = None,
        flag_threshold: float = DEFAULT_FLAG_THRESHOLD,
    ):
        self._store = store
        self._topics = topics
        self._verifier = verifier or LengthHeuristicVerifier()
        self._flag_threshold = flag_threshold

    def evaluate(
        self,
        session_id: str,
        answers: Sequence[str],
        telemetry: Telemetry,
    ) -> QuizVerdict:
        """
        Evaluate a submission for a stored session.

        Answers beyond the session's question count are ignored; missing
        answers count as incorrect.

        Raises:
            SessionNotFoundError: If the session id is unknown or expired
        """
        snapshot = self._store.record_telemetry(
            session_id, telemetry.answer_times, telemetry.switch_counts
        )

        questions = snapshot.questions
        total_questions = len(questions)
        correct_count = sum(
            1
            for answer, question in zip(answers, questions)
            if self._verifier.verify(answer, question)
        )
        score_percentage = (
            correct_count / total_questions if total_questions > 0 else 0.0
        )

        topic_config = self._topics.get_or_default(snapshot.topic)
        meets_threshold = score_percentage >= topic_config.passing_score

        assessment = detect_cheating_signals(
            snapshot.answer_times, snapshot.switch_count, total_questions
        )
        is_flagged = assessment.likelihood > self._flag_threshold

        behavior = analyze_behavior(
            telemetry.answer_times, telemetry.switch_counts, total_questions
        )

        verdict = QuizVerdict(
            passed=meets_threshold and not is_flagged,
            encrypted_score=generate_encrypted_score(correct_count, snapshot.topic),
            level=level_for_score(score_percentage, is_flagged),
            correct_answers=correct_count,
            total_questions=total_questions,
            quiz_type=snapshot.topic,
            certificate_id=generate_certificate_id(
                correct_count, snapshot.topic, assessment.likelihood
            ),
            cheating_likelihood=assessment.likelihood,
            behavior_analysis=behavior,
            is_flagged=is_flagged,
            score_percentage=score_percentage,
            cheating_signals=list(assessment.signals),
        )

        if is_flagged:
            logger.warning(
                f"Quiz session {session_id} flagged: "
                f"likelihood={assessment.likelihood:.2f}, signals={assessment.signals}"
            )
        else:
            logger.info(
                f"Quiz session {session_id} evaluated: "
                f"{correct_count}/{total_questions} correct, passed={verdict.passed}, "
                f"likelihood={assessment.likelihood:.2f}"
            )

        return verdict
