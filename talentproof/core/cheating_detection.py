"""
Heuristic cheating detection over accumulated session telemetry.

Combines four independent timing/switching signals into a bounded
cheating-likelihood score. Each signal is evaluated against the session's
accumulated answer times and switch count (not only the latest submission)
and contributes a fixed weight when triggered; the sum is clamped to 1.0.

Signals:
- rapid_answers: more than half of answers took under 3 seconds
- uniform_timing: population variance of answer times below 1.0 (bot-like)
- excessive_switching: answers changed on more than 80% of questions
- fast_full_completion: every question answered with a mean under 5 seconds

Ethical Considerations:
- The score is an indicator, not proof of cheating
- Telemetry is client-reported and is trusted as-is
"""

import logging
import statistics
from dataclasses import dataclass, field
from typing import List, Sequence

logger = logging.getLogger(__name__)


# =============================================================================
# SIGNAL THRESHOLDS AND WEIGHTS
# =============================================================================

# Answers faster than this (seconds) count as rapid
RAPID_ANSWER_THRESHOLD_SECONDS = 3
# Fraction of rapid answers that must be exceeded to trigger
RAPID_ANSWER_FRACTION = 0.5
RAPID_ANSWER_WEIGHT = 0.4

# Population variance of answer times below this is suspiciously uniform
UNIFORM_TIMING_VARIANCE_THRESHOLD = 1.0
UNIFORM_TIMING_WEIGHT = 0.3

# Switches per question above this ratio is excessive
EXCESSIVE_SWITCH_RATIO = 0.8
EXCESSIVE_SWITCHING_WEIGHT = 0.2

# Mean answer time (seconds) below which a complete session is suspicious
FAST_COMPLETION_AVERAGE_SECONDS = 5.0
FAST_COMPLETION_WEIGHT = 0.3

MAX_CHEATING_LIKELIHOOD = 1.0


@dataclass(frozen=True)
class CheatingAssessment:
    """Cheating likelihood plus the names of the signals that fired."""

    likelihood: float
    signals: List[str] = field(default_factory=list)


def detect_cheating_signals(
    answer_times: Sequence[int],
    switch_count: int,
    question_count: int,
) -> CheatingAssessment:
    """
    Evaluate all cheating signals for a session.

    Args:
        answer_times: Accumulated answer times for the session (seconds)
        switch_count: Accumulated number of questions with answer switches
        question_count: Number of questions in the session

    Returns:
        CheatingAssessment with likelihood in [0.0, 1.0]

    Edge Cases Handled:
        - No answer times: likelihood 0.0 with no signals, regardless of switches
        - question_count <= 0: switching signal is not evaluated
    """
    if not answer_times:
        return CheatingAssessment(likelihood=0.0)

    times = [float(t) for t in answer_times]
    average_time = statistics.fmean(times)
    signals: List[str] = []
    score = 0.0

    rapid_count = sum(1 for t in times if t < RAPID_ANSWER_THRESHOLD_SECONDS)
    if rapid_count > len(times) * RAPID_ANSWER_FRACTION:
        signals.append("rapid_answers")
        score += RAPID_ANSWER_WEIGHT

    variance = statistics.pvariance(times, mu=average_time)
    if variance < UNIFORM_TIMING_VARIANCE_THRESHOLD:
        signals.append("uniform_timing")
        score += UNIFORM_TIMING_WEIGHT

    if question_count > 0 and switch_count / question_count > EXCESSIVE_SWITCH_RATIO:
        signals.append("excessive_switching")
        score += EXCESSIVE_SWITCHING_WEIGHT

    if (
        average_time < FAST_COMPLETION_AVERAGE_SECONDS
        and len(times) == question_count
    ):
        signals.append("fast_full_completion")
        score += FAST_COMPLETION_WEIGHT

    likelihood = min(score, MAX_CHEATING_LIKELIHOOD)
    if signals:
        logger.debug(f"Cheating signals triggered: {signals} (score={likelihood:.2f})")

    return CheatingAssessment(likelihood=likelihood, signals=signals)


def calculate_cheating_likelihood(
    answer_times: Sequence[int],
    switch_count: int,
    question_count: int,
) -> float:
    """Return only the bounded cheating likelihood for a session."""
    return detect_cheating_signals(answer_times, switch_count, question_count).likelihood
