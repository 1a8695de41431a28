"""
Descriptive statistics over client-reported answer telemetry.

Summarizes the telemetry submitted with an evaluation (per-question answer
times and answer-switch counts) for display alongside the verdict. The
statistics are descriptive only; flagging decisions are made by
cheating_detection.

Metrics:
- average_time: mean seconds per answer
- time_consistency: 1 / (1 + population variance), capped at 1.0
  (higher = more consistent pacing)
- switch_frequency: total answer switches per question
- pattern_deviation: (max - min) / mean, a normalized timing spread
"""

import statistics
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class BehaviorAnalysis:
    """Behavioral statistics for one telemetry submission."""

    average_time: float
    time_consistency: float
    switch_frequency: float
    pattern_deviation: float


def analyze_behavior(
    answer_times: Sequence[int],
    switch_counts: Sequence[int],
    total_questions: int,
) -> BehaviorAnalysis:
    """
    Compute behavioral statistics for a telemetry submission.

    Args:
        answer_times: Seconds spent on each answered question
        switch_counts: Number of answer changes per question
        total_questions: Number of questions in the session

    Returns:
        BehaviorAnalysis with all four metrics

    Edge Cases Handled:
        - No answer times: average 0.0, consistency 1.0, deviation 0.0
        - Single answer time: deviation 0.0 (no spread to measure)
        - Zero average time: deviation 0.0
        - total_questions <= 0: switch frequency 0.0
    """
    total_switches = sum(switch_counts)
    switch_frequency = (
        total_switches / total_questions if total_questions > 0 else 0.0
    )

    if not answer_times:
        return BehaviorAnalysis(
            average_time=0.0,
            time_consistency=1.0,
            switch_frequency=switch_frequency,
            pattern_deviation=0.0,
        )

    times = [float(t) for t in answer_times]
    average_time = statistics.fmean(times)
    variance = statistics.pvariance(times, mu=average_time)
    time_consistency = min(1.0 / (1.0 + variance), 1.0)

    pattern_deviation = 0.0
    if len(times) >= 2 and average_time > 0:
        pattern_deviation = (max(times) - min(times)) / average_time

    return BehaviorAnalysis(
        average_time=average_time,
        time_consistency=time_consistency,
        switch_frequency=switch_frequency,
        pattern_deviation=pattern_deviation,
    )
