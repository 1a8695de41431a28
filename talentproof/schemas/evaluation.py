"""
Pydantic schemas for quiz evaluation endpoints.
"""
from dataclasses import asdict

from pydantic import BaseModel, Field, field_validator
from typing import List

from talentproof.core.evaluator import QuizVerdict, Telemetry

# Upper bound for client-reported counters and times (unsigned 32-bit)
MAX_TELEMETRY_VALUE = 2**32 - 1

# Upper bound on list lengths accepted in a single submission
MAX_SUBMISSION_ITEMS = 500


class BehaviorData(BaseModel):
    """Client-reported telemetry for a submission."""

    answer_times: List[int] = Field(
        default_factory=list,
        max_length=MAX_SUBMISSION_ITEMS,
        description="Seconds spent on each question",
    )
    switch_counts: List[int] = Field(
        default_factory=list,
        max_length=MAX_SUBMISSION_ITEMS,
        description="Number of times each answer was changed",
    )
    start_time: int = Field(0, ge=0, description="Quiz start (unix seconds)")
    end_time: int = Field(0, ge=0, description="Quiz end (unix seconds)")

    @field_validator("answer_times", "switch_counts")
    @classmethod
    def validate_unsigned(cls, v: List[int]) -> List[int]:
        for value in v:
            if value < 0 or value > MAX_TELEMETRY_VALUE:
                raise ValueError(
                    f"Telemetry values must be between 0 and {MAX_TELEMETRY_VALUE}"
                )
        return v

    def to_telemetry(self) -> Telemetry:
        return Telemetry(
            answer_times=tuple(self.answer_times),
            switch_counts=tuple(self.switch_counts),
            start_time=self.start_time,
            end_time=self.end_time,
        )


class EvaluateQuizRequest(BaseModel):
    """Schema for submitting answers and telemetry for evaluation."""

    session_id: str = Field(..., min_length=1, description="Quiz session ID")
    encrypted_answers: List[str] = Field(
        ...,
        max_length=MAX_SUBMISSION_ITEMS,
        description="Submitted (encrypted) answers in question order",
    )
    behavior_data: BehaviorData = Field(
        default_factory=BehaviorData, description="Answer timing and switching data"
    )


class BehaviorAnalysisSchema(BaseModel):
    """Descriptive statistics over the submitted telemetry."""

    average_time: float = Field(..., description="Mean seconds per answer")
    time_consistency: float = Field(
        ..., description="1 / (1 + variance); higher is more consistent"
    )
    switch_frequency: float = Field(..., description="Answer switches per question")
    pattern_deviation: float = Field(
        ..., description="(max - min) / mean answer time"
    )


class QuizVerdictResponse(BaseModel):
    """Schema for an evaluation verdict."""

    passed: bool = Field(..., description="Passed threshold and not flagged")
    encrypted_score: str = Field(..., description="Opaque score token")
    level: int = Field(..., ge=1, le=5, description="Achievement level (1-5)")
    correct_answers: int = Field(..., description="Number of correct answers")
    total_questions: int = Field(..., description="Number of questions in the session")
    quiz_type: str = Field(..., description="Quiz topic")
    certificate_id: str = Field(..., description="Opaque certificate token")
    cheating_likelihood: float = Field(
        ..., ge=0.0, le=1.0, description="Heuristic cheating likelihood"
    )
    behavior_analysis: BehaviorAnalysisSchema = Field(
        ..., description="Behavioral statistics for this submission"
    )
    is_flagged: bool = Field(
        ..., description="Cheating likelihood exceeded the flag threshold"
    )
    score_percentage: float = Field(..., description="Fraction of correct answers")
    cheating_signals: List[str] = Field(
        default_factory=list, description="Names of triggered cheating signals"
    )

    @classmethod
    def from_verdict(cls, verdict: QuizVerdict) -> "QuizVerdictResponse":
        return cls(**asdict(verdict))
