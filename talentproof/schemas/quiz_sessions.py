"""
Pydantic schemas for quiz session endpoints.
"""
from pydantic import BaseModel, Field, field_validator
from typing import List

from talentproof.core.question_generator import Question


class CreateSessionRequest(BaseModel):
    """Schema for requesting a new quiz session."""

    user_id: str = Field(
        ..., min_length=1, max_length=128, description="Identifier of the quiz taker"
    )
    quiz_type: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Quiz topic (math, programming, blockchain, security). "
        "Unknown topics are served math questions.",
    )

    @field_validator("user_id", "quiz_type")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Value cannot be empty or whitespace-only")
        return stripped


class QuestionResponse(BaseModel):
    """Client-facing projection of a generated question.

    The correct option index and generation parameters are never exposed.
    """

    question_id: str = Field(..., description="Question identifier")
    question_text: str = Field(..., description="The question prompt")
    options: List[str] = Field(..., description="Answer options in display order")
    difficulty: float = Field(..., description="Difficulty scalar")
    expected_time: int = Field(
        ..., description="Expected time to answer in seconds"
    )

    @classmethod
    def from_question(cls, question: Question) -> "QuestionResponse":
        return cls(
            question_id=question.question_id,
            question_text=question.question_text,
            options=list(question.options),
            difficulty=question.difficulty,
            expected_time=question.expected_time,
        )


class CreateSessionResponse(BaseModel):
    """Schema for a newly created quiz session."""

    session_id: str = Field(..., description="Quiz session ID")
    questions: List[QuestionResponse] = Field(
        ..., description="Questions for this session"
    )
    total_questions: int = Field(..., description="Number of questions in the session")


class SessionQuestionsResponse(BaseModel):
    """Schema for re-fetching the questions of an existing session."""

    session_id: str = Field(..., description="Quiz session ID")
    questions: List[QuestionResponse] = Field(
        ..., description="Questions for this session"
    )
    total_questions: int = Field(..., description="Number of questions in the session")
