"""
Pydantic schemas for request/response validation.
"""
from talentproof.schemas.evaluation import (
    BehaviorAnalysisSchema,
    BehaviorData,
    EvaluateQuizRequest,
    QuizVerdictResponse,
)
from talentproof.schemas.health import HealthResponse
from talentproof.schemas.quiz_sessions import (
    CreateSessionRequest,
    CreateSessionResponse,
    QuestionResponse,
    SessionQuestionsResponse,
)

__all__ = [
    "BehaviorAnalysisSchema",
    "BehaviorData",
    "EvaluateQuizRequest",
    "QuizVerdictResponse",
    "HealthResponse",
    "CreateSessionRequest",
    "CreateSessionResponse",
    "QuestionResponse",
    "SessionQuestionsResponse",
]
