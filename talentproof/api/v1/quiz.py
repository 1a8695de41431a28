"""
Quiz session and evaluation endpoints.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends

from talentproof.api.v1.dependencies import (
    get_evaluator,
    get_session_store,
    get_topic_registry,
)
from talentproof.core.error_responses import ErrorMessages, raise_not_found
from talentproof.core.evaluator import QuizEvaluator
from talentproof.core.session_store import SessionNotFoundError, SessionStore
from talentproof.core.topics import TopicRegistry
from talentproof.schemas.evaluation import EvaluateQuizRequest, QuizVerdictResponse
from talentproof.schemas.quiz_sessions import (
    CreateSessionRequest,
    CreateSessionResponse,
    QuestionResponse,
    SessionQuestionsResponse,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/sessions", response_model=CreateSessionResponse)
def create_session(
    request: CreateSessionRequest,
    store: SessionStore = Depends(get_session_store),
    topics: TopicRegistry = Depends(get_topic_registry),
):
    """
    Create a quiz session with freshly generated questions.

    The number of questions follows the topic's canonical question set.
    Unknown topics are served math questions with the default count.
    The correct answers are kept server-side and never returned.
    """
    if request.quiz_type not in topics:
        logger.info(
            f"Unknown quiz type '{request.quiz_type}' requested by "
            f"{request.user_id}; generating math questions"
        )

    count = topics.question_count(request.quiz_type)
    session_id = store.create(request.user_id, request.quiz_type, count)
    questions = store.get_questions(session_id)
    if questions is None:
        # Evicted between creation and read (capacity pressure)
        raise_not_found(ErrorMessages.QUIZ_SESSION_NOT_FOUND)

    return CreateSessionResponse(
        session_id=session_id,
        questions=[QuestionResponse.from_question(q) for q in questions],
        total_questions=len(questions),
    )


@router.get(
    "/sessions/{session_id}/questions", response_model=SessionQuestionsResponse
)
def get_session_questions(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
):
    """
    Fetch the questions of an existing session.

    Raises:
        HTTPException: 404 if the session does not exist or has expired
    """
    questions = store.get_questions(session_id)
    if questions is None:
        raise_not_found(ErrorMessages.QUIZ_SESSION_NOT_FOUND)

    return SessionQuestionsResponse(
        session_id=session_id,
        questions=[QuestionResponse.from_question(q) for q in questions],
        total_questions=len(questions),
    )


@router.post("/evaluate", response_model=QuizVerdictResponse)
def evaluate_quiz(
    submission: EvaluateQuizRequest,
    evaluator: QuizEvaluator = Depends(get_evaluator),
):
    """
    Evaluate submitted answers together with behavior telemetry.

    Telemetry is merged into the session before scoring, so repeated
    submissions for the same session accumulate timing data.

    Raises:
        HTTPException: 404 if the session does not exist or has expired
    """
    try:
        verdict = evaluator.evaluate(
            submission.session_id,
            submission.encrypted_answers,
            submission.behavior_data.to_telemetry(),
        )
    except SessionNotFoundError:
        logger.warning(
            f"Evaluation requested for unknown session {submission.session_id}"
        )
        raise_not_found(ErrorMessages.QUIZ_SESSION_NOT_FOUND)

    return QuizVerdictResponse.from_verdict(verdict)


@router.get("/quizzes", response_model=List[str])
def list_quizzes(topics: TopicRegistry = Depends(get_topic_registry)):
    """List available quiz topics."""
    return topics.names()
