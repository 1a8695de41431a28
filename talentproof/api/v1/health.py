"""
Health check and status endpoints.
"""
from fastapi import APIRouter, Depends

from talentproof.api.v1.dependencies import get_session_store, get_topic_registry
from talentproof.core.config import settings
from talentproof.core.datetime_utils import utc_now
from talentproof.core.session_store import SessionStore
from talentproof.core.topics import TopicRegistry
from talentproof.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(
    store: SessionStore = Depends(get_session_store),
    topics: TopicRegistry = Depends(get_topic_registry),
):
    """
    Health check endpoint.
    Returns service status with active session and quiz topic counts.
    """
    return HealthResponse(
        status="healthy",
        service=settings.APP_NAME,
        version=settings.APP_VERSION,
        timestamp=utc_now().isoformat(),
        active_sessions=store.active_count(),
        available_quizzes=len(topics),
    )


@router.get("/ping")
async def ping():
    """
    Simple ping endpoint for basic connectivity testing.
    """
    return {"message": "pong"}
