"""
Talent Proof API application.

Run with `talentproof` (console script) or `uvicorn talentproof.main:app`.
"""
import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from talentproof.api.v1.api import api_router
from talentproof.core.answer_verification import get_verifier
from talentproof.core.config import settings
from talentproof.core.error_responses import ErrorMessages
from talentproof.core.evaluator import QuizEvaluator
from talentproof.core.logging_config import setup_logging
from talentproof.core.session_store import SessionStore, seeded_generator_factory
from talentproof.core.topics import topic_registry
from talentproof.middleware import RequestLoggingMiddleware
from talentproof.observability import (
    capture_error,
    init_error_tracking,
    shutdown_error_tracking,
)

setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Start error tracking; on shutdown flush it and drop in-memory sessions."""
    init_error_tracking(environment=settings.ENV)
    logger.info(
        f"{settings.APP_NAME} {settings.APP_VERSION} ready with "
        f"{len(app.state.topic_registry)} quiz topics"
    )

    yield

    shutdown_error_tracking()
    store: SessionStore = app.state.session_store
    discarded = store.active_count()
    store.clear()
    logger.info(f"Shutting down, discarded {discarded} quiz sessions")


tags_metadata = [
    {"name": "health", "description": "Service status and connectivity checks"},
    {
        "name": "quiz",
        "description": "Quiz sessions, question retrieval and answer evaluation",
    },
]


def _create_session_store() -> SessionStore:
    """Build the session store from the SESSION_* settings."""
    seeded = settings.SEEDED_QUESTION_GENERATION
    logger.info(
        f"Session store: ttl={settings.SESSION_TTL_SECONDS}s, "
        f"max_sessions={settings.SESSION_MAX_ACTIVE or 'unlimited'}, "
        f"seeded_generation={seeded}"
    )
    return SessionStore(
        ttl_seconds=settings.SESSION_TTL_SECONDS,
        max_sessions=settings.SESSION_MAX_ACTIVE,
        cleanup_interval=settings.SESSION_CLEANUP_INTERVAL_SECONDS,
        generator_factory=seeded_generator_factory if seeded else None,
    )


def _request_context(request: Request) -> dict:
    return {"path": request.url.path, "method": request.method}


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Return {"detail": ...}; server-side HTTP errors are also sent to Sentry."""
    if exc.status_code >= 500:
        capture_error(
            exc,
            context={**_request_context(request), "status_code": exc.status_code},
            tags={"error_type": "HTTPException"},
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    """Return 422 with a JSON-safe list of {loc, msg, type} errors."""
    errors = [
        {
            "loc": list(error.get("loc", [])),
            "msg": str(error.get("msg", "")),
            "type": str(error.get("type", "")),
        }
        for error in exc.errors()
    ]
    logger.info(f"Rejected request to {request.url.path}: {len(errors)} invalid field(s)")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Catch-all for unexpected errors.

    The response carries only a generic message and an error_id; the same
    error_id is logged with the traceback and attached to the Sentry event.
    """
    error_id = str(uuid.uuid4())
    logger.exception(
        f"Unhandled exception [error_id={error_id}]: {exc}",
        extra={"error_id": error_id},
    )
    capture_error(
        exc,
        context={**_request_context(request), "error_id": error_id},
        tags={"error_type": type(exc).__name__},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": ErrorMessages.INTERNAL_ERROR, "error_id": error_id},
    )


def _banner() -> dict:
    prefix = settings.API_V1_PREFIX
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": f"{prefix}/docs",
        "features": [
            "Per-session randomized question generation",
            "Behavioral cheating detection",
            "Opaque score and certificate tokens",
        ],
        "endpoints": {
            "create_session": f"POST {prefix}/sessions",
            "session_questions": f"GET {prefix}/sessions/{{session_id}}/questions",
            "evaluate": f"POST {prefix}/evaluate",
            "quizzes": f"GET {prefix}/quizzes",
            "health": f"GET {prefix}/health",
        },
    }


def create_application() -> FastAPI:
    """
    Build the FastAPI app.

    Each call creates its own session store and evaluator, so separate app
    instances never share sessions.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        lifespan=lifespan,
        description=(
            "Randomized skill quizzes (math, programming, blockchain, security) "
            "with timing and answer-switching analysis that flags suspicious "
            "submissions."
        ),
        docs_url=f"{settings.API_V1_PREFIX}/docs",
        redoc_url=f"{settings.API_V1_PREFIX}/redoc",
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        openapi_tags=tags_metadata,
    )

    store = _create_session_store()
    app.state.session_store = store
    app.state.topic_registry = topic_registry
    app.state.evaluator = QuizEvaluator(
        store,
        topic_registry,
        verifier=get_verifier(settings.ANSWER_VERIFIER),
        flag_threshold=settings.CHEATING_FLAG_THRESHOLD,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_router, prefix=settings.API_V1_PREFIX)
    app.add_api_route("/", _banner, methods=["GET"], include_in_schema=False)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    return app


app = create_application()


def run() -> None:
    """Serve the app with uvicorn on the configured HOST and PORT."""
    uvicorn.run(
        "talentproof.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
