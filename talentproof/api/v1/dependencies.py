"""
Shared FastAPI dependencies for v1 endpoints.

The session store, topic registry and evaluator are created once per
application in create_application() and kept on app.state.
"""
from fastapi import Request

from talentproof.core.evaluator import QuizEvaluator
from talentproof.core.session_store import SessionStore
from talentproof.core.topics import TopicRegistry


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_topic_registry(request: Request) -> TopicRegistry:
    return request.app.state.topic_registry


def get_evaluator(request: Request) -> QuizEvaluator:
    return request.app.state.evaluator
