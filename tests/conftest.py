"""
Pytest configuration and shared fixtures for testing.
"""
import random
from contextlib import asynccontextmanager
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from talentproof.core.evaluator import QuizEvaluator
from talentproof.core.question_generator import QuestionGenerator
from talentproof.core.session_store import SessionStore
from talentproof.core.topics import build_default_registry


@asynccontextmanager
async def _test_lifespan(app):
    """No-op lifespan for tests.

    Skips error tracking initialization.
    """
    yield


def create_test_application():
    """Create the production app with the lifespan disabled.

    Returns the full app (all routes, middleware, exception handlers) with
    its own empty session store.
    """
    from talentproof.main import create_application

    test_app = create_application()
    test_app.router.lifespan_context = _test_lifespan
    return test_app


@pytest.fixture
def app():
    """Fresh application instance per test."""
    return create_test_application()


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    """Test client bound to a fresh application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def rng() -> random.Random:
    """Deterministic random source for generator tests."""
    return random.Random(1234)


@pytest.fixture
def generator(rng) -> QuestionGenerator:
    return QuestionGenerator(rng)


@pytest.fixture
def topics():
    return build_default_registry()


@pytest.fixture
def store() -> SessionStore:
    """Session store with expiry and capacity limits disabled."""
    return SessionStore(ttl_seconds=0, max_sessions=0)


@pytest.fixture
def evaluator(store, topics) -> QuizEvaluator:
    """Evaluator using the default (length heuristic) verifier."""
    return QuizEvaluator(store, topics)
