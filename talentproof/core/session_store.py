"""
In-memory quiz session store.

Holds every active quiz session keyed by session id. The table is shared by
all request-handling threads and is guarded by a single re-entrant lock:
every read and mutation of a session (question list or behavior record)
happens while holding it. Callers only ever receive copies/snapshots, never
references into the table.

Expiry policy:
- Sessions idle longer than ttl_seconds are expired (0 = never expire).
  Expired sessions are removed lazily on access and by a periodic sweep.
- When max_sessions is reached, the least recently used session is evicted
  to make room (0 = unlimited).

Note: Data is lost on process restart and is not shared across workers.
"""

import logging
import secrets
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from talentproof.core.datetime_utils import utc_timestamp
from talentproof.core.question_generator import Question, QuestionGenerator

logger = logging.getLogger(__name__)

# Difficulty ramp for generated sessions: difficulty_i = BASE + STEP * i
DIFFICULTY_BASE = 0.3
DIFFICULTY_STEP = 0.2


class SessionNotFoundError(LookupError):
    """Raised when a referenced quiz session does not exist (or has expired)."""

    def __init__(self, session_id: str):
        super().__init__(f"Quiz session not found: {session_id}")
        self.session_id = session_id


@dataclass
class BehaviorRecord:
    """Accumulated client telemetry for a session."""

    answer_times: List[int] = field(default_factory=list)  # Seconds per answer
    switch_count: int = 0  # Questions on which the answer was changed
    consistency_score: float = 1.0


@dataclass
class QuizSession:
    """A quiz session owned by the SessionStore."""

    session_id: str
    user_id: str
    topic: str
    questions: List[Question]
    start_time: int  # Unix timestamp (seconds)
    behavior: BehaviorRecord = field(default_factory=BehaviorRecord)
    last_accessed: float = field(default_factory=time.monotonic)


@dataclass(frozen=True)
class BehaviorSnapshot:
    """Immutable view of a session taken after telemetry was merged."""

    session_id: str
    topic: str
    questions: Tuple[Question, ...]
    answer_times: Tuple[int, ...]
    switch_count: int

    @property
    def question_count(self) -> int:
        return len(self.questions)


GeneratorFactory = Callable[[str], QuestionGenerator]


def _shared_generator_factory() -> GeneratorFactory:
    generator = QuestionGenerator()
    return lambda user_id: generator


def seeded_generator_factory(user_id: str) -> QuestionGenerator:
    """Factory giving each session a generator seeded from its user id."""
    return QuestionGenerator.for_user(user_id)


class SessionStore:
    """
    Thread-safe in-memory mapping from session id to QuizSession.

    Args:
        ttl_seconds: Idle lifetime of a session (0 disables expiry)
        max_sessions: Capacity bound; least recently used sessions are
            evicted when exceeded (0 = unlimited)
        cleanup_interval: Minimum seconds between expiry sweeps
        generator_factory: Returns the QuestionGenerator to use for a user.
            Defaults to one shared, unseeded generator.
        clock: Monotonic time source (injectable for tests)
    """

    def __init__(
        self,
        ttl_seconds: int = 3600,
        max_sessions: int = 10000,
        cleanup_interval: int = 60,
        generator_factory: Optional[GeneratorFactory] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._sessions: "OrderedDict[str, QuizSession]" = OrderedDict()
        self._lock = threading.RLock()
        self._ttl = ttl_seconds
        self._max_sessions = max_sessions
        self._cleanup_interval = cleanup_interval
        self._generator_factory = generator_factory or _shared_generator_factory()
        self._clock = clock
        self._last_cleanup = clock()

    def create(self, user_id: str, topic: str, count: int) -> str:
        """
        Generate count questions for topic and store a new session.

        Question difficulty increases with position. Generation happens
        outside the lock; only the insertion is serialized.

        Returns:
            The new session id
        """
        generator = self._generator_factory(user_id)
        questions = [
            generator.generate(topic, user_id, DIFFICULTY_BASE + DIFFICULTY_STEP * i)
            for i in range(count)
        ]
        session_id = f"{user_id}_{topic}_{secrets.randbits(32)}"
        session = QuizSession(
            session_id=session_id,
            user_id=user_id,
            topic=topic,
            questions=questions,
            start_time=utc_timestamp(),
            last_accessed=self._clock(),
        )

        with self._lock:
            self._maybe_cleanup()
            self._evict_for_capacity()
            self._sessions[session_id] = session

        logger.info(
            f"Created quiz session {session_id} for user {user_id} "
            f"(topic={topic}, questions={count})"
        )
        return session_id

    def get(self, session_id: str) -> Optional[QuizSession]:
        """
        Return a copy of the session, or None if unknown or expired.

        The copy shares the (immutable) questions but not the question list
        or behavior record.
        """
        with self._lock:
            session = self._touch(session_id)
            if session is None:
                return None
            return QuizSession(
                session_id=session.session_id,
                user_id=session.user_id,
                topic=session.topic,
                questions=list(session.questions),
                start_time=session.start_time,
                behavior=BehaviorRecord(
                    answer_times=list(session.behavior.answer_times),
                    switch_count=session.behavior.switch_count,
                    consistency_score=session.behavior.consistency_score,
                ),
                last_accessed=session.last_accessed,
            )

    def get_questions(self, session_id: str) -> Optional[List[Question]]:
        """Return a copy of the session's questions, or None if unknown."""
        with self._lock:
            session = self._touch(session_id)
            if session is None:
                return None
            return list(session.questions)

    def record_telemetry(
        self,
        session_id: str,
        times: Sequence[int],
        switch_counts: Sequence[int],
    ) -> BehaviorSnapshot:
        """
        Merge submitted telemetry into the session's behavior record.

        Each answer time is appended; the switch counter is incremented once
        per question with a nonzero switch count. The returned snapshot
        reflects the accumulated record including this update, taken under
        the same lock acquisition so concurrent submissions serialize.

        Raises:
            SessionNotFoundError: If the session id is unknown or expired
        """
        with self._lock:
            session = self._touch(session_id)
            if session is None:
                raise SessionNotFoundError(session_id)

            behavior = session.behavior
            behavior.answer_times.extend(int(t) for t in times)
            behavior.switch_count += sum(1 for s in switch_counts if s > 0)

            return BehaviorSnapshot(
                session_id=session.session_id,
                topic=session.topic,
                questions=tuple(session.questions),
                answer_times=tuple(behavior.answer_times),
                switch_count=behavior.switch_count,
            )

    def active_count(self) -> int:
        """Number of sessions currently held (expired ones are swept first)."""
        with self._lock:
            self._maybe_cleanup(force=True)
            return len(self._sessions)

    def clear(self) -> None:
        with self._lock:
            self._sessions.clear()

    def __len__(self) -> int:
        return self.active_count()

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return isinstance(session_id, str) and self._touch(session_id) is not None

    def _touch(self, session_id: str) -> Optional[QuizSession]:
        """Look up a live session and mark it recently used. Caller holds the lock."""
        self._maybe_cleanup()
        session = self._sessions.get(session_id)
        if session is None:
            return None

        now = self._clock()
        if self._is_expired(session, now):
            del self._sessions[session_id]
            logger.info(f"Quiz session {session_id} expired")
            return None

        session.last_accessed = now
        self._sessions.move_to_end(session_id)
        return session

    def _is_expired(self, session: QuizSession, now: float) -> bool:
        return self._ttl > 0 and now - session.last_accessed > self._ttl

    def _maybe_cleanup(self, force: bool = False) -> None:
        """Remove expired sessions if the cleanup interval has passed."""
        if self._ttl <= 0:
            return

        now = self._clock()
        if not force and now - self._last_cleanup < self._cleanup_interval:
            return

        self._last_cleanup = now
        expired = [
            sid for sid, session in self._sessions.items()
            if self._is_expired(session, now)
        ]
        for sid in expired:
            del self._sessions[sid]

        if expired:
            logger.info(f"Expired {len(expired)} idle quiz sessions")

    def _evict_for_capacity(self) -> None:
        """Evict least recently used sessions until there is room for one more."""
        if self._max_sessions <= 0:
            return

        while len(self._sessions) >= self._max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info(
                f"Evicted quiz session {evicted_id} "
                f"(capacity {self._max_sessions} reached)"
            )
