"""Process-local registry of running quiz sessions."""

import time
import uuid
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from uuid import UUID

from quizbank.core.config import settings
from quizbank.core.logging import get_logger
from quizbank.schemas.question import QuestionOut
from quizbank.services.scoring import ScoreSummary, grade_answers
from quizbank.services.session_engine import AnswerMap, QuizSessionEngine
from quizbank.services.session_state import SessionStatus
from quizbank.services.session_timer import SessionCountdown

logger = get_logger(__name__)


class SessionNotFoundError(LookupError):
    """Unknown, exited, expired or already collected session."""

    def __init__(self, session_id: UUID):
        self.session_id = session_id
        super().__init__(f"Session {session_id} not found")


class SessionNotFinishedError(Exception):
    """The result was requested before the session finished."""

    def __init__(self, session_id: UUID, status: SessionStatus):
        self.session_id = session_id
        self.status = status
        super().__init__(f"Session {session_id} has not finished yet")


@dataclass
class ActiveSession:
    id: UUID
    engine: QuizSessionEngine
    countdown: SessionCountdown
    last_seen: float
    result: ScoreSummary | None = None
    finished_at: float | None = None


class SessionRegistry:
    """Owns every live session and its countdown.

    A session leaves the registry when the learner exits, when its result is
    collected, when an uncollected result is older than ``result_retention``,
    or when an unfinished session sees no request for ``idle_timeout`` seconds
    (plus its time limit, so a running countdown always gets to finish first).
    Expired sessions are swept whenever a session is created or looked up.
    """

    def __init__(
        self,
        tick_interval: float | None = None,
        result_retention: float | None = None,
        idle_timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.tick_interval = tick_interval
        self.result_retention = (
            result_retention if result_retention is not None else settings.QUIZ_RESULT_RETENTION_SECONDS
        )
        self.idle_timeout = idle_timeout if idle_timeout is not None else settings.QUIZ_IDLE_TIMEOUT_SECONDS
        self._clock = clock
        self._sessions: dict[UUID, ActiveSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def create(self, questions: Sequence[QuestionOut], time_limit: int = 0) -> ActiveSession:
        """
        Create a session and start its countdown.

        Timed sessions must be created while an event loop is running.
        """
        self.purge_expired()
        session_id = uuid.uuid4()

        def on_finish(answers: AnswerMap) -> None:
            self._record_result(session_id, answers)

        engine = QuizSessionEngine(questions, on_finish=on_finish, time_limit=time_limit)
        countdown = SessionCountdown(engine, interval=self.tick_interval)
        active = ActiveSession(id=session_id, engine=engine, countdown=countdown, last_seen=self._clock())
        self._sessions[session_id] = active
        countdown.start()

        logger.info(
            "Quiz session started",
            extra={"session_id": str(session_id), "questions": len(questions), "time_limit": time_limit},
        )
        return active

    def get(self, session_id: UUID) -> ActiveSession:
        """Look up a session and mark it as seen."""
        self.purge_expired()
        active = self._sessions.get(session_id)
        if active is None:
            raise SessionNotFoundError(session_id)
        active.last_seen = self._clock()
        return active

    def _record_result(self, session_id: UUID, answers: AnswerMap) -> None:
        active = self._sessions.get(session_id)
        if active is None:
            return
        active.result = grade_answers(active.engine.questions, answers)
        active.finished_at = self._clock()
        logger.info(
            "Quiz session finished",
            extra={
                "session_id": str(session_id),
                "correct": active.result.correct,
                "total": active.result.total,
            },
        )

    def take_result(self, session_id: UUID) -> ScoreSummary:
        """
        Hand out the graded result and drop the session.

        Raises:
            SessionNotFoundError: Unknown or already collected session
            SessionNotFinishedError: Session is still running
        """
        active = self.get(session_id)
        if active.result is None:
            raise SessionNotFinishedError(session_id, active.engine.status)
        del self._sessions[session_id]
        return active.result

    def exit(self, session_id: UUID) -> None:
        """Abandon a session: stop its countdown and discard it without scoring."""
        active = self.get(session_id)
        self._discard(active)
        logger.info("Quiz session exited", extra={"session_id": str(session_id)})

    def _discard(self, active: ActiveSession) -> None:
        active.engine.exit()
        active.countdown.stop()
        del self._sessions[active.id]

    def purge_expired(self) -> int:
        """Drop stale results and idle sessions. Returns how many were removed."""
        now = self._clock()
        expired = []
        for active in self._sessions.values():
            if active.finished_at is not None:
                if now - active.finished_at >= self.result_retention:
                    expired.append(active)
            elif now - active.last_seen >= self.idle_timeout + active.engine.time_limit:
                expired.append(active)

        for active in expired:
            self._discard(active)
        if expired:
            logger.info("Quiz sessions expired", extra={"expired": len(expired), "remaining": len(self._sessions)})
        return len(expired)

    def clear(self) -> None:
        for active in self._sessions.values():
            active.countdown.stop()
        self._sessions.clear()


# Global registry instance
registry = SessionRegistry()
