"""Asyncio countdown that feeds one-second ticks into a quiz session."""

import asyncio

from quizbank.core.config import settings
from quizbank.core.logging import get_logger
from quizbank.services.session_engine import QuizSessionEngine

logger = get_logger(__name__)


class SessionCountdown:
    """Tick a session once per interval until it reaches a terminal state."""

    def __init__(self, engine: QuizSessionEngine, interval: float | None = None):
        self.engine = engine
        self.interval = interval if interval is not None else settings.QUIZ_TICK_SECONDS
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def task(self) -> asyncio.Task | None:
        return self._task

    def start(self) -> asyncio.Task | None:
        """Start ticking on the running loop. Untimed sessions get no task."""
        if not self.engine.timer_active:
            return None
        if self.running:
            return self._task
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    async def _run(self) -> None:
        while self.engine.timer_active:
            await asyncio.sleep(self.interval)
            self.engine.tick()
        logger.debug("Countdown stopped", extra={"status": self.engine.status.value})

    def stop(self) -> None:
        if self.running:
            self._task.cancel()
        self._task = None
