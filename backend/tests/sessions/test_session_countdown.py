"""Tests for the asyncio countdown driving quiz sessions."""

import asyncio

import pytest

from quizbank.services.session_engine import QuizSessionEngine
from quizbank.services.session_state import SessionStatus
from quizbank.services.session_timer import SessionCountdown
from tests.helpers.seed import make_question

TICK = 0.01


def make_engine(calls: list, time_limit: int) -> QuizSessionEngine:
    return QuizSessionEngine([make_question(1), make_question(2)], calls.append, time_limit=time_limit)


@pytest.mark.asyncio
async def test_countdown_auto_finishes() -> None:
    calls: list = []
    engine = make_engine(calls, time_limit=2)
    countdown = SessionCountdown(engine, interval=TICK)

    task = countdown.start()
    engine.select_option("B")
    await asyncio.wait_for(task, timeout=2)

    assert engine.status == SessionStatus.FINISHED
    assert engine.time_remaining == 0
    assert calls == [{1: ["B"]}]
    assert not countdown.running


@pytest.mark.asyncio
async def test_untimed_session_starts_no_task() -> None:
    engine = make_engine([], time_limit=0)

    assert SessionCountdown(engine, interval=TICK).start() is None


@pytest.mark.asyncio
async def test_start_twice_reuses_task() -> None:
    engine = make_engine([], time_limit=100)
    countdown = SessionCountdown(engine, interval=TICK)

    first = countdown.start()
    assert countdown.start() is first
    countdown.stop()


@pytest.mark.asyncio
async def test_stop_cancels_ticking() -> None:
    calls: list = []
    engine = make_engine(calls, time_limit=100)
    countdown = SessionCountdown(engine, interval=TICK)
    task = countdown.start()

    await asyncio.sleep(TICK * 5)
    countdown.stop()
    with pytest.raises(asyncio.CancelledError):
        await task
    remaining = engine.time_remaining

    await asyncio.sleep(TICK * 5)
    assert engine.time_remaining == remaining
    assert remaining < 100
    assert calls == []


@pytest.mark.asyncio
async def test_exit_ends_the_loop_without_emitting() -> None:
    calls: list = []
    engine = make_engine(calls, time_limit=100)
    task = SessionCountdown(engine, interval=TICK).start()

    engine.exit()
    await asyncio.wait_for(task, timeout=1)

    assert engine.status == SessionStatus.EXITED
    assert calls == []


@pytest.mark.asyncio
async def test_confirm_during_countdown_finishes_once() -> None:
    calls: list = []
    engine = make_engine(calls, time_limit=100)
    task = SessionCountdown(engine, interval=TICK).start()

    engine.select_option("A")
    engine.go_next()
    engine.select_option("C")
    assert engine.request_finish()
    await asyncio.sleep(TICK * 3)
    assert engine.time_remaining == 100  # paused while confirming
    engine.confirm_finish()
    await asyncio.wait_for(task, timeout=1)

    assert calls == [{1: ["A"], 2: ["C"]}]
