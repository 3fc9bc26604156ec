"""Tests for the session registry, question selection and scoring."""

import asyncio
import uuid

import pytest

from quizbank.models.question import QuestionType
from quizbank.services.quiz_selection import NotEnoughQuestionsError, select_questions
from quizbank.services.scoring import grade_answers
from quizbank.services.session_registry import SessionNotFinishedError, SessionNotFoundError, SessionRegistry
from quizbank.services.session_state import SessionStatus
from tests.helpers.seed import make_question


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def questions():
    return [
        make_question(1, QuestionType.SINGLE_CHOICE, ["A", "B"], ["A"], category="Hundeführerschein"),
        make_question(2, QuestionType.MULTIPLE_CHOICE, ["A", "B", "C"], ["A", "C"], category="Hundeführerschein"),
        make_question(3, QuestionType.SINGLE_CHOICE, ["X", "Y"], ["Y"], category="Trainerprüfung"),
    ]


def test_grade_answers_exact_set_match() -> None:
    summary = grade_answers(questions(), {1: ["A"], 2: ["C", "A"], 3: ["X"]})

    assert summary.correct == 2
    assert summary.total == 3
    assert summary.percentage == 66.67
    assert summary.per_question == {1: True, 2: True, 3: False}


def test_grade_answers_partial_and_missing_selections_are_wrong() -> None:
    summary = grade_answers(questions(), {2: ["A"]})

    assert summary.correct == 0
    assert summary.per_question == {1: False, 2: False, 3: False}


def test_grade_question_without_correct_answers_is_never_correct() -> None:
    question = make_question(9, QuestionType.SINGLE_CHOICE, ["A", "B"], [])

    assert grade_answers([question], {}).per_question == {9: False}


def test_select_questions_by_category() -> None:
    selected = select_questions(questions(), category="Trainerprüfung")

    assert [q.id for q in selected] == [3]


def test_select_questions_without_seed_keeps_order_and_limits() -> None:
    assert [q.id for q in select_questions(questions(), count=2)] == [1, 2]


def test_select_questions_seeded_shuffle_is_reproducible() -> None:
    pool = [make_question(i) for i in range(1, 21)]

    first = [q.id for q in select_questions(pool, seed="learner-1")]
    second = [q.id for q in select_questions(pool, seed="learner-1")]

    assert first == second
    assert sorted(first) == list(range(1, 21))


def test_select_questions_nothing_matches() -> None:
    with pytest.raises(NotEnoughQuestionsError):
        select_questions(questions(), category="Agility")


def test_registry_records_result_on_finish() -> None:
    sessions = SessionRegistry()
    active = sessions.create(questions())
    engine = active.engine

    engine.select_option("A")
    engine.go_next()
    engine.select_option("A")
    engine.select_option("C")
    engine.go_next()
    engine.select_option("Y")
    engine.request_finish()
    engine.confirm_finish()

    assert sessions.get(active.id).result is not None
    assert active.result.correct == 3
    assert active.result.answers == {1: ["A"], 2: ["A", "C"], 3: ["Y"]}


def test_registry_exit_discards_without_result() -> None:
    sessions = SessionRegistry()
    active = sessions.create(questions())
    active.engine.select_option("A")

    sessions.exit(active.id)

    assert active.engine.status == SessionStatus.EXITED
    assert active.result is None
    assert len(sessions) == 0
    with pytest.raises(SessionNotFoundError):
        sessions.get(active.id)


def test_registry_unknown_session() -> None:
    with pytest.raises(SessionNotFoundError):
        SessionRegistry().exit(uuid.uuid4())


@pytest.mark.asyncio
async def test_registry_timed_session_auto_finishes() -> None:
    sessions = SessionRegistry(tick_interval=0.01)
    active = sessions.create(questions(), time_limit=1)
    active.engine.select_option("A")

    await asyncio.wait_for(active.countdown.task, timeout=1)

    assert active.engine.status == SessionStatus.FINISHED
    assert active.result is not None
    assert active.result.answers == {1: ["A"]}
    assert active.result.correct == 1


@pytest.mark.asyncio
async def test_registry_exit_stops_countdown() -> None:
    sessions = SessionRegistry(tick_interval=0.01)
    active = sessions.create(questions(), time_limit=60)
    task = active.countdown.task

    sessions.exit(active.id)
    await asyncio.sleep(0.05)

    assert task.done()
    assert active.result is None


def finish_all_correct(engine) -> None:
    engine.select_option("A")
    engine.go_next()
    engine.select_option("A")
    engine.select_option("C")
    engine.go_next()
    engine.select_option("Y")
    engine.request_finish()
    engine.confirm_finish()


def test_take_result_releases_session() -> None:
    sessions = SessionRegistry()
    active = sessions.create(questions())
    finish_all_correct(active.engine)

    result = sessions.take_result(active.id)

    assert result.correct == 3
    assert len(sessions) == 0
    with pytest.raises(SessionNotFoundError):
        sessions.take_result(active.id)


def test_take_result_before_finish() -> None:
    sessions = SessionRegistry()
    active = sessions.create(questions())

    with pytest.raises(SessionNotFinishedError) as exc_info:
        sessions.take_result(active.id)

    assert exc_info.value.status == SessionStatus.IN_PROGRESS
    assert len(sessions) == 1


def test_finished_sessions_do_not_accumulate() -> None:
    clock = FakeClock()
    sessions = SessionRegistry(result_retention=60, clock=clock)
    for _ in range(200):
        finish_all_correct(sessions.create(questions()).engine)
    assert len(sessions) == 200

    clock.now += 60

    assert sessions.purge_expired() == 200
    assert len(sessions) == 0


def test_unread_result_kept_within_retention() -> None:
    clock = FakeClock()
    sessions = SessionRegistry(result_retention=60, clock=clock)
    active = sessions.create(questions())
    finish_all_correct(active.engine)

    clock.now += 59

    assert sessions.take_result(active.id).total == 3


def test_idle_untimed_session_expires_without_result() -> None:
    clock = FakeClock()
    sessions = SessionRegistry(idle_timeout=300, clock=clock)
    active = sessions.create(questions())
    active.engine.select_option("A")

    clock.now += 300
    sessions.create(questions())

    assert len(sessions) == 1
    assert active.engine.status == SessionStatus.EXITED
    assert active.result is None
    with pytest.raises(SessionNotFoundError):
        sessions.get(active.id)


def test_lookups_keep_session_alive() -> None:
    clock = FakeClock()
    sessions = SessionRegistry(idle_timeout=300, clock=clock)
    active = sessions.create(questions())

    clock.now += 200
    sessions.get(active.id)
    clock.now += 200

    assert sessions.get(active.id) is active


@pytest.mark.asyncio
async def test_idle_timed_session_gets_its_time_limit_first() -> None:
    clock = FakeClock()
    sessions = SessionRegistry(tick_interval=100, idle_timeout=10, clock=clock)
    active = sessions.create(questions(), time_limit=60)
    task = active.countdown.task

    clock.now += 69
    assert sessions.purge_expired() == 0

    clock.now += 1
    assert sessions.purge_expired() == 1
    with pytest.raises(asyncio.CancelledError):
        await task
    assert active.result is None
