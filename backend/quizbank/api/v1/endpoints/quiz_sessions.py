"""Quiz session endpoints: start, answer, navigate, finish or exit."""

from collections.abc import Callable
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from quizbank.core.app_exceptions import ErrorCode, raise_app_error
from quizbank.core.config import settings
from quizbank.db.session import get_db
from quizbank.schemas.session import (
    QuizQuestionOut,
    SelectOptionIn,
    SessionCreate,
    SessionOut,
    SessionResultOut,
    TransitionOut,
)
from quizbank.services.question_store import SqlQuestionStore
from quizbank.services.quiz_selection import NotEnoughQuestionsError, select_questions
from quizbank.services.session_engine import QuizSessionEngine, format_time
from quizbank.services.session_registry import (
    ActiveSession,
    SessionNotFinishedError,
    SessionNotFoundError,
    SessionRegistry,
    registry,
)

router = APIRouter(prefix="/quiz/sessions", tags=["Quiz Sessions"])


def get_registry() -> SessionRegistry:
    return registry


def build_session_out(active: ActiveSession) -> SessionOut:
    """Project engine state into the response shape."""
    engine = active.engine
    question = engine.current_question
    remaining = engine.time_remaining

    return SessionOut(
        id=active.id,
        status=engine.status,
        current_index=engine.current_index,
        total_questions=len(engine.questions),
        progress=engine.progress,
        current_question=(
            QuizQuestionOut(
                id=question.id,
                question_text=question.question_text,
                question_type=question.question_type,
                all_answers=question.all_answers,
                category=question.category,
            )
            if question is not None
            else None
        ),
        selected_options=list(engine.selected_for(question.id)) if question is not None else [],
        answered_count=engine.answered_count,
        is_current_answered=engine.is_current_answered,
        is_all_answered=engine.is_all_answered,
        is_last_question=engine.is_last_question,
        can_request_finish=engine.can_request_finish,
        time_limit_seconds=engine.time_limit,
        time_remaining=remaining,
        time_remaining_display=format_time(remaining) if remaining is not None else None,
        time_running_low=engine.is_time_running_low(settings.QUIZ_LOW_TIME_THRESHOLD_SECONDS),
    )


def _get_active(sessions: SessionRegistry, session_id: UUID) -> ActiveSession:
    try:
        return sessions.get(session_id)
    except SessionNotFoundError as e:
        raise_app_error(ErrorCode.SESSION_NOT_FOUND, str(e))


def _transition(
    sessions: SessionRegistry,
    session_id: UUID,
    action: Callable[[QuizSessionEngine], bool],
) -> TransitionOut:
    active = _get_active(sessions, session_id)
    applied = action(active.engine)
    return TransitionOut(applied=applied, session=build_session_out(active))


@router.post("", response_model=SessionOut, status_code=status.HTTP_201_CREATED)
async def create_session(
    payload: SessionCreate,
    db: Session = Depends(get_db),
    sessions: SessionRegistry = Depends(get_registry),
) -> SessionOut:
    """Start a quiz over stored questions."""
    count = min(payload.count or settings.QUIZ_MAX_QUESTIONS, settings.QUIZ_MAX_QUESTIONS)
    time_limit = (
        payload.time_limit_seconds
        if payload.time_limit_seconds is not None
        else settings.QUIZ_DEFAULT_TIME_LIMIT_SECONDS
    )

    try:
        questions = select_questions(
            SqlQuestionStore(db).fetch_all(),
            category=payload.category,
            count=count,
            seed=payload.seed,
        )
    except NotEnoughQuestionsError as e:
        raise_app_error(
            ErrorCode.NOT_ENOUGH_QUESTIONS,
            str(e),
            {"category": e.category},
        )

    active = sessions.create(questions, time_limit=time_limit)
    return build_session_out(active)


@router.get("/{session_id}", response_model=SessionOut)
async def get_session(
    session_id: UUID,
    sessions: SessionRegistry = Depends(get_registry),
) -> SessionOut:
    return build_session_out(_get_active(sessions, session_id))


@router.post("/{session_id}/select", response_model=TransitionOut)
async def select_option(
    session_id: UUID,
    payload: SelectOptionIn,
    sessions: SessionRegistry = Depends(get_registry),
) -> TransitionOut:
    """Select (single choice) or toggle (multiple choice) an option on the current question."""
    return _transition(sessions, session_id, lambda engine: engine.select_option(payload.option))


@router.post("/{session_id}/next", response_model=TransitionOut)
async def go_next(session_id: UUID, sessions: SessionRegistry = Depends(get_registry)) -> TransitionOut:
    return _transition(sessions, session_id, QuizSessionEngine.go_next)


@router.post("/{session_id}/previous", response_model=TransitionOut)
async def go_previous(session_id: UUID, sessions: SessionRegistry = Depends(get_registry)) -> TransitionOut:
    return _transition(sessions, session_id, QuizSessionEngine.go_previous)


@router.post("/{session_id}/finish/request", response_model=TransitionOut)
async def request_finish(session_id: UUID, sessions: SessionRegistry = Depends(get_registry)) -> TransitionOut:
    """Ask to finish; refused until the last question is reached and all are answered."""
    return _transition(sessions, session_id, QuizSessionEngine.request_finish)


@router.post("/{session_id}/finish/cancel", response_model=TransitionOut)
async def cancel_finish(session_id: UUID, sessions: SessionRegistry = Depends(get_registry)) -> TransitionOut:
    return _transition(sessions, session_id, QuizSessionEngine.cancel_finish)


@router.post("/{session_id}/finish/confirm", response_model=TransitionOut)
async def confirm_finish(session_id: UUID, sessions: SessionRegistry = Depends(get_registry)) -> TransitionOut:
    return _transition(sessions, session_id, QuizSessionEngine.confirm_finish)


@router.post("/{session_id}/exit", status_code=status.HTTP_204_NO_CONTENT)
async def exit_session(session_id: UUID, sessions: SessionRegistry = Depends(get_registry)) -> None:
    """Leave the quiz; the session is discarded without a result."""
    try:
        sessions.exit(session_id)
    except SessionNotFoundError as e:
        raise_app_error(ErrorCode.SESSION_NOT_FOUND, str(e))


@router.get("/{session_id}/result", response_model=SessionResultOut)
async def get_result(session_id: UUID, sessions: SessionRegistry = Depends(get_registry)) -> SessionResultOut:
    """Collect the graded result; the session is released once it has been read."""
    try:
        result = sessions.take_result(session_id)
    except SessionNotFoundError as e:
        raise_app_error(ErrorCode.SESSION_NOT_FOUND, str(e))
    except SessionNotFinishedError as e:
        raise_app_error(
            ErrorCode.SESSION_NOT_FINISHED,
            str(e),
            {"status": e.status.value},
        )

    return SessionResultOut(
        session_id=session_id,
        correct=result.correct,
        total=result.total,
        percentage=result.percentage,
        per_question=result.per_question,
        answers=result.answers,
    )
