"""Quiz session state and its transition functions.

Every transition takes the current state (plus the fixed question list) and
returns the next state. A transition that does not apply returns the state it
was given, unchanged and identical (``is``), so callers can detect no-ops.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum

from quizbank.models.question import QuestionType
from quizbank.schemas.question import QuestionOut


class SessionStatus(str, Enum):
    """Where a session is in its lifecycle."""

    IN_PROGRESS = "in_progress"
    CONFIRMING_FINISH = "confirming_finish"
    FINISHED = "finished"
    EXITED = "exited"  # Left before finishing; answers are discarded


TERMINAL_STATUSES = frozenset({SessionStatus.FINISHED, SessionStatus.EXITED})


@dataclass(frozen=True)
class SessionState:
    status: SessionStatus = SessionStatus.IN_PROGRESS
    current_index: int = 0
    answers: Mapping[int, tuple[str, ...]] = field(default_factory=dict)
    time_remaining: int | None = None  # None when the session is untimed

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


def initial_state(time_limit: int = 0) -> SessionState:
    return SessionState(time_remaining=time_limit if time_limit > 0 else None)


def selected_options(state: SessionState, question_id: int) -> tuple[str, ...]:
    return state.answers.get(question_id, ())


def is_all_answered(state: SessionState, questions: Sequence[QuestionOut]) -> bool:
    return all(len(selected_options(state, q.id)) > 0 for q in questions)


def select_option(state: SessionState, questions: Sequence[QuestionOut], option: str) -> SessionState:
    """Select an option on the current question.

    Single choice replaces the selection; multiple choice toggles the option.
    """
    if state.status != SessionStatus.IN_PROGRESS:
        return state
    if not 0 <= state.current_index < len(questions):
        return state

    question = questions[state.current_index]
    current = selected_options(state, question.id)

    if question.question_type == QuestionType.SINGLE_CHOICE:
        selected: tuple[str, ...] = (option,)
    elif option in current:
        selected = tuple(item for item in current if item != option)
    else:
        selected = current + (option,)

    return replace(state, answers={**state.answers, question.id: selected})


def go_to(state: SessionState, questions: Sequence[QuestionOut], index: int) -> SessionState:
    if state.status != SessionStatus.IN_PROGRESS or not questions:
        return state
    index = max(0, min(index, len(questions) - 1))
    if index == state.current_index:
        return state
    return replace(state, current_index=index)


def go_next(state: SessionState, questions: Sequence[QuestionOut]) -> SessionState:
    return go_to(state, questions, state.current_index + 1)


def go_previous(state: SessionState, questions: Sequence[QuestionOut]) -> SessionState:
    return go_to(state, questions, state.current_index - 1)


def request_finish(state: SessionState, questions: Sequence[QuestionOut]) -> SessionState:
    """Ask for confirmation; only allowed on the last question once everything is answered."""
    if state.status != SessionStatus.IN_PROGRESS:
        return state
    if state.current_index != len(questions) - 1 or not is_all_answered(state, questions):
        return state
    return replace(state, status=SessionStatus.CONFIRMING_FINISH)


def cancel_finish(state: SessionState) -> SessionState:
    if state.status != SessionStatus.CONFIRMING_FINISH:
        return state
    return replace(state, status=SessionStatus.IN_PROGRESS)


def confirm_finish(state: SessionState) -> SessionState:
    if state.status != SessionStatus.CONFIRMING_FINISH:
        return state
    return replace(state, status=SessionStatus.FINISHED)


def tick(state: SessionState) -> SessionState:
    """Advance the countdown by one second.

    Only runs while in progress. Hitting zero finishes the session regardless
    of unanswered questions.
    """
    if state.status != SessionStatus.IN_PROGRESS or state.time_remaining is None:
        return state
    if state.time_remaining <= 1:
        return replace(state, time_remaining=0, status=SessionStatus.FINISHED)
    return replace(state, time_remaining=state.time_remaining - 1)


def exit_session(state: SessionState) -> SessionState:
    if state.is_terminal:
        return state
    return replace(state, status=SessionStatus.EXITED)
