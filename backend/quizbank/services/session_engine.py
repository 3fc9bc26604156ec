"""Quiz session engine: owns one learner's attempt at a fixed question list."""

from collections.abc import Callable, Sequence

from quizbank.core.logging import get_logger
from quizbank.schemas.question import QuestionOut
from quizbank.services import session_state as transitions
from quizbank.services.session_state import SessionState, SessionStatus

logger = get_logger(__name__)

AnswerMap = dict[int, list[str]]
FinishCallback = Callable[[AnswerMap], None]


def format_time(seconds: int) -> str:
    """Render a countdown as MM:SS."""
    seconds = max(0, seconds)
    minutes, secs = divmod(seconds, 60)
    return f"{minutes:02d}:{secs:02d}"


class QuizSessionEngine:
    """
    Drive a quiz session through its state machine.

    The engine keeps a single state reference and replaces it on every
    transition; timer ticks read it fresh, so an auto-finish always emits the
    answers selected at that instant. The finish callback (the scoring
    collaborator) is invoked at most once, and never when the learner exits.

    Args:
        questions: Ordered, non-empty question list; fixed for the session
        on_finish: Receives question id -> selected options when the session finishes
        time_limit: Seconds until auto-finish; 0 or less means untimed
    """

    def __init__(
        self,
        questions: Sequence[QuestionOut],
        on_finish: FinishCallback,
        time_limit: int = 0,
    ):
        if not questions:
            raise ValueError("A quiz session needs at least one question")
        self.questions: tuple[QuestionOut, ...] = tuple(questions)
        self.time_limit = max(0, time_limit)
        self._on_finish = on_finish
        self._state = transitions.initial_state(self.time_limit)
        self._emitted = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def status(self) -> SessionStatus:
        return self._state.status

    def _apply(self, new_state: SessionState, event: str) -> bool:
        if new_state is self._state:
            logger.debug("Transition ignored", extra={"transition": event, "status": self._state.status.value})
            return False

        previous = self._state
        self._state = new_state
        if previous.status != new_state.status:
            logger.debug(
                "Session state changed",
                extra={"transition": event, "from": previous.status.value, "to": new_state.status.value},
            )
        if new_state.status == SessionStatus.FINISHED:
            self._emit()
        return True

    def _emit(self) -> None:
        if self._emitted:
            return
        self._emitted = True
        self._on_finish(self.answers_snapshot())

    # Transitions

    def select_option(self, option: str) -> bool:
        return self._apply(transitions.select_option(self._state, self.questions, option), "select_option")

    def go_next(self) -> bool:
        return self._apply(transitions.go_next(self._state, self.questions), "go_next")

    def go_previous(self) -> bool:
        return self._apply(transitions.go_previous(self._state, self.questions), "go_previous")

    def request_finish(self) -> bool:
        """Move to confirmation. Returns False while the guard blocks it."""
        return self._apply(transitions.request_finish(self._state, self.questions), "request_finish")

    def cancel_finish(self) -> bool:
        return self._apply(transitions.cancel_finish(self._state), "cancel_finish")

    def confirm_finish(self) -> bool:
        return self._apply(transitions.confirm_finish(self._state), "confirm_finish")

    def tick(self) -> bool:
        """One second of countdown; auto-finishes at zero."""
        changed = self._apply(transitions.tick(self._state), "tick")
        if changed and self._state.status == SessionStatus.FINISHED:
            logger.info(
                "Time limit reached, session auto-finished",
                extra={"answered": self.answered_count, "total": len(self.questions)},
            )
        return changed

    def exit(self) -> bool:
        """Leave without finishing; nothing is handed to the scorer."""
        return self._apply(transitions.exit_session(self._state), "exit")

    # Derived views, recomputed on every read

    @property
    def current_index(self) -> int:
        return self._state.current_index

    @property
    def current_question(self) -> QuestionOut | None:
        if 0 <= self._state.current_index < len(self.questions):
            return self.questions[self._state.current_index]
        return None

    @property
    def progress(self) -> float:
        return (self._state.current_index + 1) / len(self.questions)

    @property
    def is_last_question(self) -> bool:
        return self._state.current_index == len(self.questions) - 1

    @property
    def is_all_answered(self) -> bool:
        return transitions.is_all_answered(self._state, self.questions)

    @property
    def is_current_answered(self) -> bool:
        question = self.current_question
        return question is not None and len(self.selected_for(question.id)) > 0

    @property
    def answered_count(self) -> int:
        return sum(1 for q in self.questions if self.selected_for(q.id))

    @property
    def can_request_finish(self) -> bool:
        return self._state.status == SessionStatus.IN_PROGRESS and self.is_last_question and self.is_all_answered

    @property
    def time_remaining(self) -> int | None:
        return self._state.time_remaining

    @property
    def timer_active(self) -> bool:
        """True while a countdown should keep running (it only decrements in progress)."""
        return self.time_limit > 0 and not self._state.is_terminal

    def is_time_running_low(self, threshold_seconds: int) -> bool:
        remaining = self._state.time_remaining
        return remaining is not None and remaining < threshold_seconds

    def selected_for(self, question_id: int) -> tuple[str, ...]:
        return transitions.selected_options(self._state, question_id)

    def answers_snapshot(self) -> AnswerMap:
        return {question_id: list(options) for question_id, options in self._state.answers.items()}
