"""Pydantic schemas for quiz sessions."""

from uuid import UUID

from pydantic import BaseModel, Field

from quizbank.models.question import QuestionType
from quizbank.services.session_state import SessionStatus


class SessionCreate(BaseModel):
    """Schema for starting a quiz session."""

    category: str | None = Field(None, description="Only questions of this category")
    count: int | None = Field(None, ge=1, description="Maximum number of questions")
    time_limit_seconds: int | None = Field(
        None, ge=0, description="Countdown in seconds; 0 for untimed, omitted for the server default"
    )
    seed: str | None = Field(None, max_length=200, description="Shuffle seed; storage order when omitted")


class QuizQuestionOut(BaseModel):
    """Question as shown to a learner (no correct answers)."""

    id: int
    question_text: str
    question_type: QuestionType
    all_answers: list[str]
    category: str


class SelectOptionIn(BaseModel):
    option: str = Field(..., min_length=1)


class SessionOut(BaseModel):
    """Read model of a quiz session, recomputed on every request."""

    id: UUID
    status: SessionStatus
    current_index: int
    total_questions: int
    progress: float
    current_question: QuizQuestionOut | None
    selected_options: list[str]
    answered_count: int
    is_current_answered: bool
    is_all_answered: bool
    is_last_question: bool
    can_request_finish: bool
    time_limit_seconds: int
    time_remaining: int | None
    time_remaining_display: str | None
    time_running_low: bool


class TransitionOut(BaseModel):
    """Result of a transition request; applied is False when it was a no-op."""

    applied: bool
    session: SessionOut


class SessionResultOut(BaseModel):
    session_id: UUID
    correct: int
    total: int
    percentage: float
    per_question: dict[int, bool]
    answers: dict[int, list[str]]
