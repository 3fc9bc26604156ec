"""Pydantic schemas for the question bank."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from quizbank.models.question import QuestionType

# Editor input caps (HTTP input hardening; imported rows are not capped)
QUESTION_TEXT_MAX_LENGTH = 4000
ANSWER_MAX_LENGTH = 500
CATEGORY_MAX_LENGTH = 200
MAX_ANSWERS = 20


class QuestionBase(BaseModel):
    """Fields shared by every question shape (candidate, editor input, stored)."""

    question_text: str
    question_type: QuestionType = Field(default=QuestionType.SINGLE_CHOICE)
    all_answers: list[str] = Field(default_factory=list)
    correct_answers: list[str] = Field(default_factory=list)
    category: str

    @model_validator(mode="after")
    def correct_answers_are_options(self):
        """Every correct answer must be one of the options; single choice allows at most one."""
        unknown = [answer for answer in self.correct_answers if answer not in self.all_answers]
        if unknown:
            raise ValueError(f"correct_answers not among all_answers: {unknown}")
        if self.question_type == QuestionType.SINGLE_CHOICE and len(set(self.correct_answers)) > 1:
            raise ValueError("single_choice questions allow at most one correct answer")
        return self


class QuestionCandidate(QuestionBase):
    """Question derived from import input, not yet persisted (no id)."""

    question_text: str = Field(..., min_length=1)
    all_answers: list[str] = Field(..., min_length=1)


class QuestionCreate(QuestionBase):
    """Schema for creating a question from the admin editor."""

    question_text: str = Field(..., min_length=1, max_length=QUESTION_TEXT_MAX_LENGTH)
    all_answers: list[str] = Field(..., min_length=2, max_length=MAX_ANSWERS)
    correct_answers: list[str] = Field(default_factory=list, max_length=MAX_ANSWERS)
    category: str = Field(..., min_length=1, max_length=CATEGORY_MAX_LENGTH)

    @model_validator(mode="before")
    @classmethod
    def strip_text_fields(cls, data):
        """Trim free text; categories are used as exact-match filter keys."""
        if isinstance(data, dict):
            data = dict(data)
            for key in ("question_text", "category"):
                if isinstance(data.get(key), str):
                    data[key] = data[key].strip()
        return data

    @model_validator(mode="after")
    def answers_within_caps(self):
        too_long = [answer for answer in self.all_answers if len(answer) > ANSWER_MAX_LENGTH]
        if too_long:
            raise ValueError(f"answers longer than {ANSWER_MAX_LENGTH} characters: {len(too_long)}")
        return self


class QuestionUpdate(QuestionCreate):
    """Schema for replacing a question's content (full update)."""


class QuestionOut(QuestionBase):
    """Question response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


class QuestionListOut(BaseModel):
    """Filtered question listing."""

    items: list[QuestionOut]
    total: int
    categories: list[str]
