"""Question bank model."""

from enum import Enum as PyEnum

from sqlalchemy import JSON, Column, DateTime, Enum, Index, Integer, String, Text
from sqlalchemy.sql import func

from quizbank.db.base import Base


class QuestionType(str, PyEnum):
    """How many options a learner may select."""

    SINGLE_CHOICE = "single_choice"
    MULTIPLE_CHOICE = "multiple_choice"


class Question(Base):
    """Multiple-choice question with its answer options and category."""

    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    question_text = Column(Text, nullable=False)
    question_type = Column(
        Enum(
            QuestionType,
            name="question_type",
            values_callable=lambda enum_cls: [member.value for member in enum_cls],
        ),
        nullable=False,
        default=QuestionType.SINGLE_CHOICE,
    )
    all_answers = Column(JSON, nullable=False, default=list)  # Ordered option labels
    correct_answers = Column(JSON, nullable=False, default=list)  # Subset of all_answers
    category = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    __table_args__ = (Index("ix_questions_category", "category"),)

    def __repr__(self) -> str:
        return f"<Question(id={self.id}, type={self.question_type}, category={self.category!r})>"
