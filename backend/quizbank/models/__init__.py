"""Database models."""

# Import all models here so metadata.create_all sees them
from quizbank.models.question import Question, QuestionType

__all__ = [
    "Question",
    "QuestionType",
]
