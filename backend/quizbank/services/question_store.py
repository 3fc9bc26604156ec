"""Question storage: the persistence collaborator used by import, admin and quiz code."""

from collections.abc import Sequence
from typing import Protocol

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from quizbank.core.logging import get_logger
from quizbank.models.question import Question
from quizbank.schemas.question import QuestionBase, QuestionOut

logger = get_logger(__name__)


class QuestionNotFoundError(LookupError):
    """No stored question has the requested id."""

    def __init__(self, question_id: int):
        self.question_id = question_id
        super().__init__(f"Question {question_id} not found")


class QuestionStore(Protocol):
    """Operations the rest of the system needs from storage."""

    def fetch_all(self) -> list[QuestionOut]: ...

    def insert(self, question: QuestionBase) -> QuestionOut: ...

    def update(self, question: QuestionOut) -> QuestionOut: ...

    def delete(self, question_id: int) -> None: ...

    def bulk_insert(self, questions: Sequence[QuestionBase]) -> int: ...


def _apply(row: Question, data: QuestionBase) -> None:
    row.question_text = data.question_text
    row.question_type = data.question_type
    row.all_answers = list(data.all_answers)
    row.correct_answers = list(data.correct_answers)
    row.category = data.category


class SqlQuestionStore:
    """SQLAlchemy-backed QuestionStore."""

    def __init__(self, db: Session):
        self.db = db

    def _get(self, question_id: int) -> Question:
        row = self.db.get(Question, question_id)
        if row is None:
            raise QuestionNotFoundError(question_id)
        return row

    def get(self, question_id: int) -> QuestionOut:
        return QuestionOut.model_validate(self._get(question_id))

    def fetch_all(self) -> list[QuestionOut]:
        rows = self.db.execute(select(Question).order_by(Question.id)).scalars().all()
        return [QuestionOut.model_validate(row) for row in rows]

    def insert(self, question: QuestionBase) -> QuestionOut:
        row = Question()
        _apply(row, question)
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        logger.info("Question created", extra={"question_id": row.id, "category": row.category})
        return QuestionOut.model_validate(row)

    def update(self, question: QuestionOut) -> QuestionOut:
        row = self._get(question.id)
        _apply(row, question)
        self.db.commit()
        self.db.refresh(row)
        logger.info("Question updated", extra={"question_id": row.id})
        return QuestionOut.model_validate(row)

    def delete(self, question_id: int) -> None:
        row = self._get(question_id)
        self.db.delete(row)
        self.db.commit()
        logger.info("Question deleted", extra={"question_id": question_id})

    def bulk_insert(self, questions: Sequence[QuestionBase]) -> int:
        """
        Insert a batch of new questions in one transaction.

        Returns:
            Number of questions inserted
        """
        if not questions:
            return 0

        rows = []
        for data in questions:
            row = Question()
            _apply(row, data)
            rows.append(row)

        self.db.add_all(rows)
        self.db.commit()
        return len(rows)

    def list_questions(self, category: str | None = None, search: str | None = None) -> list[QuestionOut]:
        """
        List questions for the admin view.

        Args:
            category: Exact category match
            search: Case-insensitive substring of the question text
        """
        query = select(Question)
        if category:
            query = query.where(Question.category == category)
        if search:
            query = query.where(func.lower(Question.question_text).contains(search.lower(), autoescape=True))
        rows = self.db.execute(query.order_by(Question.id)).scalars().all()
        return [QuestionOut.model_validate(row) for row in rows]

    def categories(self) -> list[str]:
        rows = self.db.execute(select(Question.category).distinct().order_by(Question.category))
        return [row[0] for row in rows.all()]
