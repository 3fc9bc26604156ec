"""Admin question bank endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from quizbank.core.app_exceptions import ErrorCode, raise_app_error
from quizbank.db.session import get_db
from quizbank.schemas.question import (
    QuestionCreate,
    QuestionListOut,
    QuestionOut,
    QuestionUpdate,
)
from quizbank.services.question_store import QuestionNotFoundError, SqlQuestionStore

router = APIRouter(prefix="/admin/questions", tags=["Admin - Questions"])


def get_store(db: Session = Depends(get_db)) -> SqlQuestionStore:
    return SqlQuestionStore(db)


@router.get("", response_model=QuestionListOut, summary="List questions")
async def list_questions(
    category: Annotated[str | None, Query(description="Exact category match")] = None,
    q: Annotated[str | None, Query(max_length=500, description="Text search on question text")] = None,
    store: SqlQuestionStore = Depends(get_store),
) -> QuestionListOut:
    """List questions filtered by category and free-text search."""
    items = store.list_questions(category=category, search=q)
    return QuestionListOut(items=items, total=len(items), categories=store.categories())


@router.post("", response_model=QuestionOut, status_code=status.HTTP_201_CREATED)
async def create_question(
    question_data: QuestionCreate,
    store: SqlQuestionStore = Depends(get_store),
) -> QuestionOut:
    """Create a question from the editor."""
    return store.insert(question_data)


@router.get("/{question_id}", response_model=QuestionOut)
async def get_question(
    question_id: int,
    store: SqlQuestionStore = Depends(get_store),
) -> QuestionOut:
    try:
        return store.get(question_id)
    except QuestionNotFoundError as e:
        raise_app_error(ErrorCode.QUESTION_NOT_FOUND, str(e))


@router.put("/{question_id}", response_model=QuestionOut)
async def update_question(
    question_id: int,
    question_data: QuestionUpdate,
    store: SqlQuestionStore = Depends(get_store),
) -> QuestionOut:
    """Replace a question's content."""
    try:
        return store.update(QuestionOut(id=question_id, **question_data.model_dump()))
    except QuestionNotFoundError as e:
        raise_app_error(ErrorCode.QUESTION_NOT_FOUND, str(e))


@router.delete("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(
    question_id: int,
    store: SqlQuestionStore = Depends(get_store),
) -> None:
    try:
        store.delete(question_id)
    except QuestionNotFoundError as e:
        raise_app_error(ErrorCode.QUESTION_NOT_FOUND, str(e))
