"""Pick the questions for a new quiz session."""

import random

from quizbank.schemas.question import QuestionOut


class NotEnoughQuestionsError(Exception):
    """The filters leave no question to build a session from."""

    def __init__(self, category: str | None):
        self.category = category
        super().__init__(f"No questions available for category {category!r}" if category else "No questions available")


def select_questions(
    questions: list[QuestionOut],
    category: str | None = None,
    count: int | None = None,
    seed: str | None = None,
) -> list[QuestionOut]:
    """
    Filter by category, optionally shuffle, then take the first ``count``.

    Args:
        questions: Candidate pool (storage order)
        category: Exact category match, or all categories
        count: Maximum number of questions
        seed: Seed for a reproducible shuffle; storage order is kept without one

    Raises:
        NotEnoughQuestionsError: If nothing matches
    """
    pool = [q for q in questions if category is None or q.category == category]
    if not pool:
        raise NotEnoughQuestionsError(category)

    if seed is not None:
        rng = random.Random(seed)
        rng.shuffle(pool)

    if count is not None:
        pool = pool[:count]
    return pool
