"""Grade a finished quiz session against the stored correct answers."""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from quizbank.schemas.question import QuestionOut


@dataclass
class ScoreSummary:
    correct: int
    total: int
    percentage: float
    per_question: dict[int, bool] = field(default_factory=dict)
    answers: dict[int, list[str]] = field(default_factory=dict)


def grade_answers(questions: Sequence[QuestionOut], answers: Mapping[int, Sequence[str]]) -> ScoreSummary:
    """A question counts as correct when the selected set equals the correct set exactly."""
    per_question: dict[int, bool] = {}
    for question in questions:
        selected = set(answers.get(question.id, ()))
        per_question[question.id] = bool(selected) and selected == set(question.correct_answers)

    correct = sum(1 for ok in per_question.values() if ok)
    total = len(questions)
    percentage = round((correct / total) * 100, 2) if total > 0 else 0.0

    return ScoreSummary(
        correct=correct,
        total=total,
        percentage=percentage,
        per_question=per_question,
        answers={question_id: list(options) for question_id, options in answers.items()},
    )
