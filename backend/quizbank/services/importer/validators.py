"""Validators for import engine."""

from typing import Any

from quizbank.models.question import QuestionType


class RowRejection:
    """Why a single CSV row did not become a question."""

    def __init__(self, code: str, message: str, field: str | None = None, line_number: int | None = None):
        """
        Initialize row rejection.

        Args:
            code: Error code (stable identifier)
            message: Human-readable message
            field: Field name that failed validation
            line_number: Physical line in the uploaded file
        """
        self.code = code
        self.message = message
        self.field = field
        self.line_number = line_number

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON responses."""
        return {
            "code": self.code,
            "message": self.message,
            "field": self.field,
            "line_number": self.line_number,
        }

    def __repr__(self) -> str:
        return f"RowRejection({self.code!r}, line={self.line_number})"


class QuestionValidator:
    """Validate mapped question data before it becomes a candidate.

    Checks run in stages and stop at the first failing stage: question type,
    then presence of text and answers, then consistency of the correct answers.
    """

    # Error codes (stable)
    INVALID_TYPE = "INVALID_TYPE"
    MISSING_TEXT = "MISSING_TEXT"
    NO_ANSWERS = "NO_ANSWERS"
    CORRECT_NOT_IN_ANSWERS = "CORRECT_NOT_IN_ANSWERS"
    TOO_MANY_CORRECT = "TOO_MANY_CORRECT"

    # Rows rejected with these codes count toward the "skipped due to invalid format" total
    FORMAT_ERRORS = frozenset({INVALID_TYPE, CORRECT_NOT_IN_ANSWERS, TOO_MANY_CORRECT})

    VALID_TYPES = frozenset(t.value for t in QuestionType)

    def validate(self, canonical_data: dict[str, Any], line_number: int | None = None) -> list[RowRejection]:
        """
        Validate canonical question data.

        Args:
            canonical_data: Mapped question data
            line_number: Source line, copied onto each rejection

        Returns:
            List of rejections (empty if valid)
        """
        question_type = canonical_data.get("question_type")
        if question_type not in self.VALID_TYPES:
            return [
                RowRejection(
                    self.INVALID_TYPE,
                    f"Invalid type '{question_type}'",
                    "question_type",
                    line_number,
                )
            ]

        errors: list[RowRejection] = []
        if not canonical_data.get("question_text"):
            errors.append(
                RowRejection(self.MISSING_TEXT, "Question text is empty", "question_text", line_number)
            )
        all_answers = canonical_data.get("all_answers") or []
        if not all_answers:
            errors.append(RowRejection(self.NO_ANSWERS, "No answer options given", "answers", line_number))
        if errors:
            return errors

        correct_answers = canonical_data.get("correct_answers") or []
        unknown = [answer for answer in correct_answers if answer not in all_answers]
        if unknown:
            errors.append(
                RowRejection(
                    self.CORRECT_NOT_IN_ANSWERS,
                    f"Correct answers not among the options: {', '.join(unknown)}",
                    "correct_answers",
                    line_number,
                )
            )
        if question_type == QuestionType.SINGLE_CHOICE.value and len(correct_answers) > 1:
            errors.append(
                RowRejection(
                    self.TOO_MANY_CORRECT,
                    f"single_choice question lists {len(correct_answers)} correct answers",
                    "correct_answers",
                    line_number,
                )
            )

        return errors

    @classmethod
    def is_format_error(cls, rejections: list[RowRejection]) -> bool:
        return any(rejection.code in cls.FORMAT_ERRORS for rejection in rejections)
