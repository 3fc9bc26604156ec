"""Row mapper for import engine."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from quizbank.services.importer.csv_parser import CsvRow

LIST_SEPARATOR = ";"

# Human-readable spellings accepted in the question_type column
TYPE_ALIASES = {
    "single choice": "single_choice",
    "multiple choice": "multiple_choice",
}


def normalize_question_type(value: str) -> str:
    """Map 'Single Choice' style labels onto the stored enum value.

    Anything else is returned trimmed but otherwise untouched, so validation
    can reject it.
    """
    value = value.strip()
    return TYPE_ALIASES.get(value.lower(), value)


def split_list(value: str) -> list[str]:
    """Split a ';'-delimited cell into trimmed, non-empty tokens."""
    return [token.strip() for token in value.split(LIST_SEPARATOR) if token.strip()]


class RowMapper:
    """Map CSV rows to canonical question fields."""

    def __init__(self, category_map: Mapping[str, str] | None = None):
        """
        Initialize row mapper.

        Args:
            category_map: Legacy category label -> canonical label
        """
        self.category_map = MappingProxyType(dict(category_map or {}))

    def normalize_category(self, value: str) -> str:
        category = value.strip()
        return self.category_map.get(category, category)

    def map_row(self, row: CsvRow) -> dict[str, Any]:
        """
        Map a CSV row to canonical question fields.

        Args:
            row: Tokenized CSV row

        Returns:
            Canonical question dict; question_type is still a plain string
        """
        correct_answers = split_list(row.correct_answers)

        return {
            "question_text": row.question,
            "question_type": normalize_question_type(row.question_type),
            "all_answers": split_list(row.answers),
            # Correct answers form a set; keep first-seen order
            "correct_answers": list(dict.fromkeys(correct_answers)),
            "category": self.normalize_category(row.category),
        }
