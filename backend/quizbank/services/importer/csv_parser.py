"""CSV tokenizer for the question import pipeline.

The accepted format is deliberately narrow: the first line is a header that is
skipped without being read, every other line is one record, and a double quote
only toggles whether commas separate fields. Quoted fields cannot span lines.
"""

from collections.abc import Iterator
from dataclasses import dataclass

from quizbank.core.logging import get_logger

logger = get_logger(__name__)

FIELD_SEPARATOR = ","
QUOTE_CHAR = '"'
REQUIRED_FIELD_COUNT = 5


class CSVParseError(Exception):
    """Raised when uploaded bytes cannot be turned into text."""

    pass


@dataclass(frozen=True)
class CsvRow:
    """Raw fields of one record, in fixed column order."""

    question: str
    question_type: str
    answers: str
    correct_answers: str
    category: str


def decode_content(file_content: bytes, encoding: str) -> str:
    """
    Decode an uploaded file.

    Raises:
        CSVParseError: If the bytes are not valid in the given encoding
    """
    try:
        return file_content.decode(encoding)
    except (UnicodeDecodeError, LookupError) as e:
        raise CSVParseError(f"Failed to decode file with encoding {encoding}: {e}") from e


def split_fields(line: str) -> list[str]:
    """Split one line on commas that are outside double quotes.

    Quote characters are consumed as toggles and never copied into a field.
    """
    fields: list[str] = []
    in_quotes = False
    buffer: list[str] = []

    for char in line:
        if char == QUOTE_CHAR:
            in_quotes = not in_quotes
        elif char == FIELD_SEPARATOR and not in_quotes:
            fields.append("".join(buffer))
            buffer = []
        else:
            buffer.append(char)
    fields.append("".join(buffer))

    return fields


def clean_field(value: str) -> str:
    """Trim, strip one surrounding quote on each side, unescape doubled quotes, trim again."""
    value = value.strip()
    if value.startswith(QUOTE_CHAR):
        value = value[1:]
    if value.endswith(QUOTE_CHAR):
        value = value[:-1]
    return value.replace(QUOTE_CHAR * 2, QUOTE_CHAR).strip()


class CSVParser:
    """Turn raw CSV text into CsvRow records."""

    def __init__(self) -> None:
        self.dropped_lines: list[int] = []

    def parse(self, text: str) -> Iterator[tuple[int, CsvRow]]:
        """
        Parse CSV text.

        Lines with fewer than five fields are dropped; their line numbers are
        collected in ``dropped_lines``.

        Args:
            text: Raw file content

        Yields:
            Tuple of (line_number, row), line numbers are 1-based physical lines
        """
        self.dropped_lines = []
        lines = text.split("\n")

        for line_number, raw_line in enumerate(lines[1:], start=2):
            line = raw_line.strip()
            if not line:
                continue

            values = [clean_field(field) for field in split_fields(line)]
            if len(values) < REQUIRED_FIELD_COUNT:
                logger.debug(
                    "Dropping line with too few fields",
                    extra={"line_number": line_number, "field_count": len(values)},
                )
                self.dropped_lines.append(line_number)
                continue

            yield line_number, CsvRow(*values[:REQUIRED_FIELD_COUNT])
