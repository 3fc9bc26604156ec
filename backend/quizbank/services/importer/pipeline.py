"""CSV ingestion pipeline: raw text in, validated question candidates out."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from quizbank.core.logging import get_logger
from quizbank.schemas.question import QuestionCandidate
from quizbank.services.importer.csv_parser import CSVParser
from quizbank.services.importer.row_mapper import RowMapper
from quizbank.services.importer.validators import QuestionValidator, RowRejection

logger = get_logger(__name__)


class EmptyBatchError(Exception):
    """No row of the input produced a usable question."""

    def __init__(self, skipped: int, rejections: list[RowRejection] | None = None):
        self.skipped = skipped
        self.rejections = rejections or []
        if skipped > 0:
            message = "All rows were skipped due to errors."
        else:
            message = "No valid questions found."
        self.message = message
        super().__init__(message)


@dataclass
class IngestionResult:
    """Outcome of one ingest call."""

    accepted: list[QuestionCandidate]
    skipped: int
    rejections: list[RowRejection] = field(default_factory=list)
    dropped_lines: list[int] = field(default_factory=list)

    def summary_message(self) -> str:
        message = f"Successfully imported {len(self.accepted)} questions."
        if self.skipped > 0:
            message += f" ({self.skipped} rows skipped due to invalid format)"
        return message


class CsvIngestionPipeline:
    """Parse, normalize and validate CSV question rows.

    Holds no state between calls, so ingesting the same text twice yields
    equal candidates.
    """

    def __init__(self, category_map: Mapping[str, str] | None = None):
        """
        Args:
            category_map: Legacy category label -> canonical label
        """
        self.mapper = RowMapper(category_map)
        self.validator = QuestionValidator()

    def ingest(self, raw_text: str) -> IngestionResult:
        """
        Turn raw CSV text into accepted candidates.

        Row-level problems are collected, never raised.

        Raises:
            EmptyBatchError: If no row was accepted
        """
        parser = CSVParser()
        accepted: list[QuestionCandidate] = []
        rejections: list[RowRejection] = []
        skipped = 0

        for line_number, row in parser.parse(raw_text):
            canonical = self.mapper.map_row(row)
            row_errors = self.validator.validate(canonical, line_number)

            if not row_errors:
                accepted.append(QuestionCandidate(**canonical))
                continue

            rejections.extend(row_errors)
            if QuestionValidator.is_format_error(row_errors):
                skipped += 1
                logger.warning(
                    "Row skipped",
                    extra={
                        "line_number": line_number,
                        "reason": row_errors[0].code,
                        "detail": row_errors[0].message,
                    },
                )
            else:
                logger.debug(
                    "Row discarded",
                    extra={"line_number": line_number, "reason": row_errors[0].code},
                )

        if not accepted:
            raise EmptyBatchError(skipped, rejections)

        logger.info(
            "CSV ingested",
            extra={
                "accepted": len(accepted),
                "skipped": skipped,
                "rejected": len(rejections),
                "dropped_lines": len(parser.dropped_lines),
            },
        )
        return IngestionResult(
            accepted=accepted,
            skipped=skipped,
            rejections=rejections,
            dropped_lines=list(parser.dropped_lines),
        )
