"""Import engine for bulk question imports."""

from quizbank.services.importer.csv_parser import CSVParseError, CSVParser, CsvRow
from quizbank.services.importer.job import ImportSummary, QuestionImporter
from quizbank.services.importer.pipeline import CsvIngestionPipeline, EmptyBatchError, IngestionResult
from quizbank.services.importer.row_mapper import RowMapper
from quizbank.services.importer.validators import QuestionValidator, RowRejection
from quizbank.services.importer.writer import QuestionWriter

__all__ = [
    "CSVParseError",
    "CSVParser",
    "CsvRow",
    "CsvIngestionPipeline",
    "EmptyBatchError",
    "ImportSummary",
    "IngestionResult",
    "QuestionImporter",
    "RowMapper",
    "QuestionValidator",
    "RowRejection",
    "QuestionWriter",
]
