"""Admin import endpoint for bulk CSV question uploads."""

from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session

from quizbank.core.app_exceptions import ErrorCode, raise_app_error
from quizbank.core.config import settings
from quizbank.core.logging import get_logger
from quizbank.db.session import get_db
from quizbank.schemas.import_schema import ImportResultOut, RowRejectionOut
from quizbank.services.importer import (
    CSVParseError,
    CsvIngestionPipeline,
    EmptyBatchError,
    QuestionImporter,
    QuestionWriter,
)
from quizbank.services.importer.csv_parser import decode_content
from quizbank.services.question_store import SqlQuestionStore

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/import", tags=["Admin - Import"])

_importer = QuestionImporter(CsvIngestionPipeline(settings.CATEGORY_ALIASES))


def get_importer() -> QuestionImporter:
    return _importer


@router.post("/csv", response_model=ImportResultOut, status_code=status.HTTP_201_CREATED)
async def import_csv(
    file: UploadFile = File(..., description="CSV: question, question_type, answers, correct_answers, category"),
    db: Session = Depends(get_db),
    importer: QuestionImporter = Depends(get_importer),
) -> ImportResultOut:
    """Import questions from a CSV upload. Bad rows are skipped, not fatal."""
    content = await file.read()
    if len(content) > settings.IMPORT_MAX_UPLOAD_BYTES:
        raise_app_error(
            ErrorCode.IMPORT_TOO_LARGE,
            f"File exceeds {settings.IMPORT_MAX_UPLOAD_BYTES} bytes",
        )

    try:
        text = decode_content(content, settings.IMPORT_ENCODING)
    except CSVParseError as e:
        raise_app_error(ErrorCode.IMPORT_DECODE_ERROR, str(e))

    try:
        summary = await importer.run(text, QuestionWriter(SqlQuestionStore(db)))
    except EmptyBatchError as e:
        logger.warning(
            "CSV import produced no questions",
            extra={"upload_name": file.filename, "skipped": e.skipped},
        )
        raise_app_error(
            ErrorCode.EMPTY_IMPORT_BATCH,
            e.message,
            {
                "skipped_count": e.skipped,
                "rejections": [r.to_dict() for r in e.rejections],
            },
        )

    return ImportResultOut(
        imported_count=summary.imported_count,
        skipped_count=summary.skipped_count,
        dropped_lines=summary.dropped_lines,
        message=summary.message,
        rejections=[RowRejectionOut(**r.to_dict()) for r in summary.result.rejections],
    )
