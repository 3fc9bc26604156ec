"""Import job: run the pipeline and persist the accepted batch."""

import asyncio
from dataclasses import dataclass

from fastapi.concurrency import run_in_threadpool

from quizbank.core.logging import get_logger
from quizbank.services.importer.pipeline import CsvIngestionPipeline, IngestionResult
from quizbank.services.importer.writer import QuestionWriter

logger = get_logger(__name__)


@dataclass
class ImportSummary:
    """What an admin sees after an upload."""

    imported_count: int
    skipped_count: int
    dropped_lines: list[int]
    message: str
    result: IngestionResult


class QuestionImporter:
    """Serialize CSV imports: at most one batch is in flight at a time."""

    def __init__(self, pipeline: CsvIngestionPipeline):
        self.pipeline = pipeline
        self._lock = asyncio.Lock()

    async def run(self, raw_text: str, writer: QuestionWriter) -> ImportSummary:
        """
        Ingest raw CSV text and bulk-insert the accepted candidates.

        Parsing and the database write run in the threadpool so the event
        loop stays free; the lock is held across them.

        Raises:
            EmptyBatchError: If no row was accepted (nothing is written)
        """
        async with self._lock:
            result, inserted = await run_in_threadpool(self._ingest_and_write, raw_text, writer)

        logger.info(
            "Import batch written",
            extra={"inserted": inserted, "skipped": result.skipped},
        )
        return ImportSummary(
            imported_count=inserted,
            skipped_count=result.skipped,
            dropped_lines=result.dropped_lines,
            message=result.summary_message(),
            result=result,
        )

    def _ingest_and_write(self, raw_text: str, writer: QuestionWriter) -> tuple[IngestionResult, int]:
        result = self.pipeline.ingest(raw_text)
        return result, writer.bulk_insert(result.accepted)
