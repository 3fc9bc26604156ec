"""Writer for import engine - hands accepted candidates to storage."""

from quizbank.schemas.question import QuestionCandidate
from quizbank.services.question_store import QuestionStore


class QuestionWriter:
    """Write validated candidates through the storage collaborator."""

    def __init__(self, store: QuestionStore):
        """
        Initialize writer.

        Args:
            store: Storage collaborator exposing bulk_insert
        """
        self.store = store

    def bulk_insert(self, candidates: list[QuestionCandidate]) -> int:
        """
        Bulk insert candidates as one batch.

        Args:
            candidates: Accepted question candidates

        Returns:
            Number of questions inserted
        """
        if not candidates:
            return 0
        return self.store.bulk_insert(candidates)
