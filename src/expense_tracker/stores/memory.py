from datetime import datetime

from expense_tracker.logger import get_logger
from expense_tracker.models import Transaction, TransactionDraft

from .base import EntryStore, sort_by_recency

logger = get_logger(__name__)


class MemoryEntryStore(EntryStore):
    """Process-local store. Contents are lost when the process exits."""

    def __init__(self) -> None:
        super().__init__()
        self.records: list[Transaction] = []

    def open(self) -> None:
        super().open()
        logger.info("[STORE] In-memory store opened with %d records.", len(self.records))

    def insert(self, draft: TransactionDraft, date: datetime | None = None) -> Transaction:
        self._ensure_open()
        record = self._build_record(draft, date)
        self.records.append(record)
        return record

    def list_all(self) -> list[Transaction]:
        self._ensure_open()
        return sort_by_recency(self.records)

    def count(self) -> int:
        self._ensure_open()
        return len(self.records)
