import json
import os
import tempfile
import threading
from datetime import datetime

from pydantic import ValidationError as ModelValidationError

from expense_tracker.errors import PersistenceError
from expense_tracker.logger import get_logger
from expense_tracker.models import Transaction, TransactionDraft

from .base import EntryStore, sort_by_recency

logger = get_logger(__name__)


class JsonEntryStore(EntryStore):
    """
    Stores every record in a single JSON document.

    Writes go to a temporary file in the same directory which then replaces
    the document, so a failed write leaves the previous contents in place.
    """

    def __init__(self, data_path: str = "transactions.json"):
        super().__init__()
        self.data_path = data_path
        self.records: list[Transaction] = []
        self._lock = threading.Lock()

    def open(self) -> None:
        with self._lock:
            directory = os.path.dirname(os.path.abspath(self.data_path))
            try:
                os.makedirs(directory, exist_ok=True)
                self.records = self._load()
            except (OSError, ValueError) as exc:
                raise PersistenceError(f"Cannot open store at {self.data_path}: {exc}") from exc
            super().open()
        logger.info("[STORE] Opened %s with %d records.", self.data_path, len(self.records))

    def close(self) -> None:
        with self._lock:
            super().close()
            self.records = []
        logger.info("[STORE] Closed %s.", self.data_path)

    def _load(self) -> list[Transaction]:
        if not os.path.exists(self.data_path):
            return []
        with open(self.data_path, encoding="utf-8") as handle:
            raw = json.load(handle)
        if not isinstance(raw, list):
            raise ValueError("expected a JSON array of transactions")
        try:
            return [Transaction.model_validate(item) for item in raw]
        except ModelValidationError as exc:
            raise ValueError(f"malformed transaction record: {exc}") from exc

    def _save(self, records: list[Transaction]) -> None:
        directory = os.path.dirname(os.path.abspath(self.data_path))
        payload = [record.model_dump(mode="json") for record in records]
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle, indent=2)
            os.replace(tmp_path, self.data_path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def insert(self, draft: TransactionDraft, date: datetime | None = None) -> Transaction:
        with self._lock:
            self._ensure_open()
            record = self._build_record(draft, date)
            updated = [*self.records, record]
            try:
                self._save(updated)
            except OSError as exc:
                logger.error("[STORE] Write to %s failed: %s", self.data_path, exc)
                raise PersistenceError(f"Failed to save transaction: {exc}") from exc
            self.records = updated
            return record

    def list_all(self) -> list[Transaction]:
        with self._lock:
            self._ensure_open()
            return sort_by_recency(self.records)

    def count(self) -> int:
        with self._lock:
            self._ensure_open()
            return len(self.records)
