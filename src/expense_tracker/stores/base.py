from abc import ABC, abstractmethod
from datetime import datetime, timezone
from uuid import uuid4

from expense_tracker.errors import PersistenceError
from expense_tracker.models import Transaction, TransactionDraft


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_transaction_id() -> str:
    return uuid4().hex


def sort_by_recency(records: list[Transaction]) -> list[Transaction]:
    """Order records by date, newest first; equal dates keep the latest insert first."""
    return sorted(reversed(records), key=lambda record: record.date, reverse=True)


class EntryStore(ABC):
    def __init__(self) -> None:
        self._is_open = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    def open(self) -> None:
        self._is_open = True

    def close(self) -> None:
        self._is_open = False

    def _ensure_open(self) -> None:
        if not self._is_open:
            raise PersistenceError(f"{self.__class__.__name__} is not open")

    def _build_record(self, draft: TransactionDraft, date: datetime | None) -> Transaction:
        return Transaction(
            id=new_transaction_id(),
            date=date or utc_now(),
            **draft.model_dump(),
        )

    @abstractmethod
    def insert(self, draft: TransactionDraft, date: datetime | None = None) -> Transaction:
        """Persist a new record and return it with its assigned id and date."""
        pass

    @abstractmethod
    def list_all(self) -> list[Transaction]:
        """Return every stored record, most recent first."""
        pass

    def count(self) -> int:
        return len(self.list_all())
