import math
from dataclasses import dataclass
from typing import Any

from expense_tracker.client.api import ExpenseApiClient
from expense_tracker.domain.transactions import (
    Totals,
    compute_balance,
    compute_totals,
    filter_transactions,
)
from expense_tracker.errors import TransportError
from expense_tracker.logger import get_logger
from expense_tracker.models import Transaction, TransactionType

logger = get_logger(__name__)

DEFAULT_CATEGORY = "general"
LOAD_ERROR_MESSAGE = "Failed to load transactions. Please try again."
SUBMIT_ERROR_MESSAGE = "Failed to add transaction. Please try again."


@dataclass
class Draft:
    """Values of the add-transaction form, kept as the user typed them."""
    title: str = ""
    amount: str = ""
    type: TransactionType | None = TransactionType.EXPENSE
    category: str | None = DEFAULT_CATEGORY

    def clear(self) -> None:
        self.title = ""
        self.amount = ""


def _coerce_amount(raw: str) -> float | str:
    # Input that is not a finite number goes through as typed and is rejected by the server.
    try:
        amount = float(raw)
    except ValueError:
        return raw
    return amount if math.isfinite(amount) else raw


class TransactionState:
    """
    Client-side view of the transaction list.

    ``balance`` and ``filtered_view`` are recomputed from ``transactions`` on
    every read. ``submit`` allows one create request at a time; calls made
    while one is pending return ``None`` without sending anything.
    """

    def __init__(self, api: ExpenseApiClient) -> None:
        self.api = api
        self.transactions: list[Transaction] = []
        self.draft = Draft()
        self.search_query = ""
        self.is_loading = False
        self.is_submitting = False
        self.error: str | None = None

    async def refresh(self) -> None:
        self.is_loading = True
        self.error = None
        try:
            self.transactions = await self.api.list_transactions()
        except TransportError as exc:
            logger.error("[CLIENT] Error fetching transactions: %s", exc)
            self.error = LOAD_ERROR_MESSAGE
        finally:
            self.is_loading = False

    def build_payload(self) -> dict[str, Any]:
        return {
            "title": self.draft.title,
            "amount": _coerce_amount(self.draft.amount),
            "type": (self.draft.type or TransactionType.EXPENSE).value,
            "category": self.draft.category or DEFAULT_CATEGORY,
        }

    async def submit(self) -> Transaction | None:
        if not self.draft.title or not self.draft.amount or self.is_submitting:
            return None

        # Set before the first await so overlapping calls see it.
        self.is_submitting = True
        self.error = None
        try:
            record = await self.api.create_transaction(self.build_payload())
        except TransportError as exc:
            logger.error("[CLIENT] Error adding transaction: %s", exc)
            self.error = SUBMIT_ERROR_MESSAGE
            return None
        finally:
            self.is_submitting = False

        self.transactions = [record, *self.transactions]
        self.draft.clear()
        return record

    def derived_balance(self) -> float:
        return compute_balance(self.transactions)

    @property
    def balance(self) -> float:
        return self.derived_balance()

    def totals(self) -> Totals:
        return compute_totals(self.transactions)

    def filtered_view(self, query: str | None = None) -> list[Transaction]:
        if query is None:
            query = self.search_query
        return filter_transactions(self.transactions, query)
