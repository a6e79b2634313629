from collections.abc import Iterable
from dataclasses import dataclass

from expense_tracker.models import Transaction, TransactionType


@dataclass(frozen=True)
class Totals:
    income: float
    expense: float

    @property
    def balance(self) -> float:
        return self.income - self.expense


def compute_totals(transactions: Iterable[Transaction]) -> Totals:
    income = 0.0
    expense = 0.0
    for tx in transactions:
        if tx.type == TransactionType.INCOME:
            income += tx.amount
        else:
            expense += tx.amount
    return Totals(income=income, expense=expense)


def compute_balance(transactions: Iterable[Transaction]) -> float:
    """Income minus expenses over ``transactions``."""
    return compute_totals(transactions).balance


def filter_transactions(transactions: list[Transaction], query: str | None) -> list[Transaction]:
    if not query:
        return list(transactions)
    needle = query.lower()
    return [
        tx for tx in transactions
        if needle in tx.title.lower() or needle in tx.category.lower()
    ]
