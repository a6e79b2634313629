from datetime import datetime
from enum import Enum

from pydantic import BaseModel


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionDraft(BaseModel):
    title: str
    amount: float
    type: TransactionType
    category: str


class Transaction(TransactionDraft):
    id: str
    date: datetime
