from pydantic import BaseModel

from expense_tracker.models import Transaction


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


class TransactionSummary(BaseModel):
    count: int
    transactions: list[Transaction]
