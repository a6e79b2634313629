import asyncio
import math
from typing import Any

from expense_tracker.errors import ValidationError
from expense_tracker.logger import get_logger
from expense_tracker.models import Transaction, TransactionDraft, TransactionType
from expense_tracker.stores.base import EntryStore, utc_now

logger = get_logger(__name__)

REQUIRED_FIELDS = ("title", "amount", "type", "category")
MISSING_FIELDS_MESSAGE = "Please provide all required fields: title, amount, type, and category"

SAMPLE_TRANSACTION = TransactionDraft(
    title="Test Transaction",
    amount=100,
    type=TransactionType.INCOME,
    category="test",
)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def parse_amount(value: Any) -> float:
    if isinstance(value, bool):
        raise ValidationError("amount must be a number")
    if isinstance(value, (int, float)):
        try:
            amount = float(value)
        except OverflowError:
            raise ValidationError("amount must be a finite number") from None
    elif isinstance(value, str):
        # float() accepts digit separators such as "1_000"
        if "_" in value:
            raise ValidationError(f"amount must be a number, got '{value}'")
        try:
            amount = float(value.strip())
        except ValueError:
            raise ValidationError(f"amount must be a number, got '{value}'") from None
    else:
        raise ValidationError("amount must be a number")

    if not math.isfinite(amount):
        raise ValidationError("amount must be a finite number")
    if amount < 0:
        raise ValidationError("amount must not be negative; use type to record an expense")
    return amount


def parse_type(value: Any) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in TransactionType)
        raise ValidationError(f"type must be one of: {allowed}") from None


def _parse_text(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be text")
    return value


def parse_payload(payload: dict[str, Any]) -> TransactionDraft:
    """
    Turn a raw create payload into a typed draft.

    All four fields must be present and non-empty. Numeric strings are
    accepted for ``amount``. Any other field in the payload, ``date``
    included, is ignored.
    """
    if any(_is_missing(payload.get(field)) for field in REQUIRED_FIELDS):
        raise ValidationError(MISSING_FIELDS_MESSAGE)

    return TransactionDraft(
        title=_parse_text("title", payload["title"]),
        amount=parse_amount(payload["amount"]),
        type=parse_type(payload["type"]),
        category=_parse_text("category", payload["category"]),
    )


class TransactionService:
    def __init__(self, store: EntryStore) -> None:
        self.store = store

    async def create(self, payload: dict[str, Any]) -> Transaction:
        logger.info("[TX] Received transaction data: %s", payload)
        try:
            draft = parse_payload(payload)
        except ValidationError as exc:
            logger.info("[TX] Rejected transaction: %s", exc)
            raise

        logger.debug("[TX] Parsed transaction draft: %s", draft)
        record = await asyncio.to_thread(self.store.insert, draft, utc_now())
        logger.info("[TX] Saved transaction %s", record.id)
        logger.debug("[TX] Saved transaction: %s", record)
        return record

    async def list(self) -> list[Transaction]:
        records = await asyncio.to_thread(self.store.list_all)
        logger.debug("[TX] Retrieved %d transactions", len(records))
        return records

    async def create_sample(self) -> Transaction:
        record = await asyncio.to_thread(self.store.insert, SAMPLE_TRANSACTION, utc_now())
        logger.info("[TX] Saved sample transaction %s", record.id)
        return record

    async def summary(self) -> dict[str, Any]:
        records = await asyncio.to_thread(self.store.list_all)
        return {"count": len(records), "transactions": records}
