from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from expense_tracker.api.dependencies import get_transaction_service
from expense_tracker.api.schemas import MessageResponse
from expense_tracker.errors import ExpenseTrackerError, PersistenceError
from expense_tracker.logger import get_logger
from expense_tracker.models import Transaction
from expense_tracker.services.transactions import TransactionService

logger = get_logger(__name__)

router = APIRouter()


@router.get(
    "/api/transactions",
    response_model=list[Transaction],
    responses={500: {"model": MessageResponse}},
)
async def list_transactions(
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> Any:
    try:
        return await service.list()
    except PersistenceError as exc:
        logger.error("Error fetching transactions: %s", exc)
        return JSONResponse(status_code=500, content={"message": "Error fetching transactions"})


@router.post(
    "/api/transactions",
    status_code=201,
    response_model=Transaction,
    responses={400: {"model": MessageResponse}},
)
async def add_transaction(
    payload: Annotated[dict[str, Any], Body()],
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> Any:
    try:
        record = await service.create(payload)
    except ExpenseTrackerError as exc:
        logger.error("Error adding transaction: %s", exc)
        return JSONResponse(status_code=400, content={"message": str(exc)})
    return JSONResponse(status_code=201, content=jsonable_encoder(record))
