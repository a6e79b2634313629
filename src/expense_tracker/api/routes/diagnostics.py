from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from expense_tracker.api.dependencies import get_transaction_service
from expense_tracker.api.schemas import ErrorResponse, MessageResponse, TransactionSummary
from expense_tracker.errors import PersistenceError
from expense_tracker.logger import get_logger
from expense_tracker.models import Transaction
from expense_tracker.services.transactions import TransactionService

logger = get_logger(__name__)

router = APIRouter()


@router.get("/test", response_model=MessageResponse)
async def server_check() -> MessageResponse:
    return MessageResponse(message="Server is working")


@router.post(
    "/api/transactions/test/transaction",
    response_model=Transaction,
    responses={500: {"model": ErrorResponse}},
)
async def add_sample_transaction(
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> Any:
    try:
        return await service.create_sample()
    except PersistenceError as exc:
        logger.error("Test transaction error: %s", exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})


@router.get(
    "/api/transactions/test/transactions",
    response_model=TransactionSummary,
    responses={500: {"model": ErrorResponse}},
)
async def get_transaction_summary(
    service: Annotated[TransactionService, Depends(get_transaction_service)],
) -> Any:
    try:
        return await service.summary()
    except PersistenceError as exc:
        logger.error("Test fetch error: %s", exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})
