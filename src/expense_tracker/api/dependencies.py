from fastapi import HTTPException, Request

from expense_tracker.services.transactions import TransactionService


def get_transaction_service(request: Request) -> TransactionService:
    service = getattr(request.app.state, "transaction_service", None)
    if not service:
        raise HTTPException(status_code=500, detail="Service not initialized")
    return service
