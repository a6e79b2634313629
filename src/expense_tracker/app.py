from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from expense_tracker.api.routes import diagnostics, transactions
from expense_tracker.core import settings
from expense_tracker.logger import get_logger, setup_logging
from expense_tracker.services.transactions import TransactionService
from expense_tracker.stores.base import EntryStore
from expense_tracker.stores.factory import build_store

logger = get_logger(__name__)


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Malformed request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"message": "Request body must be a JSON object"})


def create_app(store: EntryStore | None = None) -> FastAPI:
    """
    Build the API application.

    ``store`` is opened when the app starts and closed when it stops. When
    omitted, one is built from ``STORE_BACKEND`` and ``DATA_DIR``.
    """
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Initializing services...")
        settings.log_environment()

        entry_store = store if store is not None else build_store()
        entry_store.open()

        app.state.store = entry_store
        app.state.transaction_service = TransactionService(store=entry_store)

        logger.info("Services initialized.")
        try:
            yield
        finally:
            logger.info("Service shutting down.")
            entry_store.close()

    app = FastAPI(title="Expense Tracker", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    app.include_router(diagnostics.router)
    app.include_router(transactions.router)

    return app
