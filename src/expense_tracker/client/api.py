import asyncio
from typing import Any

import httpx
from pydantic import ValidationError as ModelValidationError

from expense_tracker.core import settings
from expense_tracker.errors import TransportError
from expense_tracker.logger import get_logger
from expense_tracker.models import Transaction

logger = get_logger(__name__)

TRANSACTIONS_PATH = "/api/transactions"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("message") or body.get("error")
        if message:
            return str(message)
    return f"HTTP {response.status_code}"


class ExpenseApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.timeout = settings.API_TIMEOUT if timeout is None else timeout
        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        self._client = client
        self._client_lock = asyncio.Lock()

    async def aclose(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _get_client(self) -> httpx.AsyncClient:
        client = self._client
        if client is not None and not client.is_closed:
            return client

        async with self._client_lock:
            client = self._client
            if client is None or client.is_closed:
                client = httpx.AsyncClient(timeout=self.timeout)
                self._client = client
            return client

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        client = await self._get_client()
        url = f"{self.base_url}{path}"
        try:
            request = client.build_request(method, url, headers=self.headers, **kwargs)
        except (TypeError, ValueError) as exc:
            logger.error("[CLIENT] Could not encode %s %s: %s", method, url, exc)
            raise TransportError(f"Could not encode request to {url}: {exc}") from exc

        try:
            response = await client.send(request)
        except httpx.HTTPError as exc:
            logger.error("[CLIENT] %s %s failed: %s", method, url, exc)
            raise TransportError(f"Request to {url} failed: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            logger.error("[CLIENT] %s %s returned %s: %s", method, url, response.status_code, message)
            raise TransportError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(f"Invalid JSON from {url}", status_code=response.status_code) from exc

    async def list_transactions(self) -> list[Transaction]:
        data = await self._request("GET", TRANSACTIONS_PATH)
        try:
            return [Transaction.model_validate(item) for item in data]
        except (TypeError, ModelValidationError) as exc:
            raise TransportError(f"Unexpected transactions payload: {exc}") from exc

    async def create_transaction(self, payload: dict[str, Any]) -> Transaction:
        data = await self._request("POST", TRANSACTIONS_PATH, json=payload)
        try:
            return Transaction.model_validate(data)
        except ModelValidationError as exc:
            raise TransportError(f"Unexpected transaction payload: {exc}") from exc
