from collections.abc import Generator

import pytest
from fastapi.testclient import TestClient

from expense_tracker.app import create_app
from expense_tracker.stores.memory import MemoryEntryStore


@pytest.fixture
def store() -> MemoryEntryStore:
    return MemoryEntryStore()


@pytest.fixture
def client(store: MemoryEntryStore) -> Generator[TestClient, None, None]:
    with TestClient(create_app(store=store)) as test_client:
        yield test_client


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
