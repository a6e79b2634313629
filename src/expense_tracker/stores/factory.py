import os

from expense_tracker.core import settings

from .base import EntryStore
from .json_file import JsonEntryStore
from .memory import MemoryEntryStore


def build_store(backend: str | None = None, data_dir: str | None = None) -> EntryStore:
    backend = (backend or settings.STORE_BACKEND).lower()
    if backend == "memory":
        return MemoryEntryStore()
    if backend == "json":
        directory = data_dir or settings.DATA_DIR
        return JsonEntryStore(data_path=os.path.join(directory, settings.TRANSACTIONS_FILENAME))
    raise ValueError(f"Unknown STORE_BACKEND '{backend}' (expected 'json' or 'memory')")
