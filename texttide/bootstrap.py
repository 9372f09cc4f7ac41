# texttide/bootstrap.py
# Wiring shared by the Tornado and FastAPI entry points

from __future__ import annotations

from datetime import timedelta

from texttide.repositories.clipboard_storage import ClipboardStorage, JsonFileStorage
from texttide.services.clipboard_service import ClipboardService
from texttide.utils.logger import log_info


def build_storage(config_module) -> ClipboardStorage:
    """Pick the storage backend named by STORAGE_BACKEND."""
    if config_module.STORAGE_BACKEND == "sql":
        # imported lazily so the file backend never needs a database driver
        from texttide.repositories.sql_clipboard_storage import SqlClipboardStorage
        storage: ClipboardStorage = SqlClipboardStorage()
    else:
        storage = JsonFileStorage(config_module.DATA_PATH)
    log_info(f"Clipboard storage: {storage.describe()}")
    return storage


def build_service(config_module, storage: ClipboardStorage | None = None) -> ClipboardService:
    return ClipboardService(
        storage or build_storage(config_module),
        retention=timedelta(days=config_module.RETENTION_DAYS),
    )
