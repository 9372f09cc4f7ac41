# texttide/repositories/clipboard_storage.py
# Whole-collection persistence for clipboard items

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from typing import Sequence

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from texttide.exceptions import StorageError
from texttide.schemas.clipboard import ClipboardItem

logger = logging.getLogger(__name__)

_items_adapter = TypeAdapter(list[ClipboardItem])


class ClipboardStorage(ABC):
    """Load/save contract for the full, ordered collection of items.

    Implementations must return ``[]`` when nothing has been stored yet and
    raise ``StorageError`` for any other failure.
    """

    @abstractmethod
    async def load(self) -> list[ClipboardItem]:
        ...

    @abstractmethod
    async def save(self, records: Sequence[ClipboardItem]) -> None:
        ...

    def describe(self) -> str:
        return type(self).__name__


class InMemoryStorage(ClipboardStorage):
    """Keeps serialized copies so callers never share objects with the store."""

    def __init__(self, records: Sequence[ClipboardItem] = ()):
        self._data: list[dict] = [r.to_storage() for r in records]
        self.save_count = 0

    async def load(self) -> list[ClipboardItem]:
        return _items_adapter.validate_python(self._data)

    async def save(self, records: Sequence[ClipboardItem]) -> None:
        self._data = [r.to_storage() for r in records]
        self.save_count += 1

    def describe(self) -> str:
        return "memory"


class JsonFileStorage(ClipboardStorage):
    """Stores the collection as one pretty-printed JSON array."""

    def __init__(self, path: str):
        self.path = path

    def describe(self) -> str:
        return self.path

    async def load(self) -> list[ClipboardItem]:
        return await asyncio.to_thread(self._read)

    async def save(self, records: Sequence[ClipboardItem]) -> None:
        payload = [r.to_storage() for r in records]
        await asyncio.to_thread(self._write, payload)

    def _read(self) -> list[ClipboardItem]:
        try:
            with open(self.path, "rb") as f:
                raw = f.read()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error(f"Error reading {self.path}: {e}")
            raise StorageError("Failed to read data") from e

        try:
            return _items_adapter.validate_json(raw.decode("utf-8"))
        except (UnicodeDecodeError, PydanticValidationError) as e:
            logger.error(f"Malformed clipboard data in {self.path}: {e}")
            raise StorageError("Stored data is malformed") from e

    def _write(self, payload: list[dict]) -> None:
        data = json.dumps(payload, indent=2, ensure_ascii=False)
        directory = os.path.dirname(self.path) or "."
        tmp_path = None
        try:
            os.makedirs(directory, exist_ok=True)
            # same directory so os.replace stays on one filesystem
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".clipboard-", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
            tmp_path = None
        except OSError as e:
            logger.error(f"Error writing {self.path}: {e}")
            raise StorageError("Failed to write data") from e
        finally:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.remove(tmp_path)
