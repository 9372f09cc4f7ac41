# texttide/repositories/sql_clipboard_storage.py
# PostgreSQL-backed storage for clipboard items

from __future__ import annotations

import logging
from typing import Optional, Sequence

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from texttide.exceptions import StorageError
from texttide.models.clipboard_table import clipboard_items
from texttide.repositories.clipboard_storage import ClipboardStorage
from texttide.schemas.clipboard import ClipboardItem

logger = logging.getLogger(__name__)


class SqlClipboardStorage(ClipboardStorage):
    """Replaces the whole table on save, inside a single transaction."""

    def __init__(self, session_factory: Optional[async_sessionmaker[AsyncSession]] = None):
        if session_factory is None:
            from texttide.db.base import AsyncSessionFactory
            session_factory = AsyncSessionFactory
        self._session_factory = session_factory

    def describe(self) -> str:
        return f"sql:{clipboard_items.fullname}"

    async def load(self) -> list[ClipboardItem]:
        stmt = select(clipboard_items.c.payload).order_by(clipboard_items.c.position.asc())
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                payloads = result.scalars().all()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error loading clipboard items: {e}")
            raise StorageError("Failed to read data") from e

        try:
            return [ClipboardItem.model_validate(p) for p in payloads]
        except PydanticValidationError as e:
            logger.error(f"Malformed clipboard row: {e}")
            raise StorageError("Stored data is malformed") from e

    async def save(self, records: Sequence[ClipboardItem]) -> None:
        rows = [
            {
                "id": r.id,
                "position": position,
                "payload": r.to_storage(),
                "created_at": r.created_at,
            }
            for position, r in enumerate(records)
        ]
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.execute(delete(clipboard_items))
                    if rows:
                        await session.execute(clipboard_items.insert(), rows)
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"Error saving clipboard items: {e}")
            raise StorageError("Failed to write data") from e
