# texttide/services/clipboard_service.py
# Shared text store: CRUD, likes and top-liked over a whole-collection storage

from __future__ import annotations

import asyncio
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional

from texttide.constants import ID_ALPHABET, ID_LENGTH, LIKE_ACTION, RETENTION_WINDOW
from texttide.exceptions import ForbiddenError, NotFoundError, ValidationError
from texttide.observability.metrics import record_expired, record_operation
from texttide.observability.tracing import get_tracer
from texttide.repositories.clipboard_storage import ClipboardStorage
from texttide.schemas.clipboard import ClipboardItem, ClipboardItemView, LikeToggleResult
from texttide.services.retention import filter_expired

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)


def generate_short_id(length: int = ID_LENGTH) -> str:
    """Generate a URL-safe short ID."""
    return ''.join(secrets.choice(ID_ALPHABET) for _ in range(length))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean_text(text: Any) -> Optional[str]:
    if not isinstance(text, str) or not text.strip():
        return None
    return text.strip()


class ClipboardService:
    """State transitions over the clipboard collection.

    Every call loads the collection, drops expired items (persisting the
    pruned list if anything expired), then works on the live items. Calls are
    serialized on a lock so overlapping requests in one process cannot lose
    each other's writes.
    """

    def __init__(
        self,
        storage: ClipboardStorage,
        retention: timedelta = RETENTION_WINDOW,
        id_generator: Callable[[], str] = generate_short_id,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.storage = storage
        self.retention = retention
        self._id_generator = id_generator
        self._clock = clock
        self._lock = asyncio.Lock()

    async def _load_live(self) -> list[ClipboardItem]:
        records = await self.storage.load()
        live = filter_expired(records, self._clock(), self.retention)
        expired = len(records) - len(live)
        if expired:
            await self.storage.save(live)
            record_expired(expired)
            logger.info(f"Dropped {expired} expired clipboard item(s)")
        return live

    @staticmethod
    def _find(items: list[ClipboardItem], item_id: Optional[str]) -> ClipboardItem:
        for item in items:
            if item.id == item_id:
                return item
        raise NotFoundError("Item not found", details={"id": item_id})

    def _new_id(self, items: list[ClipboardItem]) -> str:
        taken = {item.id for item in items}
        while True:
            candidate = self._id_generator()
            if candidate not in taken:
                return candidate

    # --- Reads ---

    async def list_items(self, visitor_id: str) -> list[ClipboardItemView]:
        async with self._lock:
            items = await self._load_live()
        return [ClipboardItemView.for_visitor(item, visitor_id) for item in items]

    async def get_item(self, item_id: str, visitor_id: str) -> ClipboardItemView:
        async with self._lock:
            items = await self._load_live()
        return ClipboardItemView.for_visitor(self._find(items, item_id), visitor_id)

    async def top_liked(self, visitor_id: str, limit: int = 3) -> list[ClipboardItemView]:
        """Most liked first; ties keep the newest-first store order."""
        async with self._lock:
            items = await self._load_live()
        ranked = sorted(items, key=lambda item: item.likes_count, reverse=True)
        return [ClipboardItemView.for_visitor(item, visitor_id) for item in ranked[:limit]]

    # --- Writes ---

    async def create_item(self, text: Any, editable: Any, visitor_id: str) -> ClipboardItemView:
        cleaned = _clean_text(text)
        if cleaned is None:
            raise ValidationError("Valid text is required")

        with tracer.start_as_current_span("clipboard.create"):
            async with self._lock:
                items = await self._load_live()
                item = ClipboardItem(
                    id=self._new_id(items),
                    text=cleaned,
                    created_at=self._clock(),
                    creator_id=visitor_id,
                    editable=editable is True,
                )
                items.insert(0, item)
                await self.storage.save(items)

        record_operation("create")
        logger.info(f"Created clipboard item id={item.id} editable={item.editable}")
        return ClipboardItemView.for_visitor(item, visitor_id)

    async def update_item(self, item_id: Optional[str], text: Any, visitor_id: str) -> ClipboardItemView:
        cleaned = _clean_text(text)
        if not item_id or cleaned is None:
            raise ValidationError("Valid ID and text are required")

        with tracer.start_as_current_span("clipboard.update"):
            async with self._lock:
                items = await self._load_live()
                item = self._find(items, item_id)
                if not item.can_edit(visitor_id):
                    raise ForbiddenError("Not authorized to edit this item", details={"id": item_id})
                item.text = cleaned
                item.updated_at = self._clock()
                await self.storage.save(items)

        record_operation("update")
        logger.info(f"Updated clipboard item id={item_id}")
        return ClipboardItemView.for_visitor(item, visitor_id)

    async def toggle_like(
        self, item_id: Optional[str], visitor_id: str, action: Any = LIKE_ACTION
    ) -> LikeToggleResult:
        if not item_id or action != LIKE_ACTION:
            raise ValidationError("Invalid request")

        with tracer.start_as_current_span("clipboard.toggle_like"):
            async with self._lock:
                items = await self._load_live()
                item = self._find(items, item_id)
                liked = item.liked_by(visitor_id)
                if liked:
                    item.likes = [v for v in item.likes if v != visitor_id]
                else:
                    item.likes = [*item.likes, visitor_id]
                item.likes_count = len(item.likes)
                await self.storage.save(items)

        record_operation("unlike" if liked else "like")
        return LikeToggleResult(has_liked=not liked, likes_count=item.likes_count)

    async def delete_item(self, item_id: Optional[str]) -> None:
        """Remove an item if present; deleting an unknown id is not an error."""
        with tracer.start_as_current_span("clipboard.delete"):
            async with self._lock:
                items = await self._load_live()
                remaining = [item for item in items if item.id != item_id]
                await self.storage.save(remaining)

        record_operation("delete")
        if len(remaining) != len(items):
            logger.info(f"Deleted clipboard item id={item_id}")
