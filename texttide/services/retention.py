from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

from texttide.constants import RETENTION_WINDOW
from texttide.schemas.clipboard import ClipboardItem


def filter_expired(
    records: Sequence[ClipboardItem],
    now: datetime,
    window: timedelta = RETENTION_WINDOW,
) -> list[ClipboardItem]:
    """Return the records younger than ``window``, order preserved.

    Pure: persisting the pruned list is up to the caller.
    """
    return [r for r in records if now - r.created_at < window]
