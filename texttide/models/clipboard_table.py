# texttide/models/clipboard_table.py
# One row per clipboard item; position keeps most-recent-first order

from sqlalchemy import JSON, Column, Index, Integer, Table, Text, TIMESTAMP
from sqlalchemy.dialects.postgresql import JSONB

from texttide.db.base import metadata


clipboard_items = Table(
    'clipboard_items',
    metadata,
    Column('id', Text, primary_key=True),  # 6-char short id
    Column('position', Integer, nullable=False),
    Column('payload', JSON().with_variant(JSONB(), 'postgresql'), nullable=False),
    Column('created_at', TIMESTAMP(timezone=True), nullable=False),
    Index('ix_clipboard_items_position', 'position'),
    schema='public',
)
