"""create clipboard_items table

Revision ID: 3f7c2a9d1b40
Revises: 
Create Date: 2026-10-18 09:12:41.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '3f7c2a9d1b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # One row per clipboard item; position keeps newest-first order
    op.create_table(
        'clipboard_items',
        sa.Column('id', sa.Text(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('payload', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        schema='public'
    )
    op.create_index(
        'ix_clipboard_items_position',
        'clipboard_items',
        ['position'],
        schema='public'
    )


def downgrade() -> None:
    op.drop_index('ix_clipboard_items_position', table_name='clipboard_items', schema='public')
    op.drop_table('clipboard_items', schema='public')
