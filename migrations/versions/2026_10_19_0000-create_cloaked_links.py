"""Create cloaked_links table

Revision ID: 001_cloaked_links
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect

# revision identifiers, used by Alembic.
revision: str = '001_cloaked_links'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Create the cloaked_links table:
    - slug: canonical /go/ slug, unique index (the redirect lookup key)
    - destination_urls: JSON array of {url, weight, label}
    - tracking_data: optional JSON passthrough
    """
    bind = op.get_bind()
    existing_tables = inspect(bind).get_table_names()

    # Tables created on startup by SQLModel are left alone
    if 'cloaked_links' in existing_tables:
        return

    op.create_table(
        'cloaked_links',
        sa.Column('id', sa.Integer(), nullable=False, autoincrement=True),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('destination_urls', sa.JSON(), nullable=False),
        sa.Column('tracking_data', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_index(
        'ix_cloaked_links_slug',
        'cloaked_links',
        ['slug'],
        unique=True
    )


def downgrade() -> None:
    """Drop the cloaked_links table and its index."""
    op.drop_index('ix_cloaked_links_slug', table_name='cloaked_links')
    op.drop_table('cloaked_links')
