"""Portfolio catalog and analytics event baseline

Revision ID: 20260301_01
Revises:
Create Date: 2026-03-01
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "20260301_01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "category",
        sa.Column("category_id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("slug", name="uq_category_slug"),
    )

    op.create_table(
        "portfolio_item",
        sa.Column("portfolio_item_id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("category_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("slug", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'DRAFT'")),
        sa.Column("featured", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("image_path", sa.Text(), nullable=False),
        sa.Column("thumbnail_path", sa.Text(), nullable=True),
        sa.Column("created_at_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("published_at_utc", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["category_id"], ["category.category_id"], ondelete="SET NULL"),
        sa.UniqueConstraint("slug", name="uq_portfolio_item_slug"),
        sa.CheckConstraint(
            "status IN ('DRAFT', 'REVIEW', 'PUBLISHED', 'ARCHIVED')",
            name="ck_portfolio_item_status",
        ),
        sa.CheckConstraint("view_count >= 0", name="ck_portfolio_item_view_count_non_negative"),
    )
    op.create_index("ix_portfolio_item_status_view_count", "portfolio_item", ["status", "view_count"])
    op.create_index("ix_portfolio_item_status_created_at_utc", "portfolio_item", ["status", "created_at_utc"])
    op.create_index("ix_portfolio_item_category_id", "portfolio_item", ["category_id"])

    op.create_table(
        "analytics_event",
        sa.Column("analytics_event_id", postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("event_type", sa.Text(), nullable=False),
        sa.Column("event_data", postgresql.JSONB(), nullable=True),
        sa.Column("page_url", sa.Text(), nullable=True),
        sa.Column("referrer", sa.Text(), nullable=True),
        sa.Column("user_agent", sa.Text(), nullable=True),
        sa.Column("session_id", sa.Text(), nullable=True),
        sa.Column("ip_address", sa.Text(), nullable=True),
        sa.Column("user_id", sa.Text(), nullable=True),
        sa.Column("portfolio_item_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("timestamp_utc", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(["portfolio_item_id"], ["portfolio_item.portfolio_item_id"], ondelete="SET NULL"),
    )
    op.create_index("ix_analytics_event_timestamp_utc", "analytics_event", ["timestamp_utc"])
    op.create_index("ix_analytics_event_event_type_timestamp_utc", "analytics_event", ["event_type", "timestamp_utc"])
    op.create_index("ix_analytics_event_session_id", "analytics_event", ["session_id"])


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_index("ix_analytics_event_session_id", table_name="analytics_event")
    op.drop_index("ix_analytics_event_event_type_timestamp_utc", table_name="analytics_event")
    op.drop_index("ix_analytics_event_timestamp_utc", table_name="analytics_event")
    op.drop_table("analytics_event")

    op.drop_index("ix_portfolio_item_category_id", table_name="portfolio_item")
    op.drop_index("ix_portfolio_item_status_created_at_utc", table_name="portfolio_item")
    op.drop_index("ix_portfolio_item_status_view_count", table_name="portfolio_item")
    op.drop_table("portfolio_item")

    op.drop_table("category")
