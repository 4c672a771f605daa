"""Initial schema: users, items, purchases.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("balance >= 0", name="ck_users_balance_non_negative"),
    )

    op.create_table(
        "items",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("cost", sa.Numeric(12, 2), nullable=False),
        sa.CheckConstraint("cost >= 0", name="ck_items_cost_non_negative"),
    )

    op.create_table(
        "purchases",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id", UUID(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("item_id", UUID(as_uuid=True), nullable=False),
        sa.Column("purchased_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_purchases_item_id", "purchases", ["item_id"])
    op.create_index(
        "ix_purchases_report", "purchases", ["purchased_at", "item_id", "user_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_purchases_report", table_name="purchases")
    op.drop_index("ix_purchases_item_id", table_name="purchases")
    op.drop_table("purchases")
    op.drop_table("items")
    op.drop_table("users")
