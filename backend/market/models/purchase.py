"""Purchase ORM: one row per purchase event in the append-only ledger.

Invariants:
    - Never updated or deleted by the application
    - purchased_at is UTC
    - Buying the same item twice on the same day yields two rows, not a counter

Design Decisions:
    - item_id is indexed but NOT a foreign key: ledger rows outlive catalog
      deletions, and the report falls back to "[Unknown Item]" for them
    - user_id cascades on user delete: referential cleanup is the database's job
    - Composite index on (purchased_at, item_id, user_id) serves the report's GROUP BY
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from market.db.base import Base


class Purchase(Base):
    """Ledger entry: user bought item at purchased_at."""
    __tablename__ = "purchases"
    __table_args__ = (
        Index("ix_purchases_report", "purchased_at", "item_id", "user_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    item_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), nullable=False, index=True,
    )
    purchased_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="purchases")
