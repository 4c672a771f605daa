"""User ORM: a buyer with a money balance.

Invariants:
    - balance is non-negative (CHECK constraint backs the service-level check)
    - balance is mutated only by MarketService.buy

Design Decisions:
    - Numeric(12, 2) mapped to Decimal: no float rounding on money
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import String, Numeric, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from market.db.base import Base


class User(Base):
    """User entity: identity, email, balance."""
    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_users_balance_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0"),
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    purchases: Mapped[list["Purchase"]] = relationship(
        "Purchase", back_populates="user",
        cascade="all, delete-orphan", passive_deletes=True,
    )
