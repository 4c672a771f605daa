"""Item ORM: a purchasable catalog entry. Read-only from the market core."""

import uuid
from decimal import Decimal

from sqlalchemy import String, Numeric, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from market.db.base import Base


class Item(Base):
    """Item entity: name is the human-readable report key."""
    __tablename__ = "items"
    __table_args__ = (
        CheckConstraint("cost >= 0", name="ck_items_cost_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
