"""Market Schemas: Pydantic models for the buy, report, and user endpoints.

Invariants:
    - BuyRequest accepts exactly user_id and item_id (extra fields rejected)
    - Money serialized as Decimal (string in JSON), never float
"""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from market.core.domain_types import PurchaseStatus


class BuyRequest(BaseModel):
    """Buy request: who buys what."""
    model_config = ConfigDict(extra="forbid")

    user_id: UUID
    item_id: UUID


class PurchaseResponse(BaseModel):
    """Committed purchase with the buyer's remaining balance."""
    status: PurchaseStatus
    purchase_id: UUID
    user_id: UUID
    item_id: UUID
    balance: Decimal


class PopularItemReportRow(BaseModel):
    year: int
    item_name: str
    purchase_count: int


class UserResponse(BaseModel):
    id: UUID
    email: str
    balance: Decimal
