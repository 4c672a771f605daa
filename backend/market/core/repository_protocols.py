"""Boundary Protocols: contracts between core and shell.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - Stores never commit; the caller's transaction decides
    - Implementations provided by services/stores.py

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      while the ranking functions that consume their output stay sync and pure
    - Records are small frozen dataclasses, not ORM rows: core never sees a Session
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Protocol

from market.core.domain_types import UserId, ItemId, PurchaseId
from market.core.popularity import DailyPurchaseCount


@dataclass(frozen=True)
class UserRecord:
    id: UserId
    email: str
    balance: Decimal


@dataclass(frozen=True)
class ItemRecord:
    id: ItemId
    name: str
    cost: Decimal


class UserStore(Protocol):
    """Contract for user lookup and balance mutation."""
    async def get(self, user_id: UserId) -> UserRecord | None: ...
    async def debit(self, user_id: UserId, amount: Decimal) -> Decimal: ...


class ItemStore(Protocol):
    """Contract for read-only item lookup."""
    async def get(self, item_id: ItemId) -> ItemRecord | None: ...
    async def names(self, item_ids: Iterable[ItemId]) -> dict[ItemId, str]: ...


class PurchaseLedger(Protocol):
    """Contract for the append-only purchase ledger."""
    async def append(
        self, user_id: UserId, item_id: ItemId, purchased_at: datetime,
    ) -> PurchaseId: ...
    async def daily_counts(self) -> list[DailyPurchaseCount]: ...
