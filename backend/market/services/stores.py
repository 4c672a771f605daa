"""SQLAlchemy Stores: session-bound implementations of the core boundary protocols.

Invariants:
    - Stores flush but never commit: MarketService owns the transaction
    - daily_counts() is the first aggregation pass only (count per year/item/day/user)
    - Rows leave this module as core records, never as ORM objects

Design Decisions:
    - Calendar day via date(purchased_at): portable across PostgreSQL and SQLite,
      and typed as Date so both drivers hand back datetime.date
    - Year via EXTRACT: SQLAlchemy compiles it to strftime on SQLite
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Iterable

from sqlalchemy import Date, extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from market.core.domain_types import UserId, ItemId, PurchaseId
from market.core.popularity import DailyPurchaseCount
from market.core.repository_protocols import UserRecord, ItemRecord
from market.models.item import Item
from market.models.purchase import Purchase
from market.models.user import User


class SqlUserStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, user_id: UserId) -> UserRecord | None:
        user = await self.db.get(User, user_id)
        if user is None:
            return None
        return UserRecord(id=user.id, email=user.email, balance=user.balance)

    async def debit(self, user_id: UserId, amount: Decimal) -> Decimal:
        """Subtract amount from the balance; returns the new balance."""
        user = await self.db.get(User, user_id)
        user.balance = user.balance - amount
        await self.db.flush()
        return user.balance


class SqlItemStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, item_id: ItemId) -> ItemRecord | None:
        item = await self.db.get(Item, item_id)
        if item is None:
            return None
        return ItemRecord(id=item.id, name=item.name, cost=item.cost)

    async def names(self, item_ids: Iterable[ItemId]) -> dict[ItemId, str]:
        """Names for the ids that still exist; missing ids are simply absent."""
        ids = list(item_ids)
        if not ids:
            return {}
        result = await self.db.execute(
            select(Item.id, Item.name).where(Item.id.in_(ids)),
        )
        return {ItemId(row.id): row.name for row in result}


class SqlPurchaseLedger:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def append(
        self, user_id: UserId, item_id: ItemId, purchased_at: datetime,
    ) -> PurchaseId:
        purchase = Purchase(
            id=uuid.uuid4(),
            user_id=user_id,
            item_id=item_id,
            purchased_at=purchased_at,
        )
        self.db.add(purchase)
        await self.db.flush()
        return PurchaseId(purchase.id)

    async def daily_counts(self) -> list[DailyPurchaseCount]:
        year = extract("year", Purchase.purchased_at).label("purchase_year")
        day = func.date(Purchase.purchased_at, type_=Date).label("purchase_day")
        query = (
            select(
                year, Purchase.item_id, day, Purchase.user_id,
                func.count().label("purchase_count"),
            )
            .group_by(year, Purchase.item_id, day, Purchase.user_id)
        )
        result = await self.db.execute(query)
        return [
            DailyPurchaseCount(
                year=int(row.purchase_year),
                item_id=ItemId(row.item_id),
                day=row.purchase_day,
                user_id=UserId(row.user_id),
                count=row.purchase_count,
            )
            for row in result
        ]
