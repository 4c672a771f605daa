"""Service test fixtures: a fresh SQLite database per test plus seed helpers.

Invariants:
    - Every test gets its own database file under tmp_path (no shared state)
    - The service runs SERIALIZABLE: the only stricter-than-default level SQLite accepts
    - Each test gets its own PurchaseGate, bound to that test's event loop
    - client overrides every singleton-backed dependency; no lifespan runs

Design Decisions:
    - File database over :memory: so concurrent sessions really use separate
      connections, as they would against PostgreSQL
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select

from market.core.domain_types import IsolationLevel, ItemId, UserId
from market.db.base import Base
from market.api.routes.market import get_market_service
from market.infrastructure.database import (
    DatabaseSessionManager, get_db, get_db_manager,
)
from market.infrastructure.purchase_gate import PurchaseGate, get_purchase_gate
from market.main import app
from market.models.item import Item
from market.models.purchase import Purchase
from market.models.user import User
from market.services.market_service import MarketService

FIXED_NOW = datetime(2024, 5, 17, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
async def db_manager(tmp_path):
    manager = DatabaseSessionManager(
        f"sqlite+aiosqlite:///{tmp_path / 'market.db'}",
    )
    async with manager.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield manager
    await manager.dispose()


@pytest.fixture
def gate():
    return PurchaseGate()


@pytest.fixture
def service(db_manager, gate):
    return MarketService(
        db_manager, gate,
        isolation_level=IsolationLevel.SERIALIZABLE,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def seed(db_manager):
    """Insert rows directly, bypassing MarketService.

    Returns helpers: user(balance), item(name, cost), purchase(user_id, item_id, at).
    """
    class _Seed:
        async def user(
            self, balance: str = "1000", email: str | None = None,
        ) -> UserId:
            async with db_manager.session() as db:
                user = User(
                    email=email or f"{uuid.uuid4().hex}@example.com",
                    balance=Decimal(balance),
                )
                db.add(user)
                await db.commit()
                return UserId(user.id)

        async def item(self, name: str, cost: str = "100") -> ItemId:
            async with db_manager.session() as db:
                item = Item(name=name, cost=Decimal(cost))
                db.add(item)
                await db.commit()
                return ItemId(item.id)

        async def purchase(
            self, user_id: UserId, item_id: ItemId, at: datetime, times: int = 1,
        ) -> None:
            async with db_manager.session() as db:
                for _ in range(times):
                    db.add(Purchase(
                        user_id=user_id, item_id=item_id, purchased_at=at,
                    ))
                await db.commit()

    return _Seed()


@pytest.fixture
def read(db_manager):
    """Fresh-session readers for asserting committed state."""
    class _Read:
        async def balance(self, user_id: UserId) -> Decimal:
            async with db_manager.session() as db:
                user = await db.get(User, user_id)
                return user.balance

        async def purchase_count(self, user_id: UserId | None = None) -> int:
            query = select(func.count()).select_from(Purchase)
            if user_id is not None:
                query = query.where(Purchase.user_id == user_id)
            async with db_manager.session() as db:
                return (await db.execute(query)).scalar_one()

        async def purchases(self, user_id: UserId) -> list[Purchase]:
            async with db_manager.session() as db:
                result = await db.execute(
                    select(Purchase).where(Purchase.user_id == user_id),
                )
                return list(result.scalars().all())

    return _Read()


@pytest.fixture
async def client(db_manager, gate, service):
    """FastAPI test client with the DB, gate, and service dependencies overridden."""
    async def override_get_db():
        async with db_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_db_manager] = lambda: db_manager
    app.dependency_overrides[get_purchase_gate] = lambda: gate
    app.dependency_overrides[get_market_service] = lambda: service

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
