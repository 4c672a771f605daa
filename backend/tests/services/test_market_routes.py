"""Market HTTP surface: buy, report, user lookup, health.

Invariants:
    - Committed purchase → 201 with remaining balance
    - Failed purchase → MarketError envelope (404 / 409), state untouched
    - Malformed body → 400 VALIDATION_ERROR
    - Report timeout → 504 REPORT_TIMEOUT
"""

import asyncio
import logging
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from market.config import Settings, get_settings
from market.core.errors import DatabaseError
from market.main import app
from market.services.market_service import MarketService


async def test_buy_returns_201_with_balance(client, seed):
    user_id = await seed.user(balance="50")
    item_id = await seed.item("Rope", cost="20")

    res = await client.post(
        "/api/v1/market/buy",
        json={"user_id": str(user_id), "item_id": str(item_id)},
    )

    assert res.status_code == 201
    body = res.json()
    assert body["status"] == "succeeded"
    assert body["user_id"] == str(user_id)
    assert Decimal(body["balance"]) == Decimal("30")


async def test_buy_unknown_user_returns_404(client, seed):
    item_id = await seed.item("Rope")

    res = await client.post(
        "/api/v1/market/buy",
        json={"user_id": str(uuid4()), "item_id": str(item_id)},
    )

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "USER_NOT_FOUND"


async def test_buy_unknown_item_returns_404(client, seed):
    user_id = await seed.user()

    res = await client.post(
        "/api/v1/market/buy",
        json={"user_id": str(user_id), "item_id": str(uuid4())},
    )

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "ITEM_NOT_FOUND"


async def test_buy_insufficient_balance_returns_409(client, seed, read):
    user_id = await seed.user(balance="5")
    item_id = await seed.item("Tent", cost="80")

    res = await client.post(
        "/api/v1/market/buy",
        json={"user_id": str(user_id), "item_id": str(item_id)},
    )

    assert res.status_code == 409
    error = res.json()["error"]
    assert error["code"] == "INSUFFICIENT_BALANCE"
    assert error["category"] == "business_rule"
    assert await read.balance(user_id) == Decimal("5")


async def test_buy_rejects_malformed_ids(client):
    res = await client.post(
        "/api/v1/market/buy", json={"user_id": "abc", "item_id": 3},
    )

    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_buy_rejects_extra_fields(client, seed):
    user_id = await seed.user()
    item_id = await seed.item("Rope")

    res = await client.post(
        "/api/v1/market/buy",
        json={"user_id": str(user_id), "item_id": str(item_id), "quantity": 2},
    )

    assert res.status_code == 400


async def test_report_endpoint_returns_rows(client, seed):
    user_id = await seed.user()
    item_id = await seed.item("Anvil")
    await seed.purchase(
        user_id, item_id, datetime(2012, 8, 8, tzinfo=timezone.utc), times=2,
    )

    res = await client.get("/api/v1/market/reports/popular-items")

    assert res.status_code == 200
    assert res.json() == [
        {"year": 2012, "item_name": "Anvil", "purchase_count": 2},
    ]


async def test_report_endpoint_empty_ledger(client):
    res = await client.get("/api/v1/market/reports/popular-items")

    assert res.status_code == 200
    assert res.json() == []


async def test_report_endpoint_times_out(client, monkeypatch):
    async def slow_report(self):
        await asyncio.sleep(1)
        return []

    monkeypatch.setattr(MarketService, "get_popular_items_report", slow_report)
    app.dependency_overrides[get_settings] = (
        lambda: Settings(report_timeout_seconds=0.01)
    )

    res = await client.get("/api/v1/market/reports/popular-items")

    assert res.status_code == 504
    assert res.json()["error"]["code"] == "REPORT_TIMEOUT"


async def test_expected_rejection_logged_as_warning(client, seed, caplog):
    user_id = await seed.user(balance="99.99")
    item_id = await seed.item("Tent", cost="100")

    with caplog.at_level(logging.DEBUG, logger="market"):
        res = await client.post(
            "/api/v1/market/buy",
            json={"user_id": str(user_id), "item_id": str(item_id)},
        )

    assert res.status_code == 409
    handler_records = [
        r for r in caplog.records if r.name == "market.api.error_handlers"
    ]
    assert [r.levelno for r in handler_records] == [logging.WARNING]
    assert handler_records[0].error_code == "INSUFFICIENT_BALANCE"
    assert not [r for r in caplog.records if r.levelno >= logging.ERROR]


async def test_server_side_failure_logged_as_error(client, caplog, monkeypatch):
    async def failing_report(self):
        raise DatabaseError("connection reset", "execute")

    monkeypatch.setattr(MarketService, "get_popular_items_report", failing_report)

    with caplog.at_level(logging.INFO, logger="market"):
        res = await client.get("/api/v1/market/reports/popular-items")

    assert res.status_code == 503
    handler_records = [
        r for r in caplog.records if r.name == "market.api.error_handlers"
    ]
    assert [r.levelno for r in handler_records] == [logging.ERROR]


async def test_get_user_returns_balance(client, seed):
    user_id = await seed.user(balance="12.34", email="reader@example.com")

    res = await client.get(f"/api/v1/users/{user_id}")

    assert res.status_code == 200
    body = res.json()
    assert body["email"] == "reader@example.com"
    assert Decimal(body["balance"]) == Decimal("12.34")


async def test_get_unknown_user_returns_404(client):
    res = await client.get(f"/api/v1/users/{uuid4()}")

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_health_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json() == {"status": "healthy", "version": app.version}


async def test_health_readiness_checks_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"] == {"database": "healthy", "purchase_gate": "idle"}


async def test_health_readiness_503_when_database_down(
    client, db_manager, monkeypatch,
):
    async def unreachable():
        return False

    monkeypatch.setattr(db_manager, "health_check", unreachable)

    res = await client.get("/api/v1/health/ready")

    assert res.status_code == 503
    body = res.json()
    assert body["status"] == "not_ready"
    assert body["checks"]["database"] == "unavailable"
