"""Market Routes: buy an item, read the popularity report.

Invariants:
    - POST /market/buy returns 201 only for a committed purchase
    - Failed purchases surface as the MarketError envelope (404 / 409 / 503)
    - GET /market/reports/popular-items is bounded by report_timeout_seconds (504 on expiry)

Design Decisions:
    - MarketService built per request from process-wide singletons (db_manager,
      purchase_gate): the gate must be shared, the service itself is stateless
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, status

from market.config import Settings, get_settings
from market.core.domain_types import ItemId, UserId
from market.core.errors import ReportTimeoutError
from market.infrastructure.database import DatabaseSessionManager, get_db_manager
from market.infrastructure.purchase_gate import PurchaseGate, get_purchase_gate
from market.schemas.market import BuyRequest, PopularItemReportRow, PurchaseResponse
from market.services.market_service import MarketService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/market", tags=["market"])


def get_market_service(
    db: DatabaseSessionManager = Depends(get_db_manager),
    gate: PurchaseGate = Depends(get_purchase_gate),
    settings: Settings = Depends(get_settings),
) -> MarketService:
    """FastAPI dependency: MarketService wired from settings."""
    return MarketService(
        db, gate,
        isolation_level=settings.purchase_isolation_level,
        top_n=settings.report_top_n,
    )


@router.post(
    "/buy", response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
)
async def buy(
    body: BuyRequest, service: MarketService = Depends(get_market_service),
):
    """Buy one item for one user."""
    outcome = await service.buy(UserId(body.user_id), ItemId(body.item_id))
    if not outcome.succeeded:
        raise outcome.error
    return PurchaseResponse(
        status=outcome.status,
        purchase_id=outcome.purchase_id,
        user_id=outcome.user_id,
        item_id=outcome.item_id,
        balance=outcome.balance,
    )


@router.get(
    "/reports/popular-items", response_model=list[PopularItemReportRow],
)
async def popular_items_report(
    service: MarketService = Depends(get_market_service),
    settings: Settings = Depends(get_settings),
):
    """Top items per year by best single-user single-day purchase count."""
    timeout = settings.report_timeout_seconds
    try:
        report = await asyncio.wait_for(
            service.get_popular_items_report(), timeout=timeout,
        )
    except asyncio.TimeoutError:
        raise ReportTimeoutError(timeout)
    return [
        PopularItemReportRow(
            year=row.year,
            item_name=row.item_name,
            purchase_count=row.purchase_count,
        )
        for row in report
    ]
