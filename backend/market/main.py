"""Market API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map MarketError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and purchase gate initialized on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Purchase gate created inside the lifespan so it belongs to the serving event loop
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from market.api.error_handlers import register_error_handlers
from market.api.routes import health, market, users
from market.config import get_settings
from market.infrastructure.database import init_db
from market.infrastructure.observability import setup_logging
from market.infrastructure.purchase_gate import init_purchase_gate

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    init_purchase_gate()
    logger.info("Market API started")
    yield
    await manager.dispose()
    logger.info("Market API shutting down")


app = FastAPI(
    title="Market API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(market.router)
app.include_router(users.router)

register_error_handlers(app)
