"""Health Routes: liveness and readiness of the market API.

Invariants:
    - GET /health/ answers from process state alone, never touches the database
    - GET /health/ready answers 503 while the database is unreachable
    - Readiness never waits on the purchase gate, it only reports whether a buy is in flight
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from market.infrastructure.database import DatabaseSessionManager, get_db_manager
from market.infrastructure.purchase_gate import PurchaseGate, get_purchase_gate

router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def liveness(request: Request):
    return {"status": "healthy", "version": request.app.version}


@router.get("/ready")
async def readiness(
    db: DatabaseSessionManager = Depends(get_db_manager),
    gate: PurchaseGate = Depends(get_purchase_gate),
):
    """Ready when the database answers; the gate state is informational."""
    checks = {
        "database": "healthy" if await db.health_check() else "unavailable",
        "purchase_gate": "busy" if gate.locked else "idle",
    }
    if checks["database"] != "healthy":
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not_ready", "checks": checks},
        )
    return {"status": "ready", "checks": checks}
