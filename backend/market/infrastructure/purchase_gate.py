"""Purchase Gate: process-wide mutual exclusion around the buy critical section.

Invariants:
    - At most one buy runs its read-validate-write sequence at a time per process
    - The gate is released on every exit path (success, domain failure, storage
      failure, cancellation)

Design Decisions:
    - Global rather than per-user: simpler to reason about, and buy's critical
      section is a handful of short queries
    - Instance created in the FastAPI lifespan (not at import): asyncio.Lock binds
      to the running event loop on first contention
"""

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator

logger = logging.getLogger(__name__)

SLOW_WAIT_MS = 500


class PurchaseGate:
    """Exclusive gate serializing purchase attempts."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def hold(self) -> AsyncGenerator[None, None]:
        started = time.monotonic()
        async with self._lock:
            waited_ms = int((time.monotonic() - started) * 1000)
            if waited_ms >= SLOW_WAIT_MS:
                logger.warning(f"Purchase gate wait was {waited_ms}ms")
            yield


# Singleton (initialized on startup)
purchase_gate: PurchaseGate | None = None


def init_purchase_gate() -> PurchaseGate:
    global purchase_gate
    purchase_gate = PurchaseGate()
    return purchase_gate


def get_purchase_gate() -> PurchaseGate:
    """FastAPI dependency for the process-wide purchase gate."""
    if not purchase_gate:
        raise RuntimeError("Purchase gate not initialized")
    return purchase_gate
