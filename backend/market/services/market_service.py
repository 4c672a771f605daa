"""Market Service: atomic purchases and the per-year popularity report.

Invariants:
    - buy() holds the purchase gate for its whole read-validate-write sequence
    - buy() validates user, item, and balance INSIDE the transaction, in that order
    - buy() either debits exactly the item cost AND appends exactly one ledger row,
      or persists nothing
    - buy() never raises for user/item/balance/storage failures: the outcome says what happened
    - get_popular_items_report() takes no gate and reads one consistent snapshot
    - get_popular_items_report() propagates DatabaseError unchanged

Design Decisions:
    - Gate + REPEATABLE READ: the gate alone covers a single process, the isolation
      level covers other processes writing the same rows (ADR: correctness over throughput)
    - Clock injected: tests pin purchase timestamps without patching datetime
    - Stage 1 of the report in SQL, stage 2 and ranking in core/popularity.py
"""

import logging
from datetime import datetime, timezone
from typing import Callable

from market.core.domain_types import (
    BuyState, IsolationLevel, ItemId, UserId, DEFAULT_REPORT_TOP_N,
)
from market.core.errors import (
    DatabaseError, ErrorContext, InsufficientBalanceError, ItemNotFoundError,
    MarketError, UserNotFoundError,
)
from market.core.popularity import (
    PopularItemReport, build_report, compute_popularity, rank_top_items,
)
from market.core.purchase_outcome import PurchaseOutcome
from market.core.repository_protocols import ItemStore, PurchaseLedger, UserStore
from market.infrastructure.database import DatabaseSessionManager
from market.infrastructure.purchase_gate import PurchaseGate
from market.services.stores import SqlItemStore, SqlPurchaseLedger, SqlUserStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MarketService:
    """Purchase executor and popularity aggregator behind one boundary."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        gate: PurchaseGate,
        isolation_level: IsolationLevel = IsolationLevel.REPEATABLE_READ,
        top_n: int = DEFAULT_REPORT_TOP_N,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._db = db
        self._gate = gate
        self._isolation_level = isolation_level
        self._top_n = top_n
        self._clock = clock

    async def buy(self, user_id: UserId, item_id: ItemId) -> PurchaseOutcome:
        """Debit the item cost from the user and record the purchase, atomically."""
        log_extra = {"user_id": str(user_id), "item_id": str(item_id)}
        state = BuyState.START

        async with self._gate.hold():
            try:
                async with self._db.transaction(self._isolation_level) as session:
                    state = self._advance(state, BuyState.VALIDATING, log_extra)
                    users: UserStore = SqlUserStore(session)
                    items: ItemStore = SqlItemStore(session)
                    ledger: PurchaseLedger = SqlPurchaseLedger(session)

                    ctx = ErrorContext(user_id=str(user_id), item_id=str(item_id))
                    user = await users.get(user_id)
                    if user is None:
                        raise UserNotFoundError(str(user_id), ctx)
                    item = await items.get(item_id)
                    if item is None:
                        raise ItemNotFoundError(str(item_id), ctx)
                    if user.balance < item.cost:
                        raise InsufficientBalanceError(user.balance, item.cost, ctx)

                    state = self._advance(state, BuyState.COMMITTING, log_extra)
                    balance = await users.debit(user_id, item.cost)
                    purchase_id = await ledger.append(user_id, item_id, self._clock())
            except MarketError as e:
                return self._abort(state, user_id, item_id, e, log_extra)
            except OSError as e:
                # Driver-level connection failures that bypass SQLAlchemy's wrapping
                error = DatabaseError(str(e), "connect")
                return self._abort(state, user_id, item_id, error, log_extra)

        self._advance(state, BuyState.COMMITTED, log_extra)
        logger.info(
            "Purchase committed",
            extra={**log_extra, "purchase_id": str(purchase_id)},
        )
        return PurchaseOutcome.success(user_id, item_id, purchase_id, balance)

    async def get_popular_items_report(self) -> list[PopularItemReport]:
        """Top items per year, where popularity is the best single-user single-day count."""
        async with self._db.transaction(self._isolation_level) as session:
            daily = await SqlPurchaseLedger(session).daily_counts()
            ranked = rank_top_items(compute_popularity(daily), self._top_n)
            names = await SqlItemStore(session).names(
                {entry.item_id for entry in ranked},
            )

        report = build_report(ranked, names)
        logger.info(
            "Popular items report computed",
            extra={"report_rows": len(report)},
        )
        return report

    def _abort(
        self, state: BuyState, user_id: UserId, item_id: ItemId,
        error: MarketError, log_extra: dict,
    ) -> PurchaseOutcome:
        state = self._advance(state, BuyState.ABORTING, log_extra)
        outcome = PurchaseOutcome.failure(user_id, item_id, error)
        extra = {
            **log_extra,
            "error_code": error.code,
            "purchase_status": outcome.status.value,
        }
        if isinstance(error, DatabaseError):
            logger.error(f"Purchase aborted: {error.message}", extra=extra, exc_info=True)
        else:
            logger.warning(f"Purchase aborted: {error.message}", extra=extra)
        self._advance(state, BuyState.ABORTED, log_extra)
        return outcome

    @staticmethod
    def _advance(current: BuyState, target: BuyState, log_extra: dict) -> BuyState:
        logger.debug(
            f"Buy {current.value} -> {target.value}",
            extra={**log_extra, "buy_state": target.value},
        )
        return target
