"""Purchase Outcome: explicit result of a buy attempt.

Invariants:
    - succeeded outcomes carry purchase_id and the post-debit balance, never an error
    - failed outcomes carry the MarketError that aborted the attempt, never a purchase_id
    - status is derived from the error type (single mapping, no string matching)

Design Decisions:
    - Returned instead of raised: buy never signals failure by exception, yet callers
      still learn what happened without re-reading the balance
"""

from dataclasses import dataclass
from decimal import Decimal

from market.core.domain_types import PurchaseStatus, UserId, ItemId, PurchaseId
from market.core.errors import (
    MarketError, UserNotFoundError, ItemNotFoundError,
    InsufficientBalanceError, DatabaseError,
)

_STATUS_BY_ERROR: dict[type[MarketError], PurchaseStatus] = {
    UserNotFoundError: PurchaseStatus.USER_NOT_FOUND,
    ItemNotFoundError: PurchaseStatus.ITEM_NOT_FOUND,
    InsufficientBalanceError: PurchaseStatus.INSUFFICIENT_BALANCE,
    DatabaseError: PurchaseStatus.STORAGE_FAILURE,
}


@dataclass(frozen=True)
class PurchaseOutcome:
    """What a single buy call ended in."""
    status: PurchaseStatus
    user_id: UserId
    item_id: ItemId
    purchase_id: PurchaseId | None = None
    balance: Decimal | None = None
    error: MarketError | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is PurchaseStatus.SUCCEEDED

    @classmethod
    def success(
        cls, user_id: UserId, item_id: ItemId,
        purchase_id: PurchaseId, balance: Decimal,
    ) -> "PurchaseOutcome":
        return cls(
            PurchaseStatus.SUCCEEDED, user_id, item_id,
            purchase_id=purchase_id, balance=balance,
        )

    @classmethod
    def failure(
        cls, user_id: UserId, item_id: ItemId, error: MarketError,
    ) -> "PurchaseOutcome":
        status = _STATUS_BY_ERROR.get(type(error), PurchaseStatus.STORAGE_FAILURE)
        return cls(status, user_id, item_id, error=error)
