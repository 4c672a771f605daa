"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ItemId, PurchaseId wrap UUIDs: never use bare UUID in domain logic
    - All valid states encoded as Enums: no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and log records without custom encoders
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ItemId = NewType("ItemId", UUID)
PurchaseId = NewType("PurchaseId", UUID)


# ─── Constants ───────────────────────────────────────────────────

UNKNOWN_ITEM_NAME = "[Unknown Item]"
DEFAULT_REPORT_TOP_N = 3


# ─── Enums ───────────────────────────────────────────────────────

class PurchaseStatus(str, Enum):
    """Terminal result of one buy attempt."""
    SUCCEEDED = "succeeded"
    USER_NOT_FOUND = "user_not_found"
    ITEM_NOT_FOUND = "item_not_found"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    STORAGE_FAILURE = "storage_failure"


class BuyState(str, Enum):
    """States of a single buy call. COMMITTED and ABORTED are terminal."""
    START = "start"
    VALIDATING = "validating"
    COMMITTING = "committing"
    COMMITTED = "committed"
    ABORTING = "aborting"
    ABORTED = "aborted"


class IsolationLevel(str, Enum):
    """Isolation levels accepted for purchase and report transactions."""
    SERIALIZABLE = "SERIALIZABLE"
    REPEATABLE_READ = "REPEATABLE READ"
