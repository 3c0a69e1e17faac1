"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - TransactionId wraps the store-assigned integer key; never a client value
    - TransactionType has exactly two members, serialized as their upper-case names
    - CacheNamespace names the two cache regions; they never share keys

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TransactionId = NewType("TransactionId", int)
TransactionReference = NewType("TransactionReference", str)


# ─── Enums ───────────────────────────────────────────────────────

class TransactionType(str, Enum):
    """Direction of a recorded transaction. Maps to DB `type` column."""
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"

    @classmethod
    def parse(cls, raw: str) -> "TransactionType":
        """Case-insensitive lookup used for query filters."""
        return cls(raw.strip().upper())


class SortDirection(str, Enum):
    """Listing sort order."""
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, raw: str | None) -> "SortDirection":
        """'asc' in any case is ascending; anything else is descending."""
        if raw is not None and raw.strip().lower() == cls.ASC.value:
            return cls.ASC
        return cls.DESC


class CacheNamespace(str, Enum):
    """The two independent cache regions."""
    POINT = "transaction"
    PAGE = "transactions"
