"""Transaction Records: immutable domain values passed between store, cache and service.

Invariants:
    - All values are frozen: a cached record can never be mutated in place
    - TransactionRecord.id and transaction_date come from the store, never from callers
    - PageRequest only holds a sort field from SORTABLE_FIELDS (validated on construction)
    - TransactionPage.total_pages == ceil(total_items / size)

Design Decisions:
    - Dataclasses over ORM rows: the cache holds copies detached from any DB session
    - Sort-field whitelist lives here (pure) so it is checked before any cache lookup
"""

import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from txn_records.core.domain_types import (
    SortDirection, TransactionId, TransactionReference, TransactionType,
)
from txn_records.core.errors import InvalidRequestError

# wire name (and snake_case alias) -> record attribute
SORTABLE_FIELDS: dict[str, str] = {
    "id": "id",
    "description": "description",
    "amount": "amount",
    "type": "type",
    "category": "category",
    "transactionReference": "transaction_reference",
    "transaction_reference": "transaction_reference",
    "transactionDate": "transaction_date",
    "transaction_date": "transaction_date",
}

DEFAULT_SORT_FIELD = "transactionDate"


@dataclass(frozen=True)
class NewTransaction:
    """Caller-supplied fields of a transaction about to be created."""
    description: str
    amount: Decimal
    type: TransactionType
    category: str
    transaction_reference: TransactionReference


@dataclass(frozen=True)
class TransactionChanges:
    """The only fields an update may touch."""
    description: str
    amount: Decimal
    type: TransactionType
    category: str


@dataclass(frozen=True)
class TransactionRecord:
    """A persisted transaction as seen by callers."""
    id: TransactionId
    description: str
    amount: Decimal
    type: TransactionType
    category: str
    transaction_reference: TransactionReference
    transaction_date: datetime

    def with_changes(self, changes: TransactionChanges) -> "TransactionRecord":
        """Copy with mutable fields replaced; id, reference and date kept."""
        return TransactionRecord(
            id=self.id,
            description=changes.description,
            amount=changes.amount,
            type=changes.type,
            category=changes.category,
            transaction_reference=self.transaction_reference,
            transaction_date=self.transaction_date,
        )


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page window plus a validated sort."""
    page: int = 0
    size: int = 10
    sort_by: str = SORTABLE_FIELDS[DEFAULT_SORT_FIELD]
    direction: SortDirection = SortDirection.DESC

    def __post_init__(self):
        if self.page < 0:
            raise InvalidRequestError("Page index must not be negative", "page")
        if self.size < 1:
            raise InvalidRequestError("Page size must be at least 1", "size")
        if self.sort_by not in SORTABLE_FIELDS.values():
            raise InvalidRequestError(
                f"Invalid sort field: {self.sort_by}", "sortBy",
            )

    @classmethod
    def of(
        cls,
        page: int = 0,
        size: int = 10,
        sort_by: str = DEFAULT_SORT_FIELD,
        direction: str | SortDirection | None = None,
    ) -> "PageRequest":
        """Build from wire values; unknown sort fields raise InvalidRequestError."""
        attribute = SORTABLE_FIELDS.get(sort_by)
        if attribute is None:
            raise InvalidRequestError(f"Invalid sort field: {sort_by}", "sortBy")
        if not isinstance(direction, SortDirection):
            direction = SortDirection.parse(direction)
        return cls(page=page, size=size, sort_by=attribute, direction=direction)

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass(frozen=True)
class TransactionPage:
    """One slice of a filtered, sorted listing."""
    content: tuple[TransactionRecord, ...]
    page: int
    size: int
    total_items: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_items / self.size) if self.size else 0
