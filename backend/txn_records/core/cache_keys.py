"""Cache Keys: pure derivation of point and page cache keys.

Invariants:
    - Point keys: "id:<id>" and "ref:<reference>"; the prefixes keep both in one region
    - Page keys are tuples, so no delimiter inside a category can collide two filters
    - Category is lower-cased in the key: the store filter is case-insensitive,
      so "Food" and "food" name the same page
"""

from txn_records.core.domain_types import TransactionReference, TransactionType
from txn_records.core.records import PageRequest

PageKey = tuple[str, str | None, str | None, int, int, str, str]


def id_key(transaction_id: int) -> str:
    return f"id:{transaction_id}"


def reference_key(reference: TransactionReference) -> str:
    return f"ref:{reference}"


def page_key(
    category: str | None,
    transaction_type: TransactionType | None,
    page_request: PageRequest,
) -> PageKey:
    """Composite key over filters, page window and sort."""
    return (
        "page",
        category.lower() if category is not None else None,
        transaction_type.value if transaction_type is not None else None,
        page_request.page,
        page_request.size,
        page_request.sort_by,
        page_request.direction.value,
    )
