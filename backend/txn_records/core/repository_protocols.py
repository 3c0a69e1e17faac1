"""Boundary Protocols: the store contract the service depends on.

Invariants:
    - Core NEVER imports from infrastructure; dependency arrows point inward only
    - insert() is the only place ids and creation timestamps are assigned
    - insert() raises DuplicateTransactionError on a reference collision
    - update() raises TransactionNotFoundError when the row no longer exists
    - Read failures raise (DatabaseError); absence is None, never an exception

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no inheritance
    - Async in Protocol: implementations do IO
"""

from typing import Protocol

from txn_records.core.domain_types import (
    TransactionId, TransactionReference, TransactionType,
)
from txn_records.core.records import (
    NewTransaction, PageRequest, TransactionPage, TransactionRecord,
)


class TransactionStore(Protocol):
    """Contract for transaction persistence: implemented by the shell."""
    async def get_by_id(
        self, transaction_id: TransactionId,
    ) -> TransactionRecord | None: ...
    async def get_by_reference(
        self, reference: TransactionReference,
    ) -> TransactionRecord | None: ...
    async def exists_by_id(self, transaction_id: TransactionId) -> bool: ...
    async def exists_by_reference(self, reference: TransactionReference) -> bool: ...
    async def find_page(
        self,
        category: str | None,
        transaction_type: TransactionType | None,
        page_request: PageRequest,
    ) -> TransactionPage: ...
    async def insert(self, draft: NewTransaction) -> TransactionRecord: ...
    async def update(self, record: TransactionRecord) -> TransactionRecord: ...
    async def delete(
        self, transaction_id: TransactionId,
    ) -> TransactionRecord | None: ...
