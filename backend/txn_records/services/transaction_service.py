"""Transaction Service: the single authority for consistency between store and cache.

Invariants:
    - Reads are cache-first; a store miss is cached as None (negative caching)
    - A read-through fill is dropped if any invalidation ran during its store
      read, so a value loaded before a mutation never outlives it
    - Uniqueness (create) and existence (delete) checks go to the store, never the cache
    - Every successful mutation clears the whole pages namespace
    - Exactly one of several concurrent deletes of a row succeeds; the rest
      raise TransactionNotFoundError
    - Mutations invalidate point entries (id: and ref:) rather than overwriting them
    - Store-write happens before cache invalidation; a failed store call leaves the
      cache untouched
    - Store read failures propagate; nothing is cached for a failed read

Design Decisions:
    - Explicit cache calls inside each method instead of decorators: the
      consistency contract is a readable code path
    - Cache and store injected by parameter; one process-wide instance is built
      on startup (init_transaction_service) and handed to routes via
      get_transaction_service
"""

import logging

from txn_records.core.cache_keys import id_key, page_key, reference_key
from txn_records.core.domain_types import (
    CacheNamespace, TransactionId, TransactionReference, TransactionType,
)
from txn_records.core.errors import (
    DuplicateTransactionError, ErrorContext, TransactionNotFoundError,
)
from txn_records.core.records import (
    NewTransaction, PageRequest, TransactionChanges, TransactionPage,
    TransactionRecord,
)
from txn_records.core.repository_protocols import TransactionStore
from txn_records.infrastructure.cache_region import MISSING, CacheStats
from txn_records.infrastructure.transaction_cache import TransactionCache

logger = logging.getLogger(__name__)


class TransactionService:
    """CRUD over transaction records with read-through / write-invalidate caching."""

    def __init__(self, store: TransactionStore, cache: TransactionCache):
        self._store = store
        self._cache = cache

    @property
    def cache(self) -> TransactionCache:
        return self._cache

    # ─── Reads ───────────────────────────────────────────────────

    async def get_by_id(
        self, transaction_id: TransactionId,
    ) -> TransactionRecord | None:
        """Return the record, or None when it does not exist."""
        key = id_key(transaction_id)
        cached = self._cache.points.get(key)
        if cached is not MISSING:
            logger.debug(
                f"Cache hit {key}",
                extra={"cache_region": CacheNamespace.POINT.value},
            )
            return cached
        generation = self._cache.points.generation
        record = await self._store.get_by_id(transaction_id)
        self._cache.points.put_if_current(key, record, generation)
        return record

    async def get_by_reference(
        self, reference: TransactionReference,
    ) -> TransactionRecord | None:
        """Return the record, or None when it does not exist."""
        key = reference_key(reference)
        cached = self._cache.points.get(key)
        if cached is not MISSING:
            logger.debug(
                f"Cache hit {key}",
                extra={"cache_region": CacheNamespace.POINT.value},
            )
            return cached
        generation = self._cache.points.generation
        record = await self._store.get_by_reference(reference)
        self._cache.points.put_if_current(key, record, generation)
        return record

    async def list_page(
        self,
        category: str | None,
        transaction_type: TransactionType | None,
        page_request: PageRequest,
    ) -> TransactionPage:
        key = page_key(category, transaction_type, page_request)
        cached = self._cache.pages.get(key)
        if cached is not MISSING:
            logger.debug(
                "Cache hit for listing page",
                extra={"cache_region": CacheNamespace.PAGE.value},
            )
            return cached
        generation = self._cache.pages.generation
        page = await self._store.find_page(category, transaction_type, page_request)
        self._cache.pages.put_if_current(key, page, generation)
        return page

    # ─── Mutations ───────────────────────────────────────────────

    async def create(self, draft: NewTransaction) -> TransactionRecord:
        reference = draft.transaction_reference
        if await self._store.exists_by_reference(reference):
            logger.warning(
                "Duplicate transaction attempt",
                extra={"reference": reference},
            )
            raise DuplicateTransactionError(reference)

        record = await self._store.insert(draft)

        self._cache.invalidate_all(CacheNamespace.PAGE)
        self._cache.points.invalidate(id_key(record.id))
        self._cache.points.invalidate(reference_key(reference))
        logger.info(
            "Transaction created",
            extra={"transaction_id": record.id, "reference": reference},
        )
        return record

    async def update(
        self, transaction_id: TransactionId, changes: TransactionChanges,
    ) -> TransactionRecord:
        current = await self.get_by_id(transaction_id)
        if current is None:
            raise TransactionNotFoundError(
                transaction_id, ErrorContext(transaction_id=transaction_id),
            )

        try:
            updated = await self._store.update(current.with_changes(changes))
        except TransactionNotFoundError:
            # cached copy outlived the row
            self._invalidate_record(transaction_id, current.transaction_reference)
            raise

        self._cache.invalidate_all(CacheNamespace.PAGE)
        self._invalidate_record(transaction_id, current.transaction_reference)
        logger.info(
            "Transaction updated", extra={"transaction_id": transaction_id},
        )
        return updated

    async def delete(self, transaction_id: TransactionId) -> None:
        if not await self._store.exists_by_id(transaction_id):
            raise TransactionNotFoundError(
                transaction_id, ErrorContext(transaction_id=transaction_id),
            )

        deleted = await self._store.delete(transaction_id)
        if deleted is None:
            # removed by a concurrent delete after the existence check
            self._cache.points.invalidate(id_key(transaction_id))
            raise TransactionNotFoundError(
                transaction_id, ErrorContext(transaction_id=transaction_id),
            )

        self._cache.invalidate_all(CacheNamespace.PAGE)
        self._invalidate_record(transaction_id, deleted.transaction_reference)
        logger.info(
            "Transaction deleted", extra={"transaction_id": transaction_id},
        )

    async def delete_by_reference(self, reference: TransactionReference) -> None:
        record = await self.get_by_reference(reference)
        if record is None:
            raise TransactionNotFoundError(
                reference, ErrorContext(reference=reference),
            )
        try:
            await self.delete(record.id)
        except TransactionNotFoundError:
            # cached ref: entry pointed at a row that is already gone
            self._cache.points.invalidate(reference_key(reference))
            raise TransactionNotFoundError(
                reference, ErrorContext(reference=reference),
            )
        self._cache.points.invalidate(reference_key(reference))

    # ─── Administration ──────────────────────────────────────────

    def clear_cache(self) -> None:
        """Drop every cached entry in both namespaces."""
        self._cache.clear()
        logger.info("Transaction cache cleared")

    def cache_stats(self) -> list[CacheStats]:
        return self._cache.stats()

    def _invalidate_record(
        self, transaction_id: TransactionId, reference: str | None,
    ) -> None:
        self._cache.points.invalidate(id_key(transaction_id))
        if reference is not None:
            self._cache.points.invalidate(reference_key(reference))


# Singleton (initialized on startup)
transaction_service: TransactionService | None = None


def init_transaction_service(
    store: TransactionStore, cache: TransactionCache,
) -> TransactionService:
    global transaction_service
    transaction_service = TransactionService(store, cache)
    return transaction_service


def get_transaction_service() -> TransactionService:
    """FastAPI dependency for the process-wide service."""
    if not transaction_service:
        raise RuntimeError("Transaction service not initialized")
    return transaction_service
