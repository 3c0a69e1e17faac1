"""SQL Transaction Store: SQLAlchemy implementation of the TransactionStore protocol.

Invariants:
    - One AsyncSession per operation, opened from the shared DatabaseSessionManager
    - insert() assigns transaction_date (UTC) and receives id from the database
    - A unique-constraint violation on the reference surfaces as
      DuplicateTransactionError; any other integrity failure as DatabaseError
    - delete() returns None unless its own DELETE removed the row
    - Category and type filters are case-insensitive exact matches; None = no constraint
    - Listing order is deterministic: requested sort, then id ascending
    - Returned values are frozen TransactionRecord copies, never ORM rows

Design Decisions:
    - Session per call rather than per request: the service is process-wide and
      concurrent requests must never share a session
    - Amounts quantized to scale 4 on the way in, so insert() returns exactly
      what a later read returns
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import delete as sa_delete, func, select
from sqlalchemy.exc import IntegrityError

from txn_records.core.domain_types import (
    SortDirection, TransactionId, TransactionReference, TransactionType,
)
from txn_records.core.errors import (
    DuplicateTransactionError, TransactionNotFoundError,
)
from txn_records.core.records import (
    NewTransaction, PageRequest, TransactionPage, TransactionRecord,
)
from txn_records.infrastructure.database import DatabaseSessionManager
from txn_records.models.transaction import Transaction as TransactionModel

logger = logging.getLogger(__name__)

AMOUNT_SCALE = Decimal("0.0001")


def _to_record(row: TransactionModel) -> TransactionRecord:
    created = row.transaction_date
    if created.tzinfo is None:
        # SQLite drops the offset; values are always written in UTC
        created = created.replace(tzinfo=timezone.utc)
    return TransactionRecord(
        id=TransactionId(row.id),
        description=row.description,
        amount=Decimal(row.amount).quantize(AMOUNT_SCALE),
        type=TransactionType(row.type),
        category=row.category,
        transaction_reference=TransactionReference(row.transaction_reference),
        transaction_date=created,
    )


class SqlTransactionStore:
    """Relational store for transaction records."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    async def get_by_id(
        self, transaction_id: TransactionId,
    ) -> TransactionRecord | None:
        async with self._db.session() as db:
            row = await db.get(TransactionModel, transaction_id)
            return _to_record(row) if row else None

    async def get_by_reference(
        self, reference: TransactionReference,
    ) -> TransactionRecord | None:
        async with self._db.session() as db:
            result = await db.execute(
                select(TransactionModel).where(
                    TransactionModel.transaction_reference == reference,
                ),
            )
            row = result.scalar_one_or_none()
            return _to_record(row) if row else None

    async def exists_by_id(self, transaction_id: TransactionId) -> bool:
        async with self._db.session() as db:
            result = await db.execute(
                select(TransactionModel.id).where(
                    TransactionModel.id == transaction_id,
                ),
            )
            return result.first() is not None

    async def exists_by_reference(self, reference: TransactionReference) -> bool:
        async with self._db.session() as db:
            result = await db.execute(
                select(TransactionModel.id).where(
                    TransactionModel.transaction_reference == reference,
                ),
            )
            return result.first() is not None

    async def find_page(
        self,
        category: str | None,
        transaction_type: TransactionType | None,
        page_request: PageRequest,
    ) -> TransactionPage:
        filters = []
        if category is not None:
            filters.append(
                func.lower(TransactionModel.category) == category.lower(),
            )
        if transaction_type is not None:
            filters.append(
                func.lower(TransactionModel.type)
                == transaction_type.value.lower(),
            )

        sort_column = getattr(TransactionModel, page_request.sort_by)
        ordering = [
            sort_column.asc()
            if page_request.direction is SortDirection.ASC
            else sort_column.desc(),
        ]
        if page_request.sort_by != "id":
            ordering.append(TransactionModel.id.asc())

        async with self._db.session() as db:
            total = await db.scalar(
                select(func.count()).select_from(TransactionModel).where(*filters),
            )
            result = await db.execute(
                select(TransactionModel)
                .where(*filters)
                .order_by(*ordering)
                .offset(page_request.offset)
                .limit(page_request.size),
            )
            rows = result.scalars().all()

        return TransactionPage(
            content=tuple(_to_record(r) for r in rows),
            page=page_request.page,
            size=page_request.size,
            total_items=total or 0,
        )

    async def insert(self, draft: NewTransaction) -> TransactionRecord:
        row = TransactionModel(
            description=draft.description,
            amount=draft.amount.quantize(AMOUNT_SCALE),
            type=draft.type.value,
            category=draft.category,
            transaction_reference=draft.transaction_reference,
            transaction_date=datetime.now(timezone.utc),
        )
        async with self._db.session() as db:
            db.add(row)
            try:
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                # only the reference index makes this a duplicate; NOT NULL,
                # length and other violations surface as DatabaseError
                if not await self.exists_by_reference(draft.transaction_reference):
                    raise
                raise DuplicateTransactionError(draft.transaction_reference) from e
            return _to_record(row)

    async def update(self, record: TransactionRecord) -> TransactionRecord:
        async with self._db.session() as db:
            row = await db.get(TransactionModel, record.id)
            if row is None:
                raise TransactionNotFoundError(record.id)
            row.description = record.description
            row.amount = record.amount.quantize(AMOUNT_SCALE)
            row.type = record.type.value
            row.category = record.category
            await db.commit()
            return _to_record(row)

    async def delete(
        self, transaction_id: TransactionId,
    ) -> TransactionRecord | None:
        async with self._db.session() as db:
            row = await db.get(TransactionModel, transaction_id)
            if row is None:
                return None
            deleted = _to_record(row)
            result = await db.execute(
                sa_delete(TransactionModel).where(
                    TransactionModel.id == transaction_id,
                ),
            )
            await db.commit()
            # a concurrent delete may have removed the row after the load
            return deleted if result.rowcount else None
