"""Transaction ORM: persists one financial transaction record.

Invariants:
    - id is an autoincrement integer primary key assigned by the database
    - transaction_reference is unique (index idx_txn_ref)
    - amount is NUMERIC(19, 4): up to 15 integer digits, scale 4
    - transaction_date is written once at insert and never updated

Design Decisions:
    - BigInteger with an Integer variant on SQLite: SQLite only autoincrements
      INTEGER PRIMARY KEY columns
    - type stored as the enum value string (DEBIT/CREDIT), not a native DB enum
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, DateTime, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from txn_records.db.base import Base


class Transaction(Base):
    """Financial transaction record."""
    __tablename__ = "transactions"
    __table_args__ = (
        Index("idx_txn_ref", "transaction_reference", unique=True),
    )

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True, autoincrement=True,
    )
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(
        Numeric(19, 4), nullable=False,
    )
    type: Mapped[str] = mapped_column(String(6), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    transaction_reference: Mapped[str] = mapped_column(
        String(50), nullable=False,
    )
    transaction_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
