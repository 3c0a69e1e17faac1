"""Transaction Schemas: Pydantic models with field-level validation for API boundaries.

Invariants:
    - description: 1-255 chars, category: 1-100 chars, transactionReference: 1-50 chars,
      all stripped and never blank
    - amount > 0, at most 4 decimal places and 15 integer digits
    - type is exactly DEBIT or CREDIT
    - id and transactionDate in request bodies are ignored (extra fields dropped)
    - JSON field names are camelCase; Python attributes are snake_case
    - Response amounts are JSON strings with four decimal places

Design Decisions:
    - Separate from ORM models and core records: schemas are API contracts
    - field_validator for side-effect-free transforms (strip); keeps models pure
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import (
    BaseModel, ConfigDict, Field, PlainSerializer, field_validator,
)
from pydantic.alias_generators import to_camel

from txn_records.core.domain_types import TransactionReference, TransactionType
from txn_records.core.records import (
    NewTransaction, TransactionChanges, TransactionPage, TransactionRecord,
)

MAX_INTEGER_DIGITS = 15

# Exact decimal string on the wire (e.g. "100.5000"); a JSON number would pass
# through binary floating point in most clients
WireAmount = Annotated[
    Decimal,
    PlainSerializer(str, return_type=str, when_used="json"),
    Field(
        description="Decimal amount with scale 4, serialized as a string",
        examples=["100.5000"],
    ),
]


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore",
    )


class _TransactionFields(_CamelModel):
    """Fields shared by create and update bodies."""
    description: str = Field(min_length=1, max_length=255)
    amount: Decimal = Field(gt=0, decimal_places=4)
    type: TransactionType
    category: str = Field(min_length=1, max_length=100)

    @field_validator("description", "category")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("amount")
    @classmethod
    def check_integer_digits(cls, v: Decimal) -> Decimal:
        if v.adjusted() >= MAX_INTEGER_DIGITS:
            raise ValueError(
                f"amount must have at most {MAX_INTEGER_DIGITS} integer digits",
            )
        return v


class TransactionCreate(_TransactionFields):
    """Create body: reference required, server-assigned fields ignored."""
    transaction_reference: str = Field(min_length=1, max_length=50)

    @field_validator("transaction_reference")
    @classmethod
    def strip_reference(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    def to_domain(self) -> NewTransaction:
        return NewTransaction(
            description=self.description,
            amount=self.amount,
            type=self.type,
            category=self.category,
            transaction_reference=TransactionReference(self.transaction_reference),
        )


class TransactionUpdate(_TransactionFields):
    """Update body: only mutable fields; reference/id/date ignored if sent."""

    def to_domain(self) -> TransactionChanges:
        return TransactionChanges(
            description=self.description,
            amount=self.amount,
            type=self.type,
            category=self.category,
        )


class TransactionResponse(_CamelModel):
    """Public-facing transaction."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    amount: WireAmount
    type: TransactionType
    category: str
    transaction_reference: str
    transaction_date: datetime

    @classmethod
    def from_record(cls, record: TransactionRecord) -> "TransactionResponse":
        return cls.model_validate(record)


class PagedResponse(_CamelModel):
    """Pagination envelope: {content, currentPage, totalPages, totalItems, pageSize}."""
    content: list[TransactionResponse]
    current_page: int
    total_pages: int
    total_items: int
    page_size: int

    @classmethod
    def from_page(cls, page: TransactionPage) -> "PagedResponse":
        return cls(
            content=[TransactionResponse.from_record(r) for r in page.content],
            current_page=page.page,
            total_pages=page.total_pages,
            total_items=page.total_items,
            page_size=page.size,
        )
