"""Transaction Schemas: request validation and camelCase wire names.

Tests:
    - camelCase aliases accepted and emitted; snake_case accepted too
    - text fields stripped and never blank
    - amount positive, at most 4 decimal places and 15 integer digits
    - server-assigned fields in a request body are ignored
    - response amounts serialize as exact decimal strings, documented in the schema
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from txn_records.core.domain_types import TransactionType
from txn_records.core.records import TransactionPage, TransactionRecord
from txn_records.schemas.envelope import CommonResponse
from txn_records.schemas.transaction import (
    PagedResponse, TransactionCreate, TransactionResponse, TransactionUpdate,
)


def _body(**overrides) -> dict:
    body = {
        "description": "Grocery shopping",
        "amount": "100.50",
        "type": "DEBIT",
        "category": "Food",
        "transactionReference": "REF-A",
    }
    body.update(overrides)
    return body


def test_create_accepts_camel_case():
    draft = TransactionCreate.model_validate(_body()).to_domain()
    assert draft.transaction_reference == "REF-A"
    assert draft.amount == Decimal("100.50")
    assert draft.type is TransactionType.DEBIT


def test_create_accepts_snake_case():
    body = _body()
    body["transaction_reference"] = body.pop("transactionReference")
    assert TransactionCreate.model_validate(body).transaction_reference == "REF-A"


def test_text_fields_are_stripped():
    model = TransactionCreate.model_validate(
        _body(description="  Rent  ", category=" Housing", transactionReference=" R1 "),
    )
    assert model.description == "Rent"
    assert model.category == "Housing"
    assert model.transaction_reference == "R1"


def test_server_assigned_fields_are_ignored():
    model = TransactionCreate.model_validate(
        _body(id=999, transactionDate="2000-01-01T00:00:00"),
    )
    assert not hasattr(model, "id")
    assert "transaction_date" not in model.model_dump()


@pytest.mark.parametrize(
    "overrides",
    [
        {"description": "   "},
        {"description": "x" * 256},
        {"category": ""},
        {"category": "c" * 101},
        {"transactionReference": "  "},
        {"transactionReference": "r" * 51},
        {"amount": "0"},
        {"amount": "-1.00"},
        {"amount": "1.23456"},
        {"amount": "1000000000000000"},
        {"type": "REFUND"},
        {"type": None},
    ],
)
def test_create_rejects(overrides):
    with pytest.raises(ValidationError):
        TransactionCreate.model_validate(_body(**overrides))


def test_amount_limits_inclusive():
    model = TransactionCreate.model_validate(_body(amount="999999999999999.9999"))
    assert model.amount == Decimal("999999999999999.9999")


def test_update_ignores_reference():
    changes = TransactionUpdate.model_validate(_body(transactionReference="NEW")).to_domain()
    assert not hasattr(changes, "transaction_reference")
    assert changes.description == "Grocery shopping"


def test_update_does_not_require_reference():
    body = _body()
    del body["transactionReference"]
    assert TransactionUpdate.model_validate(body).category == "Food"


def _record(record_id=1) -> TransactionRecord:
    return TransactionRecord(
        id=record_id,
        description="Grocery shopping",
        amount=Decimal("100.5000"),
        type=TransactionType.DEBIT,
        category="Food",
        transaction_reference=f"REF-{record_id}",
        transaction_date=datetime(2024, 1, 1, 12, tzinfo=timezone.utc),
    )


def test_response_uses_camel_case_wire_names():
    dumped = TransactionResponse.from_record(_record()).model_dump(mode="json", by_alias=True)
    assert dumped["transactionReference"] == "REF-1"
    assert dumped["type"] == "DEBIT"
    assert Decimal(dumped["amount"]) == Decimal("100.5")
    assert dumped["transactionDate"].startswith("2024-01-01T12:00:00")


def test_paged_response_from_page():
    page = TransactionPage(content=(_record(1), _record(2)), page=1, size=2, total_items=5)
    dumped = PagedResponse.from_page(page).model_dump(by_alias=True)
    assert dumped["currentPage"] == 1
    assert dumped["totalPages"] == 3
    assert dumped["totalItems"] == 5
    assert dumped["pageSize"] == 2
    assert [c["id"] for c in dumped["content"]] == [1, 2]


def test_envelope_omits_empty_result():
    envelope = CommonResponse.success(message="Cache cleared")
    assert envelope.model_dump(exclude_none=True) == {
        "status": {"code": 200, "message": "Cache cleared"},
    }


def test_response_amount_is_exact_decimal_string():
    record = _record()
    dumped = TransactionResponse.from_record(record).model_dump(mode="json", by_alias=True)
    assert dumped["amount"] == "100.5000"
    assert TransactionResponse.from_record(record).model_dump()["amount"] == Decimal("100.5000")


def test_amount_wire_format_is_documented():
    schema = TransactionResponse.model_json_schema(by_alias=True, mode="serialization")
    amount = schema["properties"]["amount"]
    assert amount["type"] == "string"
    assert "string" in amount["description"]
