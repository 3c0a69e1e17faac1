"""Transaction Routes: HTTP surface over TransactionService.

Invariants:
    - Every response body is the {status, result} envelope; result omitted when null
    - Not-found and duplicate outcomes are raised as domain errors and rendered by
      the global handlers (404 / 409), never built inline
    - Request bodies are validated by Pydantic before reaching the handler
    - Routes hold no caching or consistency logic; the service owns it
"""

import logging

from fastapi import APIRouter, Depends, Query, status

from txn_records.core.domain_types import (
    TransactionId, TransactionReference, TransactionType,
)
from txn_records.core.errors import (
    ErrorContext, InvalidRequestError, TransactionNotFoundError,
)
from txn_records.core.records import DEFAULT_SORT_FIELD, PageRequest
from txn_records.schemas.envelope import CommonResponse
from txn_records.schemas.transaction import (
    PagedResponse, TransactionCreate, TransactionResponse, TransactionUpdate,
)
from txn_records.services.transaction_service import (
    TransactionService, get_transaction_service,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/transactions", tags=["transactions"])

CREATED_MESSAGE = "Transaction created successfully"


def _parse_type_filter(raw: str | None) -> TransactionType | None:
    if raw is None or not raw.strip():
        return None
    try:
        return TransactionType.parse(raw)
    except ValueError:
        raise InvalidRequestError("Type must be either DEBIT or CREDIT", "type")


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=CommonResponse[TransactionResponse],
    response_model_exclude_none=True,
)
async def create_transaction(
    body: TransactionCreate,
    service: TransactionService = Depends(get_transaction_service),
):
    """Create a transaction. Any id or transactionDate in the body is ignored."""
    record = await service.create(body.to_domain())
    return CommonResponse.success(
        TransactionResponse.from_record(record),
        CREATED_MESSAGE,
        status.HTTP_201_CREATED,
    )


@router.get(
    "",
    response_model=CommonResponse[PagedResponse],
    response_model_exclude_none=True,
)
async def list_transactions(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    sort_by: str = Query(DEFAULT_SORT_FIELD, alias="sortBy"),
    direction: str = Query("desc"),
    category: str | None = Query(None),
    type_filter: str | None = Query(None, alias="type"),
    service: TransactionService = Depends(get_transaction_service),
):
    """List transactions with optional case-insensitive category/type filters."""
    page_request = PageRequest.of(page, size, sort_by, direction)
    if category is not None and not category.strip():
        category = None
    result = await service.list_page(
        category, _parse_type_filter(type_filter), page_request,
    )
    return CommonResponse.success(PagedResponse.from_page(result))


@router.get(
    "/reference/{reference}",
    response_model=CommonResponse[TransactionResponse],
    response_model_exclude_none=True,
)
async def get_transaction_by_reference(
    reference: str,
    service: TransactionService = Depends(get_transaction_service),
):
    record = await service.get_by_reference(TransactionReference(reference))
    if record is None:
        raise TransactionNotFoundError(reference, ErrorContext(reference=reference))
    return CommonResponse.success(TransactionResponse.from_record(record))


@router.delete(
    "/reference/{reference}",
    response_model=CommonResponse,
    response_model_exclude_none=True,
)
async def delete_transaction_by_reference(
    reference: str,
    service: TransactionService = Depends(get_transaction_service),
):
    await service.delete_by_reference(TransactionReference(reference))
    return CommonResponse.success()


@router.get(
    "/{transaction_id}",
    response_model=CommonResponse[TransactionResponse],
    response_model_exclude_none=True,
)
async def get_transaction(
    transaction_id: int,
    service: TransactionService = Depends(get_transaction_service),
):
    record = await service.get_by_id(TransactionId(transaction_id))
    if record is None:
        raise TransactionNotFoundError(
            transaction_id, ErrorContext(transaction_id=transaction_id),
        )
    return CommonResponse.success(TransactionResponse.from_record(record))


@router.put(
    "/{transaction_id}",
    response_model=CommonResponse[TransactionResponse],
    response_model_exclude_none=True,
)
async def update_transaction(
    transaction_id: int,
    body: TransactionUpdate,
    service: TransactionService = Depends(get_transaction_service),
):
    """Replace description, amount, type and category. Reference and dates are immutable."""
    record = await service.update(TransactionId(transaction_id), body.to_domain())
    return CommonResponse.success(TransactionResponse.from_record(record))


@router.delete(
    "/{transaction_id}",
    response_model=CommonResponse,
    response_model_exclude_none=True,
)
async def delete_transaction(
    transaction_id: int,
    service: TransactionService = Depends(get_transaction_service),
):
    await service.delete(TransactionId(transaction_id))
    return CommonResponse.success()
