"""Cache Administration: inspect and flush the transaction cache.

Invariants:
    - DELETE empties both namespaces (point and page); the store is untouched
    - Not part of the normal request flow; used to recover from suspected staleness
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends

from txn_records.schemas.envelope import CommonResponse
from txn_records.services.transaction_service import (
    TransactionService, get_transaction_service,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/admin/cache", tags=["admin"])


@router.get("", response_model=CommonResponse[list[dict]], response_model_exclude_none=True)
async def cache_statistics(
    service: TransactionService = Depends(get_transaction_service),
):
    """Per-region size, capacity, TTL and hit/miss counters."""
    return CommonResponse.success([asdict(s) for s in service.cache_stats()])


@router.delete("", response_model=CommonResponse, response_model_exclude_none=True)
async def clear_cache(
    service: TransactionService = Depends(get_transaction_service),
):
    service.clear_cache()
    return CommonResponse.success(message="Cache cleared")
