"""Transaction Records API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map every failure to the {status, result} envelope
    - CORS configured from settings (not hardcoded)
    - Database, cache and service initialized on startup via lifespan context manager
    - One TransactionCache per process, owned by the one TransactionService

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Every request logged once with method, path, status and duration
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from txn_records.api.error_handlers import register_error_handlers
from txn_records.api.routes import cache_admin, health, transactions
from txn_records.config import get_settings
from txn_records.infrastructure.database import init_db
from txn_records.infrastructure.observability import setup_logging
from txn_records.infrastructure.transaction_cache import TransactionCache
from txn_records.infrastructure.transaction_store import SqlTransactionStore
from txn_records.services.transaction_service import init_transaction_service

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_recycle=settings.database_pool_recycle_seconds,
    )
    init_transaction_service(
        SqlTransactionStore(db), TransactionCache.from_settings(settings),
    )
    logger.info("Transaction Records API started")
    yield
    logger.info("Transaction Records API shutting down")
    await db.dispose()


app = FastAPI(
    title="Transaction Records API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_request_timing(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - started) * 1000, 2)
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code}",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response


app.include_router(health.router)
app.include_router(transactions.router)
app.include_router(cache_admin.router)

register_error_handlers(app)


@app.get("/", include_in_schema=False)
async def home():
    """Landing page points at the interactive API docs."""
    return RedirectResponse("/docs")
