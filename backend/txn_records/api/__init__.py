"""API Layer: FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return the {status, result} envelope

Design Decisions:
    - Thin routes delegate to TransactionService
"""
