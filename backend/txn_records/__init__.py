"""Transaction Records Package: CRUD API for financial transaction records.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
