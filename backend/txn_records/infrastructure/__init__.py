"""Infrastructure Layer: database access, in-process cache and cross-cutting concerns.

Invariants:
    - Infrastructure implements core/ protocols; core never imports from here
    - All SQLAlchemy errors mapped to core DatabaseError before leaving this layer
"""
