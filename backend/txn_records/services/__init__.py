"""Services Layer: orchestration of store IO and cache state around the pure core.

Invariants:
    - Services depend on core protocols, not on concrete store classes
    - Routes call services; services never import from api/
"""
