"""Core Layer: pure schema compilation, no IO, no async.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - The compiler never raises for a schema shape; it degrades instead

Design Decisions:
    - Functional core separated from the registry shell (ADR: ExMA impureim sandwich)
"""
