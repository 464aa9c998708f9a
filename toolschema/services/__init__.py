"""Services Layer: tool configuration building and registration.

Invariants:
    - Name and permission validation happens here, never in core/
    - Registration batches are all-or-nothing

Design Decisions:
    - Registry owns its SchemaWalker so tests can start from an empty cache
"""
