"""Infrastructure Layer - ledger stores, database sessions, auth sessions, logging.

Invariants:
    - Storage errors are mapped to core/errors.py types before leaving this layer
"""
