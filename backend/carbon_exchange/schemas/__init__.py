"""Pydantic Schemas - ledger records and request bodies at the API boundary.

Invariants:
    - JSON keys are camelCase (projectId, imageUrl, ...) to match the web client
    - Decimal fields serialize as strings

Design Decisions:
    - Separate from models/: schemas are API contracts, models are SQL persistence
"""
