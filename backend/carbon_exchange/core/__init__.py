"""Core Layer - pure domain logic, no IO, no DB.

Invariants:
    - No module in core/ imports from services/, api/, schemas/, infrastructure/, or db/
    - All functions are pure and deterministic
"""
