"""Database Infrastructure - SQLAlchemy declarative Base for the SQL ledger store.

Invariants:
    - Single async engine per process (owned by DatabaseSessionManager)
"""
