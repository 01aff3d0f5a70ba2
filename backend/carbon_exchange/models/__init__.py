"""ORM Models - SQLAlchemy declarative models for the SQL ledger store.

Invariants:
    - All models inherit from Base (db/base.py)
    - Column names match the original snake_case table layout

Design Decisions:
    - One file per entity
    - All models imported here so Base.metadata is complete before create_all
"""

from carbon_exchange.models.user import UserRow  # noqa: F401
from carbon_exchange.models.project import ProjectRow  # noqa: F401
from carbon_exchange.models.credit import CreditRow  # noqa: F401
