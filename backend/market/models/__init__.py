"""ORM Models: SQLAlchemy declarative models for users, items, and the purchase ledger.

Invariants:
    - All models inherit from Base (db/base.py)
    - Purchase rows reference users and items by id only

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
      or Alembic autogenerate runs
"""

from market.models.user import User  # noqa: F401
from market.models.item import Item  # noqa: F401
from market.models.purchase import Purchase  # noqa: F401
