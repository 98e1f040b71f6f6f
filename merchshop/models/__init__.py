"""ORM Models — SQLAlchemy declarative models for the ledger store.

Invariants:
    - All models inherit from Base (db/base.py)
    - Account is the only mutable table, and only its balance column changes

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
      or alembic autogenerate runs
"""

from merchshop.models.account import Account  # noqa: F401
from merchshop.models.merchandise import Merchandise  # noqa: F401
from merchshop.models.purchase import Purchase  # noqa: F401
from merchshop.models.transfer import Transfer  # noqa: F401
