"""Declarative Base — shared metadata for the ledger tables.

Invariants:
    - accounts, merchandise, purchases and transfers all register on Base.metadata
    - Index, unique, foreign-key and primary-key names are deterministic so
      migrations can drop them by name; CHECK constraints are named explicitly
      on each model
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

LEDGER_NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=LEDGER_NAMING_CONVENTION)
