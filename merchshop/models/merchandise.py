"""Merchandise ORM — static catalog of items priced in coins.

Invariants:
    - name is the primary key
    - price > 0
"""

from sqlalchemy import BigInteger, CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from merchshop.db.base import Base


class Merchandise(Base):
    """Catalog item — reference data seeded by the initial migration."""
    __tablename__ = "merchandise"
    __table_args__ = (
        CheckConstraint("price > 0", name="ck_merchandise_price_positive"),
    )

    name: Mapped[str] = mapped_column(String(50), primary_key=True)
    price: Mapped[int] = mapped_column(BigInteger, nullable=False)
