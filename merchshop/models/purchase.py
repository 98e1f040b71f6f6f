"""Purchase ORM — one row per successful purchase, immutable afterwards.

Invariants:
    - quantity > 0, total_price > 0
    - total_price == merchandise price x quantity at purchase time
    - Inserted in the same unit of work as the buyer's debit
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from merchshop.db.base import Base


class Purchase(Base):
    """Purchase line — history backing the inventory view."""
    __tablename__ = "purchases"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_purchases_quantity_positive"),
        CheckConstraint("total_price > 0", name="ck_purchases_total_price_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("accounts.id"), nullable=False, index=True,
    )
    item_name: Mapped[str] = mapped_column(
        String(50), ForeignKey("merchandise.name"), nullable=False,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    total_price: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
