"""Transfer ORM — one row per successful coin transfer, immutable afterwards.

Invariants:
    - amount > 0
    - sender_id != receiver_id (enforced by the transfer engine, not the schema)
    - Inserted in the same unit of work as the sender debit and receiver credit

Design Decisions:
    - No relationship() attributes: history queries join accounts explicitly
      to pick up counterparty usernames
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from merchshop.db.base import Base


class Transfer(Base):
    """Transfer line — history backing coinHistory.sent / coinHistory.received."""
    __tablename__ = "transfers"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transfers_amount_positive"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sender_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("accounts.id"), nullable=False, index=True,
    )
    receiver_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("accounts.id"), nullable=False, index=True,
    )
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
