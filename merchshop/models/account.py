"""Account ORM — a user's identity plus coin balance.

Invariants:
    - username is unique
    - balance >= 0 at every committed state (CHECK constraint backs the
      conditional debit in services/balance_mutator.py)
    - balance is written only through apply_delta, never by assigning the attribute

Design Decisions:
    - Integer primary key: accounts are addressed by the id carried in the JWT
    - BigInteger balance: matches the coin columns in purchases and transfers
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from merchshop.db.base import Base


class Account(Base):
    """Account entity — owns a balance, referenced by purchases and transfers."""
    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("balance >= 0", name="ck_accounts_balance_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(
        String(50), nullable=False, unique=True,
    )
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    balance: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
