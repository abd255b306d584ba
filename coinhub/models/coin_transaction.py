from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from coinhub.core.db import Base
from coinhub.models.common import utcnow


class TransactionKind(str, enum.Enum):
    earn = "earn"
    spend = "spend"
    topup = "topup"
    deduct = "deduct"


CREDIT_KINDS = (TransactionKind.earn, TransactionKind.topup)
DEBIT_KINDS = (TransactionKind.spend, TransactionKind.deduct)


class CoinTransaction(Base):
    """Append-only ledger row. Never updated once committed."""

    __tablename__ = "coin_transactions"
    __table_args__ = (Index("ix_coin_transactions_user_id_id", "user_id", "id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False)

    # assigned right after insert, see services.transactions.record
    reference_number: Mapped[str | None] = mapped_column(String(48), unique=True, nullable=True)

    kind: Mapped[TransactionKind] = mapped_column(Enum(TransactionKind), nullable=False)
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)  # positive or negative
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    related_order_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    balance_after: Mapped[int] = mapped_column(BigInteger, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
