"""Transaction log: append-only coin ledger rows with balance snapshots."""
from __future__ import annotations

import time
from dataclasses import dataclass

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from coinhub.core.config import settings
from coinhub.models.coin_transaction import CREDIT_KINDS, DEBIT_KINDS, CoinTransaction, TransactionKind
from coinhub.services.balance import get_balance
from coinhub.services.errors import ValidationError


@dataclass
class LedgerSummary:
    current_balance: int
    total_credited: int
    total_debited: int


def make_reference_number(tx_id: int, now_ms: int | None = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{settings.TRANSACTION_REFERENCE_PREFIX}-{now_ms}-{tx_id:05d}"


async def record(
    db: AsyncSession,
    user_id: int,
    kind: TransactionKind,
    amount: int,
    description: str,
    balance_after: int,
    related_order_id: str | None = None,
) -> CoinTransaction:
    """Append a ledger row inside the caller's unit of work (no commit)."""
    kind = TransactionKind(kind)
    if kind in CREDIT_KINDS and amount <= 0:
        raise ValidationError(f"{kind.value} transactions must have a positive amount")
    if kind in DEBIT_KINDS and amount >= 0:
        raise ValidationError(f"{kind.value} transactions must have a negative amount")
    if balance_after < 0:
        raise ValidationError("balance_after cannot be negative")

    tx = CoinTransaction(
        user_id=user_id,
        kind=kind,
        amount=amount,
        description=description,
        related_order_id=related_order_id,
        balance_after=balance_after,
    )
    db.add(tx)
    await db.flush()
    # the row id doubles as the log-wide sequence number
    tx.reference_number = make_reference_number(tx.id)
    await db.flush()
    return tx


async def list_for_user(db: AsyncSession, user_id: int, offset: int = 0, limit: int = 20) -> tuple[list[CoinTransaction], int]:
    stmt = (
        select(CoinTransaction)
        .where(CoinTransaction.user_id == user_id)
        .order_by(desc(CoinTransaction.id))
    )
    total_q = await db.execute(select(func.count()).select_from(stmt.subquery()))
    total = int(total_q.scalar_one())
    q = await db.execute(stmt.limit(limit).offset(offset))
    return list(q.scalars().all()), total


async def summary(db: AsyncSession, user_id: int) -> LedgerSummary:
    current = await get_balance(db, user_id)

    credited_q = await db.execute(
        select(func.coalesce(func.sum(CoinTransaction.amount), 0)).where(
            CoinTransaction.user_id == user_id,
            CoinTransaction.kind.in_(CREDIT_KINDS),
        )
    )
    debited_q = await db.execute(
        select(func.coalesce(func.sum(func.abs(CoinTransaction.amount)), 0)).where(
            CoinTransaction.user_id == user_id,
            CoinTransaction.kind.in_(DEBIT_KINDS),
        )
    )
    return LedgerSummary(
        current_balance=current,
        total_credited=int(credited_q.scalar_one()),
        total_debited=int(debited_q.scalar_one()),
    )
