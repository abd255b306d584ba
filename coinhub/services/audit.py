"""Ledger consistency audit.

Walks every user's transaction log in id order and checks that the
``balance_after`` snapshots chain and that the last one matches the stored
balance.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from coinhub.models.coin_transaction import CoinTransaction
from coinhub.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class AuditStats:
    scanned_users: int = 0
    scanned_transactions: int = 0
    mismatched_users: int = 0
    problems: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.mismatched_users == 0


async def audit_user(db: AsyncSession, user: User, stats: AuditStats) -> bool:
    q = await db.execute(
        select(CoinTransaction)
        .where(CoinTransaction.user_id == user.id)
        .order_by(CoinTransaction.id.asc())
    )
    txs = q.scalars().all()
    stats.scanned_transactions += len(txs)

    problems: list[str] = []
    if user.balance < 0:
        problems.append(f"user_id={user.id} negative balance={user.balance}")

    prev = None
    for tx in txs:
        if tx.balance_after < 0:
            problems.append(f"user_id={user.id} tx={tx.reference_number} negative balance_after={tx.balance_after}")
        # The first row has no predecessor to chain from (balances may predate the log).
        if prev is not None and prev.balance_after + tx.amount != tx.balance_after:
            problems.append(
                f"user_id={user.id} tx={tx.reference_number} broken chain "
                f"prev={prev.balance_after} amount={tx.amount} balance_after={tx.balance_after}"
            )
        prev = tx

    if prev is not None and prev.balance_after != user.balance:
        problems.append(
            f"user_id={user.id} stored balance={user.balance} != last balance_after={prev.balance_after}"
        )

    if problems:
        stats.mismatched_users += 1
        stats.problems.extend(problems)
        for p in problems:
            logger.warning("ledger audit mismatch %s", p)
    return not problems


async def audit_ledger(db: AsyncSession, user_id: int | None = None, batch_size: int = 500) -> AuditStats:
    stats = AuditStats()
    last_id = 0
    while True:
        stmt = (
            select(User)
            .where(User.id > last_id)
            .order_by(User.id.asc())
            .limit(batch_size)
            .execution_options(populate_existing=True)
        )
        if user_id is not None:
            stmt = stmt.where(User.id == user_id)
        q = await db.execute(stmt)
        users = q.scalars().all()
        if not users:
            break
        for u in users:
            stats.scanned_users += 1
            await audit_user(db, u, stats)
        last_id = users[-1].id
        if len(users) < batch_size:
            break
    return stats
