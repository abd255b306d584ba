"""Coin spending and administrator balance adjustments.

Every operation is one unit of work: balance mutation, ledger row and any
notification are committed together or not at all.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from coinhub.models.coin_transaction import CoinTransaction, TransactionKind
from coinhub.models.user import User
from coinhub.services import balance, transactions
from coinhub.services.errors import CoinLedgerError, NotFound, require_positive
from coinhub.services.notifications import notify_coin_redeem
from coinhub.services.uow import commit

logger = logging.getLogger(__name__)


@dataclass
class LedgerResult:
    transaction: CoinTransaction
    new_balance: int
    user: User | None = None


async def spend(
    db: AsyncSession,
    user_id: int,
    amount: int,
    description: str | None = None,
    related_order_id: str | None = None,
) -> LedgerResult:
    """Debit ``amount`` coins. Without an order id the spend is a redemption and admins are notified."""
    require_positive(amount)
    related_order_id = related_order_id or None
    if not description:
        description = f"Payment for order #{related_order_id}" if related_order_id else "Coins spent"
    try:
        new_balance = await balance.debit(db, user_id, amount)
        tx = await transactions.record(
            db,
            user_id,
            TransactionKind.spend,
            -amount,
            description,
            balance_after=new_balance,
            related_order_id=related_order_id,
        )
        if related_order_id is None:
            user = await db.get(User, user_id)
            notify_coin_redeem(db, user, tx)
        await commit(db)
    except CoinLedgerError:
        await db.rollback()
        raise

    logger.info("coins spent user_id=%s amount=%s balance=%s ref=%s", user_id, amount, new_balance, tx.reference_number)
    return LedgerResult(transaction=tx, new_balance=new_balance)


async def _adjust(
    db: AsyncSession,
    target_user_id: int,
    amount: int,
    kind: TransactionKind,
    description: str,
    related_order_id: str | None = None,
) -> LedgerResult:
    require_positive(amount)
    try:
        if kind == TransactionKind.deduct:
            new_balance = await balance.debit(db, target_user_id, amount)
            signed = -amount
        else:
            new_balance = await balance.credit(db, target_user_id, amount)
            signed = amount
        tx = await transactions.record(
            db,
            target_user_id,
            kind,
            signed,
            description,
            balance_after=new_balance,
            related_order_id=related_order_id,
        )
        user = await db.get(User, target_user_id, populate_existing=True)
        if not user:
            raise NotFound("User not found", user_id=target_user_id)
        await commit(db)
    except CoinLedgerError:
        await db.rollback()
        raise

    logger.info(
        "admin adjustment kind=%s user_id=%s amount=%s balance=%s ref=%s",
        kind.value, target_user_id, signed, new_balance, tx.reference_number,
    )
    return LedgerResult(transaction=tx, new_balance=new_balance, user=user)


async def admin_credit(db: AsyncSession, target_user_id: int, amount: int, description: str | None = None) -> LedgerResult:
    return await _adjust(db, target_user_id, amount, TransactionKind.topup, description or "Coins added by admin")


async def admin_debit(db: AsyncSession, target_user_id: int, amount: int, description: str | None = None) -> LedgerResult:
    return await _adjust(db, target_user_id, amount, TransactionKind.deduct, description or "Coins deducted by admin")


async def earn(
    db: AsyncSession,
    target_user_id: int,
    amount: int,
    description: str | None = None,
    related_order_id: str | None = None,
) -> LedgerResult:
    related_order_id = related_order_id or None
    if not description:
        description = f"Coins earned from order #{related_order_id}" if related_order_id else "Coins earned"
    return await _adjust(db, target_user_id, amount, TransactionKind.earn, description, related_order_id)
