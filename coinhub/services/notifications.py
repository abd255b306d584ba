"""Administrator notification side channel.

Emitters only ``add`` to the session; the triggering operation commits them
together with its own writes.
"""
from __future__ import annotations

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from coinhub.models.coin_transaction import CoinTransaction
from coinhub.models.notification import AdminNotification, NotificationKind
from coinhub.models.topup_request import TopupRequest
from coinhub.models.user import User
from coinhub.schemas.notification import CoinRedeemPayload, TopupRequestPayload
from coinhub.services.errors import NotFound
from coinhub.services.uow import commit


def _emit(db: AsyncSession, kind: NotificationKind, title: str, message: str, payload) -> AdminNotification:
    n = AdminNotification(
        kind=kind,
        title=title,
        message=message,
        payload=payload.model_dump(mode="json"),
        is_read=False,
    )
    db.add(n)
    return n


def notify_topup_request(db: AsyncSession, user: User, req: TopupRequest) -> AdminNotification:
    payload = TopupRequestPayload(
        topup_request_id=req.id,
        user_id=user.id,
        user_name=user.full_name,
        user_email=user.email,
        amount=req.amount,
        receipt_image_ref=req.receipt_image_ref,
    )
    return _emit(
        db,
        NotificationKind.topup_request,
        "Topup request",
        f"{user.full_name} requested a topup of {req.amount:,}",
        payload,
    )


def notify_coin_redeem(db: AsyncSession, user: User, tx: CoinTransaction) -> AdminNotification:
    amount = abs(tx.amount)
    payload = CoinRedeemPayload(
        user_id=user.id,
        user_name=user.full_name,
        user_email=user.email,
        amount=amount,
        transaction_id=tx.id,
    )
    return _emit(
        db,
        NotificationKind.coin_redeem,
        "Coins redeemed",
        f"{user.full_name} redeemed {amount:,} coins",
        payload,
    )


async def list_notifications(
    db: AsyncSession,
    unread_only: bool = False,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[AdminNotification], int, int]:
    stmt = select(AdminNotification).order_by(desc(AdminNotification.id))
    if unread_only:
        stmt = stmt.where(AdminNotification.is_read.is_(False))
    total_q = await db.execute(select(func.count()).select_from(stmt.subquery()))
    total = int(total_q.scalar_one())
    unread_q = await db.execute(select(func.count(AdminNotification.id)).where(AdminNotification.is_read.is_(False)))
    unread = int(unread_q.scalar_one())
    q = await db.execute(stmt.limit(limit).offset(offset))
    return list(q.scalars().all()), total, unread


async def mark_read(db: AsyncSession, notification_id: int) -> AdminNotification:
    n = await db.get(AdminNotification, notification_id)
    if not n:
        raise NotFound("Notification not found", notification_id=notification_id)
    if not n.is_read:
        n.is_read = True
        await commit(db)
    return n


async def mark_all_read(db: AsyncSession) -> int:
    q = await db.execute(
        update(AdminNotification)
        .where(AdminNotification.is_read.is_(False))
        .values(is_read=True)
        .execution_options(synchronize_session=False)
    )
    await commit(db)
    return int(q.rowcount or 0)
