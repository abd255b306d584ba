"""Topup requests: user-submitted payment claims reviewed by an administrator.

A request leaves ``pending`` exactly once. The transition is a conditional
UPDATE on ``status = 'pending'``, so concurrent reviews of the same request
cannot both succeed and an approval credits the balance at most once.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import desc, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from coinhub.core.config import settings
from coinhub.models.coin_transaction import CoinTransaction, TransactionKind
from coinhub.models.topup_request import TopupRequest, TopupStatus
from coinhub.models.user import User
from coinhub.services import balance, transactions
from coinhub.services.errors import (
    CoinLedgerError,
    InvalidState,
    NotFound,
    Unauthenticated,
    ValidationError,
    require_positive,
)
from coinhub.services.notifications import notify_topup_request
from coinhub.services.uow import commit

logger = logging.getLogger(__name__)

APPROVAL_DESCRIPTION = "Topup via bank transfer (approved by admin)"


class TopupAction(str, enum.Enum):
    approve = "approve"
    reject = "reject"


@dataclass
class ProcessResult:
    request: TopupRequest
    transaction: CoinTransaction | None = None
    new_balance: int | None = None


@dataclass
class TopupRow:
    request: TopupRequest
    owner: User | None
    reviewer: User | None


async def submit(
    db: AsyncSession,
    user_id: int | None,
    amount: int,
    receipt_image_ref: str | None,
    display_name: str | None,
    note: str | None = None,
) -> TopupRequest:
    if user_id is None:
        raise Unauthenticated("Please log in")
    require_positive(amount)
    receipt_image_ref = (receipt_image_ref or "").strip()
    if not receipt_image_ref:
        raise ValidationError("Please upload the transfer receipt")
    display_name = (display_name or "").strip()
    if not display_name:
        raise ValidationError("Please provide a display name")

    user = await db.get(User, user_id)
    if not user:
        raise NotFound("User not found", user_id=user_id)

    limit = settings.TOPUP_MAX_PENDING_PER_USER
    if limit > 0:
        pending_q = await db.execute(
            select(func.count(TopupRequest.id)).where(
                TopupRequest.user_id == user_id,
                TopupRequest.status == TopupStatus.pending,
            )
        )
        if int(pending_q.scalar_one()) >= limit:
            raise ValidationError(
                "Too many pending topup requests, wait for review first",
                max_pending=limit,
            )

    req = TopupRequest(
        user_id=user_id,
        submitted_display_name=display_name,
        amount=amount,
        receipt_image_ref=receipt_image_ref,
        note=note,
        status=TopupStatus.pending,
    )
    try:
        db.add(req)
        await db.flush()
        notify_topup_request(db, user, req)
        await commit(db)
    except CoinLedgerError:
        await db.rollback()
        raise

    logger.info("topup request submitted id=%s user_id=%s amount=%s", req.id, user_id, amount)
    return req


async def process(
    db: AsyncSession,
    request_id: int,
    action: TopupAction | str,
    reviewer_id: int,
    admin_note: str | None = None,
) -> ProcessResult:
    try:
        action = TopupAction(action)
    except ValueError:
        raise ValidationError("action must be 'approve' or 'reject'")

    target = TopupStatus.approved if action == TopupAction.approve else TopupStatus.rejected
    try:
        q = await db.execute(
            update(TopupRequest)
            .where(TopupRequest.id == request_id, TopupRequest.status == TopupStatus.pending)
            .values(
                status=target,
                reviewer_id=reviewer_id,
                reviewed_at=datetime.now(timezone.utc),
                admin_note=admin_note,
            )
            .returning(TopupRequest.user_id, TopupRequest.amount)
            .execution_options(synchronize_session=False)
        )
        row = q.first()
        if row is None:
            existing = await db.get(TopupRequest, request_id, populate_existing=True)
            if not existing:
                raise NotFound("Topup request not found", request_id=request_id)
            raise InvalidState(
                f"Topup request was already {existing.status.value}",
                request_id=request_id,
                status=existing.status.value,
            )

        result_tx = None
        new_balance = None
        if action == TopupAction.approve:
            new_balance = await balance.credit(db, row.user_id, int(row.amount))
            result_tx = await transactions.record(
                db,
                row.user_id,
                TransactionKind.topup,
                int(row.amount),
                APPROVAL_DESCRIPTION,
                balance_after=new_balance,
            )

        req = await db.get(TopupRequest, request_id, populate_existing=True)
        await commit(db)
    except CoinLedgerError:
        await db.rollback()
        raise

    logger.info(
        "topup request processed id=%s action=%s reviewer_id=%s user_id=%s amount=%s",
        request_id, action.value, reviewer_id, row.user_id, row.amount,
    )
    return ProcessResult(request=req, transaction=result_tx, new_balance=new_balance)


async def list_all(
    db: AsyncSession,
    status: str | None = None,
    offset: int = 0,
    limit: int = 20,
) -> tuple[list[TopupRow], int]:
    conditions = []
    if status and status != "all":
        try:
            conditions.append(TopupRequest.status == TopupStatus(status))
        except ValueError:
            raise ValidationError("status must be one of: all, pending, approved, rejected")

    owner = aliased(User)
    reviewer = aliased(User)
    stmt = (
        select(TopupRequest, owner, reviewer)
        .outerjoin(owner, owner.id == TopupRequest.user_id)
        .outerjoin(reviewer, reviewer.id == TopupRequest.reviewer_id)
        .where(*conditions)
        .order_by(desc(TopupRequest.id))
    )
    total_q = await db.execute(select(func.count(TopupRequest.id)).where(*conditions))
    total = int(total_q.scalar_one())
    q = await db.execute(stmt.limit(limit).offset(offset))
    items = [TopupRow(request=r, owner=o, reviewer=rv) for r, o, rv in q.all()]
    return items, total


async def list_for_user(db: AsyncSession, user_id: int, offset: int = 0, limit: int = 10) -> tuple[list[TopupRequest], int]:
    stmt = (
        select(TopupRequest)
        .where(TopupRequest.user_id == user_id)
        .order_by(desc(TopupRequest.id))
    )
    total_q = await db.execute(select(func.count()).select_from(stmt.subquery()))
    total = int(total_q.scalar_one())
    q = await db.execute(stmt.limit(limit).offset(offset))
    return list(q.scalars().all()), total
