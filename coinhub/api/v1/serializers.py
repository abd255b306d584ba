from __future__ import annotations

from coinhub.models.coin_transaction import CoinTransaction
from coinhub.models.notification import AdminNotification
from coinhub.models.topup_request import TopupRequest
from coinhub.models.user import User
from coinhub.schemas.coins import TargetUserSummary, TransactionOut
from coinhub.schemas.notification import NotificationOut
from coinhub.schemas.topup import AdminTopupOut, TopupOut, UserRef


def tx_out(t: CoinTransaction) -> TransactionOut:
    return TransactionOut(
        id=t.id,
        user_id=t.user_id,
        reference_number=t.reference_number,
        kind=t.kind.value,
        amount=t.amount,
        description=t.description,
        related_order_id=t.related_order_id,
        balance_after=t.balance_after,
        created_at=t.created_at,
    )


def topup_out(r: TopupRequest) -> TopupOut:
    return TopupOut(
        id=r.id,
        user_id=r.user_id,
        submitted_display_name=r.submitted_display_name,
        amount=r.amount,
        receipt_image_ref=r.receipt_image_ref,
        status=r.status.value,
        note=r.note,
        admin_note=r.admin_note,
        reviewer_id=r.reviewer_id,
        reviewed_at=r.reviewed_at,
        created_at=r.created_at,
    )


def _user_ref(u: User | None, with_email: bool = True) -> UserRef | None:
    if u is None:
        return None
    return UserRef(id=u.id, name=u.full_name, email=u.email if with_email else None)


def admin_topup_out(r: TopupRequest, owner: User | None, reviewer: User | None) -> AdminTopupOut:
    return AdminTopupOut(
        **topup_out(r).model_dump(),
        user=_user_ref(owner),
        reviewer=_user_ref(reviewer, with_email=False),
    )


def user_summary(u: User) -> TargetUserSummary:
    return TargetUserSummary(
        id=u.id,
        first_name=u.first_name,
        last_name=u.last_name,
        email=u.email,
        balance=u.balance,
    )


def notification_out(n: AdminNotification) -> NotificationOut:
    return NotificationOut(
        id=n.id,
        kind=n.kind.value,
        title=n.title,
        message=n.message,
        payload={"kind": n.kind.value, **(n.payload or {})},
        is_read=n.is_read,
        created_at=n.created_at,
    )
