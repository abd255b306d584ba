from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from coinhub.core.config import settings
from coinhub.core.db import get_db
from coinhub.api.deps import require_admin
from coinhub.api.v1.serializers import notification_out
from coinhub.schemas.notification import MarkAllReadResult, NotificationList, NotificationOut
from coinhub.services import notifications as notification_service

router = APIRouter()


@router.get("", response_model=NotificationList)
async def list_notifications(
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_admin),
    unread_only: bool = Query(False),
    offset: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=200),
):
    items, total, unread = await notification_service.list_notifications(db, unread_only=unread_only, offset=offset, limit=limit)
    return NotificationList(items=[notification_out(n) for n in items], total=total, unread_count=unread)


@router.patch("/read-all", response_model=MarkAllReadResult)
async def mark_all_read(db: AsyncSession = Depends(get_db), admin=Depends(require_admin)):
    updated = await notification_service.mark_all_read(db)
    return MarkAllReadResult(updated=updated)


@router.patch("/{notification_id}/read", response_model=NotificationOut)
async def mark_read(notification_id: int, db: AsyncSession = Depends(get_db), admin=Depends(require_admin)):
    n = await notification_service.mark_read(db, notification_id)
    return notification_out(n)
