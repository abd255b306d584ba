from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from coinhub.core.config import settings
from coinhub.core.db import get_db
from coinhub.api.deps import require_admin
from coinhub.api.v1.serializers import admin_topup_out, topup_out, tx_out
from coinhub.schemas.topup import AdminTopupPage, ProcessTopupRequest, ProcessTopupResult
from coinhub.services import topups as topup_service

router = APIRouter()


@router.get("", response_model=AdminTopupPage)
async def list_topups(
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_admin),
    status: Optional[str] = Query(None),
    offset: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=200),
):
    rows, total = await topup_service.list_all(db, status=status, offset=offset, limit=limit)
    return AdminTopupPage(
        items=[admin_topup_out(r.request, r.owner, r.reviewer) for r in rows],
        total=total,
    )


@router.post("/{request_id}/process", response_model=ProcessTopupResult)
async def process_topup(
    request_id: int,
    payload: ProcessTopupRequest,
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_admin),
):
    result = await topup_service.process(db, request_id, payload.action, reviewer_id=admin.id, admin_note=payload.admin_note)
    return ProcessTopupResult(
        request=topup_out(result.request),
        transaction=tx_out(result.transaction) if result.transaction else None,
        new_balance=result.new_balance,
    )
