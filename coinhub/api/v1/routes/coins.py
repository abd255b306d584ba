from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from coinhub.core.config import settings
from coinhub.core.db import get_db
from coinhub.api.deps import require_user
from coinhub.api.v1.serializers import topup_out, tx_out
from coinhub.schemas.coins import SpendRequest, SpendResult, SummaryOut, TransactionPage
from coinhub.schemas.topup import TopupOut, TopupPage, TopupSubmitRequest
from coinhub.services import balance as balance_service
from coinhub.services import coins as coin_service
from coinhub.services import topups as topup_service
from coinhub.services import transactions as tx_service

router = APIRouter()


@router.get("/transactions", response_model=TransactionPage)
async def my_transactions(
    db: AsyncSession = Depends(get_db),
    user=Depends(require_user),
    offset: int = Query(0, ge=0),
    limit: int = Query(settings.DEFAULT_PAGE_LIMIT, ge=1, le=200),
):
    items, total = await tx_service.list_for_user(db, user.id, offset=offset, limit=limit)
    current = await balance_service.get_balance(db, user.id)
    return TransactionPage(items=[tx_out(t) for t in items], total=total, current_balance=current)


@router.get("/summary", response_model=SummaryOut)
async def my_summary(db: AsyncSession = Depends(get_db), user=Depends(require_user)):
    s = await tx_service.summary(db, user.id)
    return SummaryOut(current_balance=s.current_balance, total_credited=s.total_credited, total_debited=s.total_debited)


@router.post("/spend", response_model=SpendResult, status_code=status.HTTP_201_CREATED)
async def spend_coins(payload: SpendRequest, db: AsyncSession = Depends(get_db), user=Depends(require_user)):
    result = await coin_service.spend(
        db,
        user.id,
        payload.amount,
        description=payload.description,
        related_order_id=payload.related_order_id,
    )
    return SpendResult(transaction=tx_out(result.transaction), new_balance=result.new_balance)


@router.post("/topup-requests", response_model=TopupOut, status_code=status.HTTP_201_CREATED)
async def submit_topup(payload: TopupSubmitRequest, db: AsyncSession = Depends(get_db), user=Depends(require_user)):
    req = await topup_service.submit(
        db,
        user.id,
        payload.amount,
        receipt_image_ref=payload.receipt_image_ref,
        display_name=payload.display_name,
        note=payload.note,
    )
    return topup_out(req)


@router.get("/topup-requests", response_model=TopupPage)
async def my_topups(
    db: AsyncSession = Depends(get_db),
    user=Depends(require_user),
    offset: int = Query(0, ge=0),
    limit: int = Query(10, ge=1, le=200),
):
    items, total = await topup_service.list_for_user(db, user.id, offset=offset, limit=limit)
    return TopupPage(items=[topup_out(r) for r in items], total=total)
