from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from coinhub.core.db import get_db
from coinhub.api.deps import require_admin
from coinhub.api.v1.serializers import tx_out, user_summary
from coinhub.schemas.coins import AdjustRequest, AdjustmentResult, EarnRequest
from coinhub.services import coins as coin_service
from coinhub.services.coins import LedgerResult

router = APIRouter()


def _to_out(result: LedgerResult) -> AdjustmentResult:
    return AdjustmentResult(
        transaction=tx_out(result.transaction),
        new_balance=result.new_balance,
        target_user=user_summary(result.user),
    )


@router.post("/credit", response_model=AdjustmentResult, status_code=status.HTTP_201_CREATED)
async def credit_user(payload: AdjustRequest, db: AsyncSession = Depends(get_db), admin=Depends(require_admin)):
    result = await coin_service.admin_credit(db, payload.target_user_id, payload.amount, payload.description)
    return _to_out(result)


@router.post("/debit", response_model=AdjustmentResult, status_code=status.HTTP_201_CREATED)
async def debit_user(payload: AdjustRequest, db: AsyncSession = Depends(get_db), admin=Depends(require_admin)):
    result = await coin_service.admin_debit(db, payload.target_user_id, payload.amount, payload.description)
    return _to_out(result)


@router.post("/earn", response_model=AdjustmentResult, status_code=status.HTTP_201_CREATED)
async def award_user(payload: EarnRequest, db: AsyncSession = Depends(get_db), admin=Depends(require_admin)):
    result = await coin_service.earn(
        db,
        payload.target_user_id,
        payload.amount,
        description=payload.description,
        related_order_id=payload.related_order_id,
    )
    return _to_out(result)
