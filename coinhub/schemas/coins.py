from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from coinhub.core.config import settings


class TransactionOut(BaseModel):
    id: int
    user_id: int
    reference_number: Optional[str]
    kind: str
    amount: int
    description: str
    related_order_id: Optional[str] = None
    balance_after: int
    created_at: Optional[datetime] = None


class TransactionPage(BaseModel):
    items: List[TransactionOut]
    total: int
    current_balance: int


class SummaryOut(BaseModel):
    current_balance: int
    total_credited: int
    total_debited: int


class SpendRequest(BaseModel):
    amount: int = Field(gt=0, le=settings.MAX_COIN_AMOUNT)
    description: Optional[str] = Field(default=None, max_length=255)
    related_order_id: Optional[str] = Field(default=None, max_length=64)


class SpendResult(BaseModel):
    transaction: TransactionOut
    new_balance: int


class AdjustRequest(BaseModel):
    target_user_id: int
    amount: int = Field(gt=0, le=settings.MAX_COIN_AMOUNT)
    description: Optional[str] = Field(default=None, max_length=255)


class EarnRequest(AdjustRequest):
    related_order_id: Optional[str] = Field(default=None, max_length=64)


class TargetUserSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    balance: int


class AdjustmentResult(BaseModel):
    transaction: TransactionOut
    new_balance: int
    target_user: TargetUserSummary
