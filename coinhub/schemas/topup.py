from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from coinhub.core.config import settings
from coinhub.schemas.coins import TransactionOut


class TopupSubmitRequest(BaseModel):
    amount: int = Field(gt=0, le=settings.MAX_COIN_AMOUNT)
    receipt_image_ref: str = Field(min_length=1, max_length=512)
    display_name: str = Field(min_length=1, max_length=128)
    note: Optional[str] = Field(default=None, max_length=2000)


class TopupOut(BaseModel):
    id: int
    user_id: int
    submitted_display_name: str
    amount: int
    receipt_image_ref: str
    status: str
    note: Optional[str] = None
    admin_note: Optional[str] = None
    reviewer_id: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class TopupPage(BaseModel):
    items: List[TopupOut]
    total: int


class UserRef(BaseModel):
    id: int
    name: str
    email: Optional[str] = None


class AdminTopupOut(TopupOut):
    user: Optional[UserRef] = None
    reviewer: Optional[UserRef] = None


class AdminTopupPage(BaseModel):
    items: List[AdminTopupOut]
    total: int


class ProcessTopupRequest(BaseModel):
    action: str = Field(pattern="^(approve|reject)$")
    admin_note: Optional[str] = Field(default=None, max_length=2000)


class ProcessTopupResult(BaseModel):
    request: TopupOut
    transaction: Optional[TransactionOut] = None
    new_balance: Optional[int] = None
