from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class TopupRequestPayload(BaseModel):
    kind: Literal["topup_request"] = "topup_request"
    topup_request_id: int
    user_id: int
    user_name: str
    user_email: str
    amount: int
    receipt_image_ref: str


class CoinRedeemPayload(BaseModel):
    kind: Literal["coin_redeem"] = "coin_redeem"
    user_id: int
    user_name: str
    user_email: str
    amount: int
    transaction_id: int


NotificationPayload = Annotated[Union[TopupRequestPayload, CoinRedeemPayload], Field(discriminator="kind")]


class NotificationOut(BaseModel):
    id: int
    kind: str
    title: str
    message: str
    payload: NotificationPayload
    is_read: bool
    created_at: Optional[datetime] = None


class NotificationList(BaseModel):
    items: List[NotificationOut]
    total: int
    unread_count: int


class MarkAllReadResult(BaseModel):
    ok: bool = True
    updated: int
