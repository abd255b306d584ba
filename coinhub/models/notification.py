from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Boolean, DateTime, Enum, Index, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from coinhub.core.db import Base
from coinhub.models.common import utcnow


class NotificationKind(str, enum.Enum):
    topup_request = "topup_request"
    coin_redeem = "coin_redeem"


class AdminNotification(Base):
    __tablename__ = "admin_notifications"
    __table_args__ = (Index("ix_admin_notifications_is_read_id", "is_read", "id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    kind: Mapped[NotificationKind] = mapped_column(Enum(NotificationKind), index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(String(1024), nullable=False)

    # Shape depends on kind, see schemas.notification. Ids inside are lookup-only references.
    payload: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)

    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
