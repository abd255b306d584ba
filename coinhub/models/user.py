from __future__ import annotations

import enum

from sqlalchemy import BigInteger, CheckConstraint, Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from coinhub.core.db import Base
from coinhub.models.common import TimestampMixin


class UserStatus(str, enum.Enum):
    active = "active"
    disabled = "disabled"


class User(Base, TimestampMixin):
    __tablename__ = "users"
    __table_args__ = (CheckConstraint("balance >= 0", name="ck_users_balance_non_negative"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    first_name: Mapped[str] = mapped_column(String(64), nullable=False)
    last_name: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    role: Mapped[str] = mapped_column(String(16), default="user", nullable=False)  # user|admin
    status: Mapped[UserStatus] = mapped_column(Enum(UserStatus), default=UserStatus.active, nullable=False)

    # Written only through coinhub.services.balance (conditional UPDATE).
    balance: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
