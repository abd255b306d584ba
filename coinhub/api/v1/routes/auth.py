from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from coinhub.core.db import get_db
from coinhub.core.security import verify_password, create_access_token
from coinhub.schemas.auth import LoginRequest, TokenResponse, MeOut
from coinhub.models.user import User, UserStatus
from coinhub.api.deps import get_current_principal
from coinhub.services.errors import Unauthenticated, Unauthorized

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(payload: LoginRequest, db: AsyncSession = Depends(get_db)):
    q = await db.execute(select(User).where(User.email == payload.email.strip().lower()))
    user = q.scalar_one_or_none()
    if not user or not verify_password(payload.password, user.password_hash):
        raise Unauthenticated("Wrong email or password")

    if user.status != UserStatus.active:
        raise Unauthorized("Account is disabled")

    role = (user.role or "user").strip().lower()
    token = create_access_token(user_id=user.id, role=role)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=MeOut)
async def me(principal=Depends(get_current_principal)):
    user, role = principal
    return MeOut(
        id=user.id,
        email=user.email,
        first_name=user.first_name,
        last_name=user.last_name,
        role=role.value,
        status=user.status.value,
        balance=user.balance,
    )
