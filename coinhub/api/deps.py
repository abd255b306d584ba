"""Request principal resolution.

Failures raise ``Unauthenticated`` / ``Unauthorized`` from ``coinhub.services.errors``
rather than ``HTTPException``; the handlers in ``coinhub.api.errors`` render them
with the same ``detail`` / ``code`` body as every other ledger error.
"""
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from coinhub.core.db import get_db
from coinhub.core.rbac import Role
from coinhub.core.security import decode_access_token
from coinhub.models.user import User, UserStatus
from coinhub.services.errors import Unauthenticated, Unauthorized

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)


async def get_current_principal(
    db: AsyncSession = Depends(get_db),
    token: str | None = Depends(oauth2_scheme),
) -> tuple[User, Role]:
    if not token:
        raise Unauthenticated("Please log in")
    payload = decode_access_token(token)
    if not payload:
        raise Unauthenticated("Invalid token")
    sub = payload.get("sub")
    token_role = payload.get("role")
    if not sub or not token_role:
        raise Unauthenticated("Invalid token")

    try:
        user_id = int(sub)
    except (TypeError, ValueError):
        raise Unauthenticated("Invalid token")

    user = await db.get(User, user_id)
    if not user:
        raise Unauthenticated("User not found")
    if user.status != UserStatus.active:
        raise Unauthorized("Account is disabled")

    # Role is authoritative in the database; the JWT claim is a cache only.
    try:
        db_role = Role((user.role or "user").strip().lower())
    except ValueError:
        db_role = Role.user

    # Tokens issued before a role change stop working.
    if token_role != db_role.value:
        raise Unauthenticated("Invalid token")

    return user, db_role


async def require_user(principal=Depends(get_current_principal)) -> User:
    user, _role = principal
    return user


async def require_admin(principal=Depends(get_current_principal)) -> User:
    user, role = principal
    if role != Role.admin:
        raise Unauthorized("Admin access required")
    return user
