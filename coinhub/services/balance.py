"""Balance store: the ``users.balance`` column.

Both mutations are a single conditional ``UPDATE ... RETURNING`` so the read,
the check and the write happen atomically in the database. They never commit;
the caller pairs them with a transaction-log row in the same unit of work.
"""
from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from coinhub.models.user import User
from coinhub.services.errors import InsufficientBalance, NotFound, ValidationError, require_positive

# Upper bound of the BIGINT balance column.
MAX_BALANCE = 2**63 - 1


async def get_balance(db: AsyncSession, user_id: int) -> int:
    q = await db.execute(select(User.balance).where(User.id == user_id))
    balance = q.scalar_one_or_none()
    if balance is None:
        raise NotFound("User not found", user_id=user_id)
    return int(balance)


async def credit(db: AsyncSession, user_id: int, amount: int) -> int:
    require_positive(amount)
    q = await db.execute(
        update(User)
        .where(User.id == user_id, User.balance <= MAX_BALANCE - amount)
        .values(balance=User.balance + amount)
        .returning(User.balance)
        .execution_options(synchronize_session=False)
    )
    new_balance = q.scalar_one_or_none()
    if new_balance is not None:
        return int(new_balance)

    current = await get_balance(db, user_id)
    raise ValidationError(
        "Balance would exceed the maximum allowed",
        current_balance=current,
        requested=amount,
    )


async def debit(db: AsyncSession, user_id: int, amount: int) -> int:
    require_positive(amount)
    q = await db.execute(
        update(User)
        .where(User.id == user_id, User.balance >= amount)
        .values(balance=User.balance - amount)
        .returning(User.balance)
        .execution_options(synchronize_session=False)
    )
    new_balance = q.scalar_one_or_none()
    if new_balance is not None:
        return int(new_balance)

    # Nothing matched: either the user is gone or the balance is too low.
    current = await get_balance(db, user_id)
    raise InsufficientBalance(
        f"Insufficient balance (current balance: {current} coins)",
        current_balance=current,
        requested=amount,
    )
