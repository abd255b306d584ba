from __future__ import annotations

import logging

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from coinhub.services.errors import StorageFailure

logger = logging.getLogger(__name__)


async def commit(db: AsyncSession) -> None:
    """Commit the unit of work; connection-level failures become StorageFailure."""
    try:
        await db.commit()
    except (OperationalError, InterfaceError) as e:
        await db.rollback()
        logger.error("commit failed err=%s", str(e)[:220])
        raise StorageFailure("Storage is unavailable, please retry.") from e
