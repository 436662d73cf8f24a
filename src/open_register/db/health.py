from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def db_healthcheck(session: AsyncSession) -> bool:
    try:
        await session.execute(text("select 1"))
        return True
    except SQLAlchemyError:
        logger.warning("Local store healthcheck failed", exc_info=True)
        return False
