"""Shared repository plumbing."""
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

logger = logging.getLogger(__name__)


class BaseRepository:
    """Wraps an AsyncSession. Every write is its own commit."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _commit(self):
        """Commit, rolling the session back on failure so it stays usable."""
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            logger.debug(f"Rolling back after failed commit: {type(e).__name__}")
            await self.session.rollback()
            raise
