"""Database initialization and ORM setup."""
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy import select, func
import logging

from clusterdeck.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def get_database_url() -> str:
    """Get database URL - SQLite by default, Postgres when DB_DRIVER=postgres."""
    return settings.DATABASE_URL


# Create async engine
engine = create_async_engine(
    get_database_url(),
    echo=False,  # Disable SQL echo to prevent logging
    pool_pre_ping=True,
)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


async def get_db() -> AsyncSession:
    """Dependency for getting async database session."""
    async with AsyncSessionLocal() as session:
        yield session


async def seed_monitoring_tools(session: AsyncSession) -> int:
    """Insert the default monitoring tool catalog if the table is empty.

    Returns the number of tools inserted.
    """
    from clusterdeck.models.external_link import MonitoringTool
    from clusterdeck.utils.catalog import DEFAULT_MONITORING_TOOLS

    count = await session.scalar(select(func.count()).select_from(MonitoringTool))
    if count:
        return 0

    for name, icon in DEFAULT_MONITORING_TOOLS.items():
        session.add(MonitoringTool(name=name, icon=icon, active=True))
    await session.commit()
    return len(DEFAULT_MONITORING_TOOLS)


async def init_db(db_engine=None):
    """Initialize database tables and seed reference data."""
    db_engine = db_engine or engine
    db_type = "PostgreSQL" if db_engine.url.get_backend_name() == "postgresql" else "SQLite"
    logger.info(f"Initializing database: {db_type}")

    try:
        # Import models to register with Base
        import clusterdeck.models  # noqa: F401

        async with db_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        session_factory = sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
        async with session_factory() as session:
            seeded = await seed_monitoring_tools(session)
        if seeded:
            logger.info(f"Seeded {seeded} monitoring tools")
        logger.info(f"Database tables initialized successfully ({db_type})")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        raise
