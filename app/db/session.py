"""
Database Session Management

This module handles async database connections using SQLAlchemy's async engine.
The adapter for the configured DATABASE_URL decides pooling and connect
arguments; the rest of the code only sees sessions.

Key Features:
- Database abstraction: SQLite by default, PostgreSQL by URL
- Async session management: one session per request
- Error handling: automatic rollback on exceptions
"""

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession as SQLModelAsyncSession

from app.core.setting import settings
from app.db.factory import get_database_adapter

logger = logging.getLogger(__name__)

db_adapter = get_database_adapter(settings.DATABASE_URL)

# Engine creation is lazy at the driver level: no connection is opened
# until the first session executes a statement.
engine = db_adapter.create_engine(settings.DATABASE_URL)

async_session_maker = async_sessionmaker(
    engine,
    class_=SQLModelAsyncSession,
    expire_on_commit=False,  # Prevents SQLAlchemy from expiring objects after commit
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Dependency function for FastAPI to get database session.

    - Creates a new async session
    - Yields it to the endpoint
    - Commits on success, rolls back on exception
    - Closes the session (context manager handles it)
    """
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create missing tables for the configured backend."""
    logger.info("Creating missing tables on %s", db_adapter.get_dialect_name())
    await db_adapter.create_schema(engine)


async def dispose_engine() -> None:
    """Close pooled connections on shutdown."""
    await engine.dispose()
