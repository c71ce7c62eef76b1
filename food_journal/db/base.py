"""Async SQLAlchemy engine, session factory, and Base declaration."""

from typing import AsyncIterator

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase

from food_journal.core.config import settings
from food_journal.core.exceptions import PersistenceError


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models."""
    pass


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    pool_pre_ping=True,
)

AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: yields an async database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create all tables (idempotent)."""
    # Import models so they register on Base.metadata
    from food_journal import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def commit_or_raise(session: AsyncSession, action: str) -> None:
    """Commit the session, rolling back and raising PersistenceError on failure."""
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        message = str(getattr(e, "orig", None) or e)
        logger.error(f"Failed to {action}: {message}")
        raise PersistenceError(message) from e
