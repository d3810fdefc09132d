"""Database configuration and session management"""
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.exc import SQLAlchemyError, IntegrityError, OperationalError
from typing import AsyncGenerator
import logging

from app.config import settings
from app.exceptions import StoreError

logger = logging.getLogger(__name__)


# Create async engine
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DATABASE_ECHO,
    future=True,
)

# Create async session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


class Base(DeclarativeBase):
    """Base class for all database models"""
    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session"""
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except IntegrityError as e:
            logger.warning(f"Database integrity error: {e}")
            await session.rollback()
            raise
        except OperationalError as e:
            logger.error(f"Database operational error: {e}")
            await session.rollback()
            raise
        except SQLAlchemyError as e:
            logger.error(f"Database error: {e}")
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create database tables"""
    # Register every mapped table on Base.metadata
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections"""
    await engine.dispose()


async def commit_or_raise(session: AsyncSession, message: str) -> None:
    """Commit the session, surfacing store failures as StoreError"""
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error(f"{message} {e}")
        raise StoreError(message=message, reason=str(e)) from e
