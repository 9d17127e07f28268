# hrms/db/database.py
import logging
from typing import AsyncIterator

from fastapi import HTTPException, Request
from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncEngine, AsyncSession
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import DeclarativeBase

from hrms.core import tracing as logger
from hrms.core.config import Settings
from hrms.exceptions.errors import APIError

# Configure logging for SQLAlchemy (ORM logs only)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


class Base(DeclarativeBase):
    """Declarative base for all HRMS tables"""


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured store."""
    if settings.is_sqlite:
        options = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in settings.DATABASE_URL:
            # One shared connection, otherwise every checkout sees an empty database
            options["poolclass"] = StaticPool
        engine = create_async_engine(settings.DATABASE_URL, echo=settings.DB_ECHO, **options)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DB_ECHO,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_pre_ping=True,
        pool_recycle=300,
        connect_args={
            "server_settings": {
                "application_name": "hrms_api"
            },
            "command_timeout": 5,
        }
    )


class Database:
    """Owns the engine and session factory for one application instance."""

    def __init__(self, settings: Settings):
        self.engine = build_engine(settings)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False
        )

    async def create_all(self) -> None:
        """Create all tables with trace-aware logging."""
        # Models must be registered on Base.metadata before create_all
        import hrms.db.models  # noqa: F401

        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables initialized successfully")
        except Exception as e:
            logger.error("Database initialization failed", error=str(e), type=type(e).__name__)
            raise

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def dispose(self) -> None:
        await self.engine.dispose()


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """Async session dependency with trace-aware error logging."""
    database: Database = request.app.state.context.database
    async with database.session_factory() as session:
        try:
            yield session
        except APIError:
            # Expected failures are reported by the exception handlers
            await session.rollback()
            raise
        except Exception as e:
            if isinstance(e, HTTPException):
                logger.error(
                    "Database session error",
                    error=e.detail or str(e),
                    type=type(e).__name__,
                    status_code=e.status_code
                )
            else:
                logger.error(
                    "Database session error",
                    error=str(e),
                    type=type(e).__name__
                )
            await session.rollback()
            raise
