from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings

logger = logging.getLogger(__name__)


class DatabaseUnavailableError(RuntimeError):
    """Raised when the database cannot be reached after all connect attempts."""


class DatabaseClient:
    """Owns the engine; create once at startup and share it through ``app.state``.

    :meth:`connect` builds the engine on first use and retries the initial
    connection with exponential backoff. Later calls reuse the same engine.
    """

    def __init__(
        self,
        database_uri: str,
        connect_retries: int = 3,
        backoff_seconds: float = 0.5,
    ) -> None:
        self._database_uri = database_uri
        self._connect_retries = max(0, connect_retries)
        self._backoff_seconds = backoff_seconds
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> DatabaseClient:
        return cls(
            settings.async_database_uri,
            connect_retries=settings.db_connect_retries,
            backoff_seconds=settings.db_connect_backoff_seconds,
        )

    @property
    def connected(self) -> bool:
        return self._session_factory is not None

    async def connect(self) -> None:
        async with self._lock:
            if self._session_factory is not None:
                return
            engine = create_async_engine(self._database_uri, pool_pre_ping=True)
            attempts = self._connect_retries + 1
            for attempt in range(1, attempts + 1):
                try:
                    async with engine.connect() as connection:
                        await connection.execute(text("SELECT 1"))
                    break
                except (SQLAlchemyError, OSError) as exc:
                    if attempt == attempts:
                        await engine.dispose()
                        raise DatabaseUnavailableError(
                            f"Database unreachable after {attempts} attempts."
                        ) from exc
                    delay = self._backoff_seconds * (2 ** (attempt - 1))
                    logger.warning(
                        "Database connect attempt %s/%s failed: %s; retrying in %.1fs",
                        attempt,
                        attempts,
                        exc,
                        delay,
                    )
                    await asyncio.sleep(delay)
            self._engine = engine
            self._session_factory = async_sessionmaker(engine, expire_on_commit=False)
            logger.info("Database connection established")

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        await self.connect()
        if self._session_factory is None:
            raise DatabaseUnavailableError("Database client is not connected.")
        async with self._session_factory() as session:
            yield session

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_factory = None


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    database: DatabaseClient = request.app.state.database
    async for session in database.session():
        yield session
