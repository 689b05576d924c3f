"""Core classes and mixins for DB connections"""

import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Optional, TypeVar, cast
from typing import Callable, AsyncContextManager

from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.orm.exc import StaleDataError

from components.core import config
from components.core.errors import TransactionConflict

logger = logging.getLogger(__name__)

Base = declarative_base()
SessionMaker = Callable[[], AsyncContextManager[AsyncSession]]
T = TypeVar("T")

# Lock and deadlock errors reported by MySQL / SQLite drivers
_RETRYABLE_MARKERS = ("deadlock", "lock wait timeout", "database is locked")


def _is_retryable(exc: Exception) -> bool:
    if isinstance(exc, StaleDataError):
        return True
    if isinstance(exc, OperationalError):
        message = str(exc.orig or exc).lower()
        return any(marker in message for marker in _RETRYABLE_MARKERS)
    return False


class DatabaseManager:
    def __init__(self, engine: Optional[AsyncEngine] = None, settings: Optional[config.Settings] = None) -> None:
        """Initialize DatabaseManager with optional engine for testing."""
        self.settings = settings or config.get_settings()
        self.engine = engine
        self._session_maker: Optional[SessionMaker] = None

    def _create_engine(self) -> AsyncEngine:
        """Create async engine for the configured database."""
        url = self.settings.async_db_url
        if url.startswith("sqlite"):
            return create_async_engine(url, echo=self.settings.DEBUG)
        return create_async_engine(
            url,
            echo=self.settings.DEBUG,
            pool_pre_ping=True,  # Enable connection health checks
            pool_size=5,
            max_overflow=10,
        )

    async def connect(self) -> None:
        """Create the engine if needed and make sure all tables exist."""
        if self.engine is None:
            self.engine = self._create_engine()
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database connected: %s", self.engine.url.render_as_string(hide_password=True))

    async def disconnect(self) -> None:
        """Release every pooled connection."""
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Database disconnected")
        self._session_maker = None

    def get_session(self) -> SessionMaker:
        """Returns SessionMaker for database sessions."""
        if not self.engine:
            raise ValueError("Database engine wasn't initialized")

        if self._session_maker is None:
            self._session_maker = cast(
                SessionMaker,
                sessionmaker(
                    self.engine,
                    class_=AsyncSession,
                    expire_on_commit=False,
                    autocommit=False,
                    autoflush=False,
                ),
            )
        return self._session_maker

    @asynccontextmanager
    async def get_db(self) -> AsyncContextManager[AsyncSession]:
        """Get database session context manager."""
        async_session = self.get_session()
        async with async_session() as session:
            try:
                yield session
            finally:
                await session.close()

    async def run_in_transaction(
        self,
        work: Callable[[AsyncSession], Awaitable[T]],
        max_attempts: Optional[int] = None,
    ) -> T:
        """
        Run ``work`` inside a single database transaction.

        ``work`` receives a fresh session and must do all of its reads and
        writes through it. The transaction commits atomically when ``work``
        returns. Optimistic-lock conflicts roll everything back and the whole
        unit is retried up to ``max_attempts`` times; any other exception
        rolls back and propagates unchanged.
        """
        attempts = max_attempts or self.settings.TRANSACTION_MAX_ATTEMPTS
        async_session = self.get_session()
        last_error: Optional[Exception] = None

        for attempt in range(1, attempts + 1):
            async with async_session() as session:
                try:
                    async with session.begin():
                        result = await work(session)
                except (StaleDataError, OperationalError) as exc:
                    if not _is_retryable(exc):
                        raise
                    last_error = exc
                    logger.warning(
                        "Transaction conflict on attempt %d/%d: %s", attempt, attempts, exc
                    )
                    continue
            return result

        raise TransactionConflict(
            f"Transaction aborted after {attempts} conflicting attempts"
        ) from last_error
