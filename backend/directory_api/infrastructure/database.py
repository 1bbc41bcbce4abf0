"""Database Session Manager — bounded async connection pool with error mapping and health checks.

Invariants:
    - One session per store call: acquired on enter, released on exit, error or cancellation
    - Connection pool is bounded (pool_size + max_overflow), pre-pinged, and recycled
    - SQLAlchemy exceptions never escape: connectivity failures ⇒ StoreUnavailableError,
      everything else (bad SQL, missing table, constraint) ⇒ InternalQueryError
    - asyncio.CancelledError is never caught here — it propagates after close()

Design Decisions:
    - Explicit handle, not a module singleton: created in the FastAPI lifespan,
      stored on app.state, disposed at shutdown, passed to SqlProfileStore
    - One constructor for both a URL and a ready engine, so the session
      factory is configured in exactly one place
    - OperationalError alone does not mean "unavailable": SQLite raises it for
      "no such table". Connectivity is decided by invalidation, the driver
      error type, the SQLSTATE class (08 connection, 53300 too many
      connections, 57P admin shutdown), or SQLite failing to open the file
    - close() without explicit rollback: sessions here only read, and close()
      returns the connection with its transaction rolled back
    - expire_on_commit=False: prevents lazy-load issues in async context
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, DisconnectionError, InterfaceError, SQLAlchemyError,
    TimeoutError as PoolTimeoutError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from directory_api.core.errors import InternalQueryError, StoreUnavailableError

logger = logging.getLogger(__name__)

_UNAVAILABLE = (InterfaceError, DisconnectionError, PoolTimeoutError, OSError)
_CONNECTION_SQLSTATES = ("08", "53300", "57P")


def is_connectivity_failure(exc: BaseException) -> bool:
    """True when the database could not be reached, as opposed to rejecting the statement."""
    if isinstance(exc, _UNAVAILABLE):
        return True
    if not isinstance(exc, DBAPIError):
        return False
    if exc.connection_invalidated:
        return True
    orig = exc.orig
    if isinstance(orig, OSError):
        return True
    if getattr(orig, "sqlite_errorname", None) == "SQLITE_CANTOPEN":
        return True
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return isinstance(sqlstate, str) and sqlstate.startswith(_CONNECTION_SQLSTATES)


class DatabaseSessionManager:
    """Owns the engine/pool and hands out short-lived read sessions."""

    def __init__(
        self,
        database_url: str | None = None,
        pool_size: int = 20,
        max_overflow: int = 10,
        pool_recycle: int = 1800,
        pool_timeout: int = 10,
        *,
        engine: AsyncEngine | None = None,
    ):
        if engine is None:
            if not database_url:
                raise ValueError("database_url or engine is required")
            engine_kwargs: dict = {"pool_pre_ping": True}
            if not database_url.startswith("sqlite"):
                engine_kwargs.update(
                    pool_size=pool_size,
                    max_overflow=max_overflow,
                    pool_recycle=pool_recycle,
                    pool_timeout=pool_timeout,
                )
            engine = create_async_engine(database_url, **engine_kwargs)
        self.engine: AsyncEngine = engine
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_engine(cls, engine: AsyncEngine) -> "DatabaseSessionManager":
        """Wrap an existing engine (tests, embedding in another app)."""
        return cls(engine=engine)

    @property
    def dialect_name(self) -> str:
        return self.engine.dialect.name

    @asynccontextmanager
    async def session(
        self, operation: str = "query",
    ) -> AsyncGenerator[AsyncSession, None]:
        """Provide a session; map driver failures onto the domain error taxonomy."""
        session = self._session_factory()
        try:
            yield session
        except (SQLAlchemyError, OSError) as e:
            if is_connectivity_failure(e):
                logger.error(
                    f"DB unavailable during {operation}: {e}",
                    extra={"error_code": "STORE_UNAVAILABLE"},
                )
                raise StoreUnavailableError(operation) from e
            logger.error(
                f"DB error during {operation}: {e}",
                extra={"error_code": "INTERNAL_ERROR"},
            )
            raise InternalQueryError(str(e), operation) from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for the readiness endpoint)."""
        try:
            async with self.session("health_check") as db:
                await db.execute(text("SELECT 1"))
            return True
        except (StoreUnavailableError, InternalQueryError) as e:
            logger.error(f"DB health check failed: {e.code}")
            return False

    async def dispose(self) -> None:
        """Teardown hook: close every pooled connection."""
        await self.engine.dispose()
