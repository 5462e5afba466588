"""Async SQLAlchemy engine and session factory.

One engine (connection pool) per process; each request gets its own
AsyncSession through the get_db dependency. SQLite URLs (used by the
test suite) skip the pool sizing arguments, which its pools reject.
"""

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from toolboard.config import settings

IS_SQLITE = settings.database_url.startswith("sqlite")

_engine_kwargs = {} if IS_SQLITE else {"pool_size": 5, "max_overflow": 15}

engine = create_async_engine(
    settings.database_url,
    echo=settings.debug,
    **_engine_kwargs,
)

# Session factory: each request gets its own session.
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db() -> AsyncSession:
    """FastAPI dependency — yields a session per request, auto-closes."""
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()
