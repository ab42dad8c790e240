"""Async engine and request-scoped sessions for the log store."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from vitals.config import settings

_ASYNC_SCHEMES = (
    ("postgres://", "postgresql+asyncpg://"),
    ("postgresql://", "postgresql+asyncpg://"),
)


def normalize_database_url(url: str) -> str:
    """Force the asyncpg driver on plain Postgres URLs (Heroku-style included)."""
    for prefix, replacement in _ASYNC_SCHEMES:
        if url.startswith(prefix):
            return replacement + url[len(prefix):]
    return url


engine = create_async_engine(
    normalize_database_url(settings.database_url),
    pool_pre_ping=True,
    pool_size=settings.db_pool_size,
    echo=settings.db_echo,
)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncSession:  # type: ignore[misc]
    # The engine only reads, so sessions are never committed.
    async with async_session() as session:
        yield session
