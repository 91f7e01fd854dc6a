from collections.abc import AsyncGenerator
from typing import Any
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from booking.core.config import settings


def to_async_url(database_url: str) -> str:
    """Map a plain postgresql:// URL to asyncpg and drop psycopg-only query params.

    asyncpg does not accept sslmode/channel_binding; SSL is enabled via connect_args instead.
    Other URLs (e.g. sqlite+aiosqlite) pass through untouched.
    """
    parsed = urlparse(database_url)
    if parsed.scheme not in ("postgresql", "postgres", "postgresql+asyncpg"):
        return database_url
    query = parse_qs(parsed.query, keep_blank_values=True)
    query.pop("sslmode", None)
    query.pop("channel_binding", None)
    new_query = urlencode(query, doseq=True)
    return urlunparse(
        ("postgresql+asyncpg", parsed.netloc, parsed.path, parsed.params, new_query, parsed.fragment)
    )


_SYNC_SCHEMES = {
    "postgres": "postgresql",
    "postgresql+asyncpg": "postgresql",
    "sqlite+aiosqlite": "sqlite",
}


def to_sync_url(database_url: str) -> str:
    """URL for the blocking drivers Alembic runs on (psycopg2, pysqlite).

    Query params are kept since psycopg2 understands sslmode.
    """
    scheme, sep, rest = database_url.partition("://")
    if not sep:
        return database_url
    return f"{_SYNC_SCHEMES.get(scheme, scheme)}://{rest}"


def _engine_options(async_url: str) -> dict[str, Any]:
    options: dict[str, Any] = {"echo": settings.env == "development"}
    if async_url.startswith("postgresql+asyncpg"):
        options.update(
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            connect_args={"ssl": True},  # hosted Postgres requires SSL
        )
    return options


async_database_url = to_async_url(settings.database_url)

engine = create_async_engine(async_database_url, **_engine_options(async_database_url))

async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create tables if using create_all; prefer Alembic in production."""
    import booking.models  # noqa: F401 - register tables

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
