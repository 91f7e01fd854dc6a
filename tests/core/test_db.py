import pytest

from booking.core.db import to_async_url, to_sync_url


def test_to_async_url_maps_postgres_to_asyncpg() -> None:
    url = to_async_url("postgresql://u:p@db.example.com/clinic?sslmode=require&channel_binding=require&app=x")

    assert url == "postgresql+asyncpg://u:p@db.example.com/clinic?app=x"


def test_to_async_url_accepts_short_postgres_scheme() -> None:
    assert to_async_url("postgres://u:p@db/clinic") == "postgresql+asyncpg://u:p@db/clinic"


def test_to_async_url_leaves_sqlite_alone() -> None:
    assert to_async_url("sqlite+aiosqlite:///./clinic.db") == "sqlite+aiosqlite:///./clinic.db"


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("postgres://u:p@db/clinic?sslmode=require", "postgresql://u:p@db/clinic?sslmode=require"),
        ("postgresql+asyncpg://u:p@db/clinic", "postgresql://u:p@db/clinic"),
        ("postgresql://u:p@db/clinic", "postgresql://u:p@db/clinic"),
        ("sqlite+aiosqlite:///./clinic.db", "sqlite:///./clinic.db"),
        ("sqlite:///./clinic.db", "sqlite:///./clinic.db"),
    ],
)
def test_to_sync_url_picks_blocking_driver(url: str, expected: str) -> None:
    assert to_sync_url(url) == expected


def test_datetime_columns_store_naive_wall_clock() -> None:
    from sqlalchemy import DateTime

    from booking.models.appointment import Appointment
    from booking.models.slot import Slot

    for column in (Slot.__table__.c.start_time, Appointment.__table__.c.created_at):
        assert isinstance(column.type, DateTime)
        assert column.type.timezone is False
