"""Shared test fixtures."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENV", "test")

import httpx  # noqa: E402
import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import booking.models  # noqa: E402,F401 - register tables
from booking.core.db import get_session  # noqa: E402
from booking.core.security import create_doctor_token, create_patient_token  # noqa: E402
from booking.main import app  # noqa: E402
from booking.models.doctor import DoctorCreate  # noqa: E402
from booking.services.auth_service import create_doctor  # noqa: E402

DOCTOR_EMAIL = "doctor@example.com"
DOCTOR_PASSWORD = "s3cret-pass"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    try:
        yield engine
    finally:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.drop_all)
        await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_get_session():
        async with session_maker() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
async def doctor(session):
    doctor = await create_doctor(
        session,
        DoctorCreate(email=DOCTOR_EMAIL, password=DOCTOR_PASSWORD, full_name="Dr. Who"),
    )
    await session.commit()
    return doctor


@pytest.fixture
def doctor_headers(doctor) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_doctor_token(doctor.id)}"}


@pytest.fixture
def patient_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_patient_token('5550123', 'Jane Doe')}"}
