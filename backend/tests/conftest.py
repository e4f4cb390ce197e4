"""Test fixtures and configuration."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.config import Settings, get_settings
from src.database import get_engine, get_session
from src.main import app
from src.models.orm import Base, Patient
from src.models.schemas import UserInfo
from src.services.auth_service import ROLE, issue_token

test_engine = create_async_engine("sqlite+aiosqlite://", echo=False)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)

test_settings = Settings(
    _env_file=None,
    auth_username="asha_worker",
    auth_password="password123",
    jwt_secret="test-secret",
)


async def override_get_session() -> AsyncIterator[AsyncSession]:
    async with test_session_factory() as session:
        yield session


app.dependency_overrides[get_session] = override_get_session
app.dependency_overrides[get_settings] = lambda: test_settings
app.dependency_overrides[get_engine] = lambda: test_engine


@pytest.fixture(autouse=True)
async def setup_database() -> AsyncIterator[None]:
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
def settings() -> Settings:
    return test_settings


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def token() -> str:
    return issue_token(UserInfo(username="asha_worker", role=ROLE), test_settings)


@pytest.fixture
def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def seed_patient() -> Patient:
    async with test_session_factory() as session:
        patient = Patient(
            name="Sunita Devi",
            age=27,
            gender="Female",
            village="Rampur",
            health_issue="Antenatal check",
        )
        session.add(patient)
        await session.commit()
        await session.refresh(patient)
        return patient


async def _count_patients() -> int:
    async with test_session_factory() as session:
        result = await session.execute(select(func.count()).select_from(Patient))
        return result.scalar_one()


@pytest.fixture
def patient_count() -> Callable[[], Awaitable[int]]:
    return _count_patients
