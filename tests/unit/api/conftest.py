"""Fixtures for API unit tests: in-memory SQLite store, seeded profiles, signed tokens, AsyncClient."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest
from httpx import ASGITransport, AsyncClient

from app.config.settings import get_settings
from app.infrastructure.database.models import BranchRow, ProfileRow
from app.infrastructure.database.session import (
    build_engine,
    build_session_factory,
    create_tables,
    get_db,
)
from app.main import app

CHROME_WINDOWS = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


@pytest.fixture
async def session_factory():
    engine = build_engine("sqlite+aiosqlite://")
    await create_tables(bind=engine)
    factory = build_session_factory(engine)
    async with factory() as session:
        session.add_all(
            [
                ProfileRow(id="admin-1", full_name="Root Admin", role="super_admin", branch_id=None),
                ProfileRow(id="manager-1", full_name="Maya Lopez", role="branch_manager", branch_id="b-1"),
                ProfileRow(id="manager-2", full_name="Ben Okafor", role="branch_manager", branch_id="b-2"),
                ProfileRow(id="instructor-1", full_name="Tom Reyes", role="instructor", branch_id="b-1"),
                BranchRow(id="b-1", branch_name="Downtown"),
                BranchRow(id="b-2", branch_name="Uptown"),
            ]
        )
        await session.commit()
    yield factory
    await engine.dispose()


@pytest.fixture
def app_with_overrides(session_factory):
    """App with the database session overridden for testing."""

    async def _get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def async_client(app_with_overrides):
    """Async HTTP client for testing; uses overridden app."""
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def make_token(user_id: str, expires_in: timedelta = timedelta(minutes=5)) -> str:
    claims = {"sub": user_id, "exp": datetime.now(timezone.utc) + expires_in}
    return jwt.encode(claims, get_settings().jwt_secret, algorithm="HS256")


def auth_headers(user_id: str, **extra) -> dict:
    headers = {"Authorization": f"Bearer {make_token(user_id)}", "User-Agent": CHROME_WINDOWS}
    headers.update(extra)
    return headers


@pytest.fixture
def admin_headers():
    return auth_headers("admin-1", **{"X-Forwarded-For": "203.0.113.7"})


@pytest.fixture
def manager_headers():
    return auth_headers("manager-1", **{"X-Forwarded-For": "198.51.100.23"})


@pytest.fixture
def headers_for():
    return auth_headers
