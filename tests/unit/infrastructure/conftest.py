"""Fixtures for repository tests: a fresh in-memory SQLite database per test."""

import pytest

from app.infrastructure.database.session import build_engine, build_session_factory, create_tables


@pytest.fixture
async def db_engine():
    engine = build_engine("sqlite+aiosqlite://")
    await create_tables(bind=engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(db_engine):
    async with build_session_factory(db_engine)() as session:
        yield session
