"""Fixtures for SQLite integration tests: a fresh database file per test."""

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine

from warden.config import Config, DatabaseConfig
from warden.domain.shared.authorization.policy_table import DEFAULT_POLICY_TABLE
from warden.infrastructure.persistence.database import (
    create_db_engine,
    create_schema,
    create_session_factory,
)
from warden.infrastructure.persistence.seed import ensure_policy_roles


@pytest.fixture
def db_config(tmp_path) -> Config:
    return Config(database=DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path}/warden-test.db"))


@pytest_asyncio.fixture
async def engine(db_config: Config):
    engine = create_db_engine(db_config)
    await create_schema(engine)
    await ensure_policy_roles(engine, DEFAULT_POLICY_TABLE)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine):
    factory = create_session_factory(engine)
    async with factory() as session:
        yield session
        await session.rollback()
