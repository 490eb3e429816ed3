"""Run one unit of work against the configured database outside of HTTP."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dishka import AsyncContainer
from sqlalchemy.ext.asyncio import AsyncEngine

from warden.application.di import create_container
from warden.config import Config
from warden.domain.shared.authorization.policy_table import PolicyTable
from warden.infrastructure.persistence.database import create_schema
from warden.infrastructure.persistence.seed import ensure_policy_roles
from warden.util.di.scope import Scope


@asynccontextmanager
async def unit_of_work(config: Config | None = None) -> AsyncIterator[AsyncContainer]:
    """Yield a UOW-scoped container; its session commits when the block exits cleanly."""
    container = create_container(config)
    try:
        table = await container.get(PolicyTable)
        engine = await container.get(AsyncEngine)
        await create_schema(engine)
        await ensure_policy_roles(engine, table)
        async with container(scope=Scope.UOW) as uow:
            yield uow
    finally:
        await container.close()
