from typing import AsyncIterable

from dishka import from_context, provide
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from warden.config import Config
from warden.domain.activity.port.repository import ActivityLogRepository
from warden.domain.user.port.repository import UserRepository
from warden.infrastructure.persistence.database import create_db_engine, create_session_factory
from warden.infrastructure.persistence.repository.activity_log import SqlActivityLogRepository
from warden.infrastructure.persistence.repository.user import SqlUserRepository
from warden.util.di.base import Provider
from warden.util.di.scope import Scope


class PersistenceProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)

    # APP-scoped factories
    @provide(scope=Scope.APP)
    async def get_engine(self, config: Config) -> AsyncIterable[AsyncEngine]:
        engine = create_db_engine(config)
        yield engine
        await engine.dispose()

    @provide(scope=Scope.APP)
    def get_session_factory(self, engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
        return create_session_factory(engine)

    # UOW-scoped session (one per unit of work)
    @provide(scope=Scope.UOW)
    async def get_session(
        self, session_factory: async_sessionmaker[AsyncSession]
    ) -> AsyncIterable[AsyncSession]:
        async with session_factory() as session:
            yield session
            await session.commit()

    # UOW-scoped repositories
    user_repo = provide(SqlUserRepository, scope=Scope.UOW, provides=UserRepository)
    activity_log_repo = provide(
        SqlActivityLogRepository, scope=Scope.UOW, provides=ActivityLogRepository
    )
