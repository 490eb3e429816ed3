"""Fixtures for end-to-end API tests against a temporary SQLite database."""

import asyncio
from collections.abc import Callable

import pytest
from fastapi.testclient import TestClient

from warden.application.api.rest.app import create_app
from warden.cli.uow import unit_of_work
from warden.config import Config, DatabaseConfig
from warden.domain.auth.model.value import UserId
from warden.domain.auth.service.authorization import AuthorizationService
from warden.domain.auth.service.token import TokenService
from warden.domain.shared.authorization.role import RoleName
from warden.domain.user.service.user import UserService

Headers = dict[str, str]


@pytest.fixture
def api_config(tmp_path) -> Config:
    return Config(database=DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path}/api.db"))


@pytest.fixture
def make_user(api_config: Config) -> Callable[..., UserId]:
    """Create a user directly in the store, holding the given roles."""

    async def _create(username: str, roles: tuple[str, ...]) -> UserId:
        async with unit_of_work(api_config) as uow:
            users = await uow.get(UserService)
            authz = await uow.get(AuthorizationService)
            user = await users.create(
                username=username,
                firstname=username.capitalize(),
                lastname="Tester",
                phone="+1 555 0100",
                email=f"{username}@example.com",
            )
            for role in roles:
                await authz.assign_role(user.id, RoleName(role), assigned_by=None)
            return user.id

    def make(username: str, *roles: str) -> UserId:
        return asyncio.run(_create(username, roles))

    return make


@pytest.fixture
def auth_headers(api_config: Config) -> Callable[[UserId, str], Headers]:
    tokens = TokenService(_config=api_config.auth.jwt)

    def headers(user_id: UserId, username: str) -> Headers:
        return {"Authorization": f"Bearer {tokens.create_access_token(user_id, username)}"}

    return headers


@pytest.fixture
def as_role(make_user, auth_headers) -> Callable[..., Headers]:
    """Headers for a fresh user holding exactly ``roles``."""
    counter = iter(range(1000))

    def build(*roles: str) -> Headers:
        username = f"{'_'.join(roles) or 'norole'}_{next(counter)}"
        return auth_headers(make_user(username, *roles), username)

    return build


@pytest.fixture
def client(api_config: Config):
    with TestClient(create_app(api_config)) as client:
        yield client
