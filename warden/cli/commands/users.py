"""User commands."""

import asyncio
import sys

import cyclopts

from warden.cli.console import get_console
from warden.cli.uow import unit_of_work
from warden.domain.auth.service.authorization import AuthorizationService
from warden.domain.shared.authorization.role import RoleName
from warden.domain.shared.error import DomainError
from warden.domain.user.service.user import UserService

app = cyclopts.App(name="users", help="Manage users")

BOOTSTRAP_ROLE = "super_admin"


@app.command
def bootstrap(
    username: str,
    *,
    email: str,
    firstname: str,
    lastname: str,
    phone: str,
) -> None:
    """Create a user and grant them super_admin.

    Use this once on a fresh install; afterwards manage roles through the API.
    """
    console = get_console()

    async def _run() -> str:
        async with unit_of_work() as uow:
            users = await uow.get(UserService)
            authz = await uow.get(AuthorizationService)
            user = await users.create(
                username=username,
                firstname=firstname,
                lastname=lastname,
                phone=phone,
                email=email,
            )
            await authz.assign_role(user.id, RoleName(BOOTSTRAP_ROLE), assigned_by=None)
            return str(user.id)

    try:
        user_id = asyncio.run(_run())
    except DomainError as e:
        console.error(e.message, hint=f"code: {e.code}")
        sys.exit(1)

    console.success(f"Created {username} ({user_id}) with role {BOOTSTRAP_ROLE}")
