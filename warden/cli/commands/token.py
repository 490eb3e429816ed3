"""Token commands."""

import asyncio
import sys

import cyclopts

from warden.cli.console import get_console
from warden.cli.uow import unit_of_work
from warden.config import Config
from warden.domain.auth.service.token import TokenService
from warden.domain.user.port.repository import UserRepository

app = cyclopts.App(name="token", help="Issue access tokens")


@app.command
def issue(username: str) -> None:
    """Print an access token for an existing user."""
    console = get_console()
    config = Config()  # type: ignore[call-arg]
    if not config.auth.jwt.secret:
        console.error(
            "No JWT secret configured",
            hint="Set WARDEN_AUTH__JWT__SECRET to the secret the server uses.",
        )
        sys.exit(1)

    async def _run() -> str | None:
        async with unit_of_work(config) as uow:
            user = await (await uow.get(UserRepository)).get_by_username(username)
            if user is None:
                return None
            tokens = await uow.get(TokenService)
            return tokens.create_access_token(user.id, user.username)

    token = asyncio.run(_run())
    if token is None:
        console.error(f"No user named {username!r}")
        sys.exit(1)

    console.print(token, soft_wrap=True)
