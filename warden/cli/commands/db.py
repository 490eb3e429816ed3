"""Database commands."""

import asyncio

import cyclopts

from warden.cli.console import get_console
from warden.cli.uow import unit_of_work
from warden.config import Config

app = cyclopts.App(name="db", help="Manage the database")


@app.command
def init() -> None:
    """Create missing tables and seed the roles of the policy table."""
    console = get_console()
    config = Config()  # type: ignore[call-arg]

    async def _run() -> None:
        async with unit_of_work(config):
            pass

    asyncio.run(_run())
    console.success(f"Database ready at {config.database.url}")
