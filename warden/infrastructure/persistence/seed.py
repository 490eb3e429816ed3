"""Database seed data for required rows."""

import logging

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncEngine

from warden.domain.shared.authorization.policy_table import PolicyTable
from warden.domain.shared.model.value import utcnow
from warden.infrastructure.persistence.tables import roles_table

logger = logging.getLogger(__name__)


async def ensure_policy_roles(engine: AsyncEngine, table: PolicyTable) -> list[str]:
    """Ensure every role in the policy table has a row. Idempotent.

    Returns the names that were created.
    """
    async with engine.begin() as conn:
        existing = set((await conn.execute(select(roles_table.c.name))).scalars())
        missing = [r.name for r in table.roles() if r.name not in existing]
        if missing:
            now = utcnow()
            await conn.execute(
                insert(roles_table), [{"name": name, "created_at": now} for name in missing]
            )
    if missing:
        logger.info("Seeded roles: %s", ", ".join(missing))
    return missing
