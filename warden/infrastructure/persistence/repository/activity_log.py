"""SQL implementation of ActivityLogRepository."""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.activity.model.activity_log import ActivityLog, ActivityLogId, Severity
from warden.domain.activity.model.query import ActivityLogFilter, PageRequest, SortOrder
from warden.domain.activity.port.repository import ActivityLogRepository
from warden.domain.shared.model.value import to_utc
from warden.infrastructure.persistence.tables import activity_logs_table

_t = activity_logs_table


def _row_to_log(row: dict) -> ActivityLog:
    return ActivityLog(
        id=ActivityLogId(UUID(row["id"])),
        user=row["user"],
        action=row["action"],
        details=row["details"],
        severity=Severity(row["severity"]),
        timestamp=to_utc(row["timestamp"]),
        created_at=to_utc(row["created_at"]),
        updated_at=to_utc(row["updated_at"]),
    )


def _log_to_dict(log: ActivityLog) -> dict:
    return {
        "id": str(log.id),
        "user": log.user,
        "action": log.action,
        "details": log.details,
        "severity": log.severity.value,
        "timestamp": log.timestamp,
        "created_at": log.created_at,
        "updated_at": log.updated_at,
    }


def _conditions(criteria: ActivityLogFilter) -> list:
    conds = []
    if criteria.user:
        conds.append(_t.c.user.contains(criteria.user, autoescape=True))
    if criteria.action:
        conds.append(_t.c.action.contains(criteria.action, autoescape=True))
    if criteria.severity:
        conds.append(_t.c.severity == criteria.severity.value)
    if criteria.start:
        conds.append(_t.c.timestamp >= criteria.start)
    if criteria.end:
        conds.append(_t.c.timestamp <= criteria.end)
    return conds


class SqlActivityLogRepository(ActivityLogRepository):
    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get(self, log_id: ActivityLogId) -> ActivityLog | None:
        stmt = select(_t).where(_t.c.id == str(log_id))
        row = (await self.session.execute(stmt)).mappings().first()
        return _row_to_log(dict(row)) if row else None

    async def find(
        self, criteria: ActivityLogFilter, page: PageRequest
    ) -> tuple[list[ActivityLog], int]:
        conds = _conditions(criteria)

        sort_col = _t.c[page.sort_by.value]
        ordering = sort_col.desc() if page.sort_order == SortOrder.DESC else sort_col.asc()
        stmt = (
            select(_t)
            .where(*conds)
            .order_by(ordering, _t.c.id)
            .offset(page.offset)
            .limit(page.limit)
        )
        rows = (await self.session.execute(stmt)).mappings().all()

        count_stmt = select(func.count()).select_from(_t).where(*conds)
        total = (await self.session.execute(count_stmt)).scalar_one()
        return [_row_to_log(dict(row)) for row in rows], total

    async def save(self, log: ActivityLog) -> None:
        values = _log_to_dict(log)
        exists = await self.session.execute(select(_t.c.id).where(_t.c.id == values["id"]))
        if exists.first() is None:
            await self.session.execute(insert(_t).values(**values))
        else:
            await self.session.execute(update(_t).where(_t.c.id == values["id"]).values(**values))
        await self.session.flush()

    async def delete(self, log_id: ActivityLogId) -> bool:
        result = await self.session.execute(delete(_t).where(_t.c.id == str(log_id)))
        await self.session.flush()
        return result.rowcount > 0

    async def delete_many(self, log_ids: list[ActivityLogId]) -> int:
        ids = [str(i) for i in log_ids]
        result = await self.session.execute(delete(_t).where(_t.c.id.in_(ids)))
        await self.session.flush()
        return result.rowcount

    async def count_by_severity(self) -> dict[Severity, int]:
        stmt = select(_t.c.severity, func.count()).group_by(_t.c.severity)
        rows = (await self.session.execute(stmt)).all()
        return {Severity(severity): count for severity, count in rows}
