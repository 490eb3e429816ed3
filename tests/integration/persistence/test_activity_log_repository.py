"""Integration tests for SqlActivityLogRepository."""

from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from warden.domain.activity.model.activity_log import ActivityLog, ActivityLogId, Severity
from warden.domain.activity.model.query import (
    ActivityLogFilter,
    PageRequest,
    SortField,
    SortOrder,
)
from warden.infrastructure.persistence.repository.activity_log import SqlActivityLogRepository

BASE = datetime(2024, 5, 1, 9, 0, tzinfo=UTC)


async def _seed(repo: SqlActivityLogRepository) -> list[ActivityLog]:
    logs = [
        ActivityLog.create(
            user="jane@example.com",
            action="login",
            details="Signed in",
            severity="info",
            timestamp=BASE,
        ),
        ActivityLog.create(
            user="john@example.com",
            action="deploy",
            details="Released build 42",
            severity="success",
            timestamp=BASE + timedelta(hours=1),
        ),
        ActivityLog.create(
            user="jane@example.com",
            action="deploy_failed",
            details="Build 43 failed",
            severity="error",
            timestamp=BASE + timedelta(hours=2),
        ),
        ActivityLog.create(
            user="system",
            action="100%_cpu",
            details="CPU saturated",
            severity="warning",
            timestamp=BASE + timedelta(hours=3),
        ),
    ]
    for log in logs:
        await repo.save(log)
    return logs


class TestFind:
    @pytest.mark.asyncio
    async def test_default_order_is_newest_first(self, session: AsyncSession) -> None:
        repo = SqlActivityLogRepository(session)
        logs = await _seed(repo)

        items, total = await repo.find(ActivityLogFilter(), PageRequest())

        assert total == 4
        assert [i.id for i in items] == [log.id for log in reversed(logs)]
        assert items[0].timestamp.tzinfo is not None

    @pytest.mark.asyncio
    async def test_substring_filters(self, session: AsyncSession) -> None:
        repo = SqlActivityLogRepository(session)
        await _seed(repo)

        items, total = await repo.find(
            ActivityLogFilter(user="jane", action="deploy"), PageRequest()
        )
        assert total == 1
        assert items[0].action == "deploy_failed"

    @pytest.mark.asyncio
    async def test_wildcards_are_literal(self, session: AsyncSession) -> None:
        repo = SqlActivityLogRepository(session)
        await _seed(repo)

        _, total = await repo.find(ActivityLogFilter(action="%"), PageRequest())
        assert total == 1

    @pytest.mark.asyncio
    async def test_severity_and_date_range(self, session: AsyncSession) -> None:
        repo = SqlActivityLogRepository(session)
        await _seed(repo)

        _, errors = await repo.find(ActivityLogFilter(severity=Severity.ERROR), PageRequest())
        assert errors == 1

        items, total = await repo.find(
            ActivityLogFilter(start=BASE + timedelta(hours=1), end=BASE + timedelta(hours=2)),
            PageRequest(),
        )
        assert total == 2
        assert {i.action for i in items} == {"deploy", "deploy_failed"}

    @pytest.mark.asyncio
    async def test_paging_and_sorting(self, session: AsyncSession) -> None:
        repo = SqlActivityLogRepository(session)
        await _seed(repo)

        page = PageRequest(page=2, limit=3, sort_by=SortField.ACTION, sort_order=SortOrder.ASC)
        items, total = await repo.find(ActivityLogFilter(), page)

        assert total == 4
        assert [i.action for i in items] == ["login"]


class TestWrites:
    @pytest.mark.asyncio
    async def test_update_and_delete(self, session: AsyncSession) -> None:
        repo = SqlActivityLogRepository(session)
        logs = await _seed(repo)

        logs[0].apply({"severity": "warning"})
        await repo.save(logs[0])
        fetched = await repo.get(logs[0].id)
        assert fetched is not None
        assert fetched.severity is Severity.WARNING

        assert await repo.delete(logs[0].id) is True
        assert await repo.get(logs[0].id) is None

    @pytest.mark.asyncio
    async def test_delete_many_ignores_unknown_ids(self, session: AsyncSession) -> None:
        repo = SqlActivityLogRepository(session)
        logs = await _seed(repo)

        deleted = await repo.delete_many([logs[0].id, logs[1].id, ActivityLogId.generate()])

        assert deleted == 2
        _, total = await repo.find(ActivityLogFilter(), PageRequest())
        assert total == 2

    @pytest.mark.asyncio
    async def test_count_by_severity(self, session: AsyncSession) -> None:
        repo = SqlActivityLogRepository(session)
        await _seed(repo)

        assert await repo.count_by_severity() == {
            Severity.INFO: 1,
            Severity.SUCCESS: 1,
            Severity.ERROR: 1,
            Severity.WARNING: 1,
        }
