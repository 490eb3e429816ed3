"""Activity log service."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

import pydantic

from warden.domain.activity.model.activity_log import ActivityLog, ActivityLogId, Severity
from warden.domain.activity.model.query import (
    MAX_PAGE_SIZE,
    ActivityLogFilter,
    ActivityLogPage,
    PageRequest,
)
from warden.domain.activity.port.repository import ActivityLogRepository
from warden.domain.shared.error import NotFoundError, ValidationError
from warden.domain.shared.model.value import to_utc
from warden.domain.shared.service import Service

logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = frozenset({"user", "action", "details", "severity", "timestamp"})
REQUIRED_FIELDS = ("user", "action", "details", "severity")


class ActivityLogService(Service):
    _log_repo: ActivityLogRepository

    async def create(self, **fields: Any) -> ActivityLog:
        missing = [f for f in REQUIRED_FIELDS if not fields.get(f)]
        if missing:
            raise ValidationError(
                f"Missing required fields: {missing}", code="missing_fields", field=missing[0]
            )
        try:
            log = ActivityLog.create(**fields)
        except pydantic.ValidationError as e:
            raise ValidationError.from_pydantic(e) from e
        await self._log_repo.save(log)
        logger.debug("Activity log created: id=%s action=%s", log.id, log.action)
        return log

    async def get(self, log_id: ActivityLogId) -> ActivityLog:
        log = await self._log_repo.get(log_id)
        if log is None:
            raise NotFoundError(f"Activity log not found: {log_id}", code="activity_log_not_found")
        return log

    async def list(self, criteria: ActivityLogFilter, page: PageRequest) -> ActivityLogPage:
        if page.page < 1:
            raise ValidationError("page must be >= 1", code="invalid_page", field="page")
        if not 1 <= page.limit <= MAX_PAGE_SIZE:
            raise ValidationError(
                f"limit must be between 1 and {MAX_PAGE_SIZE}", code="invalid_limit", field="limit"
            )
        criteria = dataclasses.replace(
            criteria,
            start=to_utc(criteria.start) if criteria.start else None,
            end=to_utc(criteria.end) if criteria.end else None,
        )
        if criteria.start and criteria.end and criteria.start > criteria.end:
            raise ValidationError(
                "start date is after end date", code="invalid_date_range", field="start_date"
            )
        items, total = await self._log_repo.find(criteria, page)
        return ActivityLogPage(items=items, total=total, request=page)

    async def replace(self, log_id: ActivityLogId, **fields: Any) -> ActivityLog:
        """Overwrite every field. ``timestamp`` keeps its old value when omitted."""
        missing = [f for f in REQUIRED_FIELDS if not fields.get(f)]
        if missing:
            raise ValidationError(
                f"Missing required fields: {missing}", code="missing_fields", field=missing[0]
            )
        log = await self.get(log_id)
        changes = {k: v for k, v in fields.items() if v is not None or k != "timestamp"}
        return await self._apply(log, changes)

    async def patch(self, log_id: ActivityLogId, changes: dict[str, Any]) -> ActivityLog:
        if not changes:
            raise ValidationError("At least one field must be provided", code="empty_update")
        unknown = set(changes) - PATCHABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {sorted(unknown)}", code="invalid_update_fields"
            )
        log = await self.get(log_id)
        return await self._apply(log, changes)

    async def _apply(self, log: ActivityLog, changes: dict[str, Any]) -> ActivityLog:
        try:
            log.apply(changes)
        except pydantic.ValidationError as e:
            raise ValidationError.from_pydantic(e) from e
        await self._log_repo.save(log)
        return log

    async def delete(self, log_id: ActivityLogId) -> ActivityLog:
        """Delete a log and return what was removed."""
        log = await self.get(log_id)
        await self._log_repo.delete(log_id)
        logger.info("Activity log deleted: id=%s", log_id)
        return log

    async def delete_many(self, log_ids: list[ActivityLogId]) -> int:
        if not log_ids:
            raise ValidationError("ids must be a non-empty list", code="empty_ids", field="ids")
        deleted = await self._log_repo.delete_many(log_ids)
        logger.info("Activity logs bulk-deleted: requested=%d deleted=%d", len(log_ids), deleted)
        return deleted

    async def stats(self) -> tuple[int, dict[Severity, int]]:
        """Total count and non-zero per-severity counts."""
        counts = await self._log_repo.count_by_severity()
        by_severity = {s: n for s, n in counts.items() if n > 0}
        return sum(by_severity.values()), by_severity
