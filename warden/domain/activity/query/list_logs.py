"""Activity log read queries: get, list and stats."""

from datetime import datetime

from pydantic import BaseModel

from warden.domain.activity.model.activity_log import ActivityLogId, Severity
from warden.domain.activity.model.query import (
    DEFAULT_PAGE_SIZE,
    ActivityLogFilter,
    PageRequest,
    SortField,
    SortOrder,
)
from warden.domain.activity.query.dto import ActivityLogDTO
from warden.domain.activity.service.activity import ActivityLogService
from warden.domain.auth.model.identity import Identity
from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.query import Query, QueryHandler
from warden.domain.shared.query import Result as QueryResult


class GetActivityLog(Query):
    id: str


class GetActivityLogResult(QueryResult):
    log: ActivityLogDTO


class GetActivityLogHandler(QueryHandler[GetActivityLog, GetActivityLogResult]):
    __auth__ = requires(PermissionKind.READ)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    activity_service: ActivityLogService

    async def run(self, cmd: GetActivityLog) -> GetActivityLogResult:
        log = await self.activity_service.get(ActivityLogId.parse(cmd.id))
        return GetActivityLogResult(log=ActivityLogDTO.from_log(log))


class ListActivityLogs(Query):
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    user: str | None = None
    action: str | None = None
    severity: Severity | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None
    sort_by: SortField = SortField.TIMESTAMP
    sort_order: SortOrder = SortOrder.DESC


class Pagination(BaseModel):
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next: bool
    has_prev: bool


class ListActivityLogsResult(QueryResult):
    logs: list[ActivityLogDTO]
    pagination: Pagination


class ListActivityLogsHandler(QueryHandler[ListActivityLogs, ListActivityLogsResult]):
    __auth__ = requires(PermissionKind.READ)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    activity_service: ActivityLogService

    async def run(self, cmd: ListActivityLogs) -> ListActivityLogsResult:
        page = await self.activity_service.list(
            ActivityLogFilter(
                user=cmd.user or None,
                action=cmd.action or None,
                severity=cmd.severity,
                start=cmd.start_date,
                end=cmd.end_date,
            ),
            PageRequest(
                page=cmd.page,
                limit=cmd.limit,
                sort_by=cmd.sort_by,
                sort_order=cmd.sort_order,
            ),
        )
        return ListActivityLogsResult(
            logs=[ActivityLogDTO.from_log(log) for log in page.items],
            pagination=Pagination(
                current_page=page.request.page,
                total_pages=page.total_pages,
                total_items=page.total,
                items_per_page=page.request.limit,
                has_next=page.has_next,
                has_prev=page.has_prev,
            ),
        )


class GetActivityStats(Query):
    pass


class ActivityStatsResult(QueryResult):
    total: int
    by_severity: dict[Severity, int]


class GetActivityStatsHandler(QueryHandler[GetActivityStats, ActivityStatsResult]):
    __auth__ = requires(PermissionKind.READ)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    activity_service: ActivityLogService

    async def run(self, cmd: GetActivityStats) -> ActivityStatsResult:
        total, by_severity = await self.activity_service.stats()
        return ActivityStatsResult(total=total, by_severity=by_severity)
