"""Activity log routes."""

from datetime import datetime

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Query
from pydantic import BaseModel, ConfigDict

from warden.domain.activity.command.manage_log import (
    ActivityLogResult,
    BulkDeleteActivityLogs,
    BulkDeleteActivityLogsHandler,
    BulkDeleteResult,
    CreateActivityLog,
    CreateActivityLogHandler,
    DeleteActivityLog,
    DeleteActivityLogHandler,
    PatchActivityLog,
    PatchActivityLogHandler,
    ReplaceActivityLog,
    ReplaceActivityLogHandler,
)
from warden.domain.activity.model.activity_log import Severity
from warden.domain.activity.model.query import DEFAULT_PAGE_SIZE, SortField, SortOrder
from warden.domain.activity.query.list_logs import (
    ActivityStatsResult,
    GetActivityLog,
    GetActivityLogHandler,
    GetActivityLogResult,
    GetActivityStats,
    GetActivityStatsHandler,
    ListActivityLogs,
    ListActivityLogsHandler,
    ListActivityLogsResult,
)

router = APIRouter(prefix="/activity-logs", tags=["Activity logs"], route_class=DishkaRoute)


class ActivityLogBody(BaseModel):
    user: str
    action: str
    details: str
    severity: str
    timestamp: datetime | None = None


class PatchActivityLogBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user: str | None = None
    action: str | None = None
    details: str | None = None
    severity: str | None = None
    timestamp: datetime | None = None


class BulkDeleteBody(BaseModel):
    ids: list[str]


@router.post("", response_model=ActivityLogResult, status_code=201)
async def create_log(
    body: CreateActivityLog,
    handler: FromDishka[CreateActivityLogHandler],
) -> ActivityLogResult:
    return await handler.run(body)


@router.get("", response_model=ListActivityLogsResult)
async def list_logs(
    handler: FromDishka[ListActivityLogsHandler],
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=100),
    user: str | None = None,
    action: str | None = None,
    severity: Severity | None = None,
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    sort_by: SortField = SortField.TIMESTAMP,
    sort_order: SortOrder = SortOrder.DESC,
) -> ListActivityLogsResult:
    """Filtered, sorted, paginated listing. Text filters match substrings."""
    return await handler.run(
        ListActivityLogs(
            page=page,
            limit=limit,
            user=user,
            action=action,
            severity=severity,
            start_date=start_date,
            end_date=end_date,
            sort_by=sort_by,
            sort_order=sort_order,
        )
    )


@router.get("/stats", response_model=ActivityStatsResult)
async def log_stats(handler: FromDishka[GetActivityStatsHandler]) -> ActivityStatsResult:
    return await handler.run(GetActivityStats())


@router.delete("", response_model=BulkDeleteResult)
async def bulk_delete_logs(
    body: BulkDeleteBody,
    handler: FromDishka[BulkDeleteActivityLogsHandler],
) -> BulkDeleteResult:
    return await handler.run(BulkDeleteActivityLogs(ids=body.ids))


@router.get("/{log_id}", response_model=GetActivityLogResult)
async def get_log(log_id: str, handler: FromDishka[GetActivityLogHandler]) -> GetActivityLogResult:
    return await handler.run(GetActivityLog(id=log_id))


@router.put("/{log_id}", response_model=ActivityLogResult)
async def replace_log(
    log_id: str,
    body: ActivityLogBody,
    handler: FromDishka[ReplaceActivityLogHandler],
) -> ActivityLogResult:
    return await handler.run(ReplaceActivityLog(id=log_id, **body.model_dump()))


@router.patch("/{log_id}", response_model=ActivityLogResult)
async def patch_log(
    log_id: str,
    body: PatchActivityLogBody,
    handler: FromDishka[PatchActivityLogHandler],
) -> ActivityLogResult:
    return await handler.run(PatchActivityLog(id=log_id, **body.model_dump(exclude_unset=True)))


@router.delete("/{log_id}", response_model=ActivityLogResult)
async def delete_log(
    log_id: str,
    handler: FromDishka[DeleteActivityLogHandler],
) -> ActivityLogResult:
    """Delete a log and return the removed record."""
    return await handler.run(DeleteActivityLog(id=log_id))
