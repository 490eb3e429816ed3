"""DI provider for activity log domain."""

from dishka import provide

from warden.domain.activity.command.manage_log import (
    BulkDeleteActivityLogsHandler,
    CreateActivityLogHandler,
    DeleteActivityLogHandler,
    PatchActivityLogHandler,
    ReplaceActivityLogHandler,
)
from warden.domain.activity.port.repository import ActivityLogRepository
from warden.domain.activity.query.list_logs import (
    GetActivityLogHandler,
    GetActivityStatsHandler,
    ListActivityLogsHandler,
)
from warden.domain.activity.service.activity import ActivityLogService
from warden.util.di.base import Provider
from warden.util.di.scope import Scope


class ActivityProvider(Provider):
    create_log_handler = provide(CreateActivityLogHandler, scope=Scope.UOW)
    replace_log_handler = provide(ReplaceActivityLogHandler, scope=Scope.UOW)
    patch_log_handler = provide(PatchActivityLogHandler, scope=Scope.UOW)
    delete_log_handler = provide(DeleteActivityLogHandler, scope=Scope.UOW)
    bulk_delete_handler = provide(BulkDeleteActivityLogsHandler, scope=Scope.UOW)
    get_log_handler = provide(GetActivityLogHandler, scope=Scope.UOW)
    list_logs_handler = provide(ListActivityLogsHandler, scope=Scope.UOW)
    stats_handler = provide(GetActivityStatsHandler, scope=Scope.UOW)

    @provide(scope=Scope.UOW)
    def get_activity_service(self, log_repo: ActivityLogRepository) -> ActivityLogService:
        return ActivityLogService(_log_repo=log_repo)
