"""Activity log write commands."""

from datetime import datetime

from pydantic import ConfigDict

from warden.domain.activity.model.activity_log import ActivityLogId
from warden.domain.activity.query.dto import ActivityLogDTO
from warden.domain.activity.service.activity import ActivityLogService
from warden.domain.auth.model.identity import Identity
from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.command import Command, CommandHandler, Result


class ActivityLogResult(Result):
    log: ActivityLogDTO


class CreateActivityLog(Command):
    user: str
    action: str
    details: str
    severity: str
    timestamp: datetime | None = None


class CreateActivityLogHandler(CommandHandler[CreateActivityLog, ActivityLogResult]):
    __auth__ = requires(PermissionKind.CREATE)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    activity_service: ActivityLogService

    async def run(self, cmd: CreateActivityLog) -> ActivityLogResult:
        log = await self.activity_service.create(**cmd.model_dump())
        return ActivityLogResult(log=ActivityLogDTO.from_log(log))


class ReplaceActivityLog(Command):
    id: str
    user: str
    action: str
    details: str
    severity: str
    timestamp: datetime | None = None


class ReplaceActivityLogHandler(CommandHandler[ReplaceActivityLog, ActivityLogResult]):
    __auth__ = requires(PermissionKind.UPDATE)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    activity_service: ActivityLogService

    async def run(self, cmd: ReplaceActivityLog) -> ActivityLogResult:
        log = await self.activity_service.replace(
            ActivityLogId.parse(cmd.id), **cmd.model_dump(exclude={"id"})
        )
        return ActivityLogResult(log=ActivityLogDTO.from_log(log))


class PatchActivityLog(Command):
    """Partial update. Only fields that were explicitly set are applied."""

    model_config = ConfigDict(extra="forbid")

    id: str
    user: str | None = None
    action: str | None = None
    details: str | None = None
    severity: str | None = None
    timestamp: datetime | None = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"id"})


class PatchActivityLogHandler(CommandHandler[PatchActivityLog, ActivityLogResult]):
    __auth__ = requires(PermissionKind.UPDATE)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    activity_service: ActivityLogService

    async def run(self, cmd: PatchActivityLog) -> ActivityLogResult:
        log = await self.activity_service.patch(ActivityLogId.parse(cmd.id), cmd.changes())
        return ActivityLogResult(log=ActivityLogDTO.from_log(log))


class DeleteActivityLog(Command):
    id: str


class DeleteActivityLogHandler(CommandHandler[DeleteActivityLog, ActivityLogResult]):
    __auth__ = requires(PermissionKind.DELETE)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    activity_service: ActivityLogService

    async def run(self, cmd: DeleteActivityLog) -> ActivityLogResult:
        log = await self.activity_service.delete(ActivityLogId.parse(cmd.id))
        return ActivityLogResult(log=ActivityLogDTO.from_log(log))


class BulkDeleteActivityLogs(Command):
    ids: list[str]


class BulkDeleteResult(Result):
    deleted_count: int


class BulkDeleteActivityLogsHandler(CommandHandler[BulkDeleteActivityLogs, BulkDeleteResult]):
    __auth__ = requires(PermissionKind.DELETE)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    activity_service: ActivityLogService

    async def run(self, cmd: BulkDeleteActivityLogs) -> BulkDeleteResult:
        deleted = await self.activity_service.delete_many(
            [ActivityLogId.parse(i) for i in cmd.ids]
        )
        return BulkDeleteResult(deleted_count=deleted)
