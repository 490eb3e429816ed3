"""Role administration commands: create, delete, setup and maintenance."""

from datetime import datetime

from warden.domain.auth.model.identity import Identity
from warden.domain.auth.model.principal import Principal
from warden.domain.auth.model.report import MaintenanceAction
from warden.domain.auth.query.list_roles import RoleDTO
from warden.domain.auth.service.authorization import AuthorizationService
from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.authorization.role import RoleName
from warden.domain.shared.command import Command, CommandHandler, Result


class CreateRole(Command):
    name: str


class CreateRoleResult(Result):
    role: RoleDTO
    recognized: bool
    created_at: datetime


class CreateRoleHandler(CommandHandler[CreateRole, CreateRoleResult]):
    __auth__ = requires(PermissionKind.MANAGE_ROLES)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    authorization_service: AuthorizationService

    async def run(self, cmd: CreateRole) -> CreateRoleResult:
        record = await self.authorization_service.create_role(RoleName.parse(cmd.name))
        return CreateRoleResult(
            role=RoleDTO.from_definition(self.evaluator.capabilities_of(record.name)),
            recognized=self.evaluator.table.is_recognized(record.name),
            created_at=record.created_at,
        )


class DeleteRole(Command):
    name: str


class DeleteRoleResult(Result):
    deleted_role: str


class DeleteRoleHandler(CommandHandler[DeleteRole, DeleteRoleResult]):
    __auth__ = requires(PermissionKind.MANAGE_ROLES)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    authorization_service: AuthorizationService

    async def run(self, cmd: DeleteRole) -> DeleteRoleResult:
        name = RoleName.parse(cmd.name)
        await self.authorization_service.delete_role(name)
        return DeleteRoleResult(deleted_role=str(name))


class SetupInitialRoles(Command):
    pass


class SetupInitialRolesResult(Result):
    required_roles: list[str]
    created_roles: list[str]
    already_existed: list[str]


class SetupInitialRolesHandler(CommandHandler[SetupInitialRoles, SetupInitialRolesResult]):
    __auth__ = requires(PermissionKind.MANAGE_ROLES)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    authorization_service: AuthorizationService

    async def run(self, cmd: SetupInitialRoles) -> SetupInitialRolesResult:
        report = await self.authorization_service.setup_initial_roles()
        return SetupInitialRolesResult(
            required_roles=report.required,
            created_roles=report.created,
            already_existed=report.already_existed,
        )


class RunMaintenance(Command):
    action: MaintenanceAction


class RunMaintenanceResult(Result):
    action: MaintenanceAction
    deleted_roles: list[str]
    assigned_users: list[str]
    default_role: str | None


class RunMaintenanceHandler(CommandHandler[RunMaintenance, RunMaintenanceResult]):
    __auth__ = requires(PermissionKind.MANAGE_ROLES)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    authorization_service: AuthorizationService

    async def run(self, cmd: RunMaintenance) -> RunMaintenanceResult:
        assert isinstance(self.identity, Principal)

        report = await self.authorization_service.run_maintenance(
            cmd.action, performed_by=self.identity.user_id
        )
        return RunMaintenanceResult(
            action=report.action,
            deleted_roles=report.deleted_roles,
            assigned_users=[str(u) for u in report.assigned_users],
            default_role=report.default_role,
        )
