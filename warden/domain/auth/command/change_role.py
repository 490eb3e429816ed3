"""ChangeRole and ClearRoles commands: bulk edits of one user's roles."""

from warden.domain.auth.model.identity import Identity
from warden.domain.auth.model.principal import Principal
from warden.domain.auth.model.value import UserId
from warden.domain.auth.query.get_user_roles import RoleAssignmentDTO
from warden.domain.auth.service.authorization import AuthorizationService
from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.authorization.role import RoleName
from warden.domain.shared.command import Command, CommandHandler, Result

NO_ROLE = "none"


class ChangeRole(Command):
    """Move a user from ``old_role`` to ``new_role``. ``old_role`` may be "none"."""

    user_id: str
    new_role: str
    old_role: str | None = None


class ChangeRoleResult(Result):
    assignment: RoleAssignmentDTO
    old_role: str | None


class ChangeRoleHandler(CommandHandler[ChangeRole, ChangeRoleResult]):
    __auth__ = requires(PermissionKind.MANAGE_ROLES)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    authorization_service: AuthorizationService

    async def run(self, cmd: ChangeRole) -> ChangeRoleResult:
        assert isinstance(self.identity, Principal)

        old_role = None
        if cmd.old_role and cmd.old_role != NO_ROLE:
            old_role = RoleName.parse(cmd.old_role)

        assignment = await self.authorization_service.change_role(
            user_id=UserId.parse(cmd.user_id),
            new_role=RoleName.parse(cmd.new_role),
            old_role=old_role,
            assigned_by=self.identity.user_id,
        )
        return ChangeRoleResult(
            assignment=RoleAssignmentDTO.from_assignment(assignment),
            old_role=str(old_role) if old_role else None,
        )


class ClearRoles(Command):
    user_id: str


class ClearRolesResult(Result):
    user_id: str
    removed_roles: list[str]
    removed_count: int


class ClearRolesHandler(CommandHandler[ClearRoles, ClearRolesResult]):
    __auth__ = requires(PermissionKind.MANAGE_ROLES)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    authorization_service: AuthorizationService

    async def run(self, cmd: ClearRoles) -> ClearRolesResult:
        user_id = UserId.parse(cmd.user_id)
        removed = await self.authorization_service.clear_roles(user_id)
        return ClearRolesResult(
            user_id=str(user_id), removed_roles=removed, removed_count=len(removed)
        )
