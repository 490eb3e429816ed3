"""AssignRole command and handler."""

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


class AssignRole(Command):
    """Command to assign a role to a user."""

    user_id: str  # UUID as string from API
    role: str


class AssignRoleResult(Result):
    assignment: RoleAssignmentDTO


class AssignRoleHandler(CommandHandler[AssignRole, AssignRoleResult]):
    __auth__ = requires(PermissionKind.MANAGE_ROLES)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    authorization_service: AuthorizationService

    async def run(self, cmd: AssignRole) -> AssignRoleResult:
        assert isinstance(self.identity, Principal)  # Guaranteed by __auth__ gate

        assignment = await self.authorization_service.assign_role(
            user_id=UserId.parse(cmd.user_id),
            role=RoleName.parse(cmd.role),
            assigned_by=self.identity.user_id,
        )
        return AssignRoleResult(assignment=RoleAssignmentDTO.from_assignment(assignment))
