"""RevokeRole command and handler."""

from warden.domain.auth.model.identity import Identity
from warden.domain.auth.model.value import UserId
from warden.domain.auth.service.authorization import AuthorizationService
from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.authorization.role import RoleName
from warden.domain.shared.command import Command, CommandHandler, Result


class RevokeRole(Command):
    user_id: str
    role: str


class RevokeRoleResult(Result):
    pass


class RevokeRoleHandler(CommandHandler[RevokeRole, RevokeRoleResult]):
    __auth__ = requires(PermissionKind.MANAGE_ROLES)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    authorization_service: AuthorizationService

    async def run(self, cmd: RevokeRole) -> RevokeRoleResult:
        await self.authorization_service.revoke_role(
            user_id=UserId.parse(cmd.user_id),
            role=RoleName.parse(cmd.role),
        )
        return RevokeRoleResult()
