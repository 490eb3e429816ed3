"""CheckAccess: what may the current caller do?"""

from warden.domain.auth.model.identity import Identity
from warden.domain.auth.model.principal import Principal
from warden.domain.auth.query.list_roles import RoleDTO
from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator
from warden.domain.shared.authorization.gate import authenticated
from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.query import Query, QueryHandler
from warden.domain.shared.query import Result as QueryResult


class CheckAccess(Query):
    pass


class CheckAccessResult(QueryResult):
    user_id: str
    username: str
    roles: list[str]
    permissions: dict[PermissionKind, bool]
    role_details: list[RoleDTO]
    highest_role: RoleDTO | None


class CheckAccessHandler(QueryHandler[CheckAccess, CheckAccessResult]):
    __auth__ = authenticated()
    identity: Identity
    evaluator: AccessPolicyEvaluator

    async def run(self, cmd: CheckAccess) -> CheckAccessResult:
        principal = self.identity
        assert isinstance(principal, Principal)

        roles = sorted(principal.roles)
        decision = self.evaluator.evaluate(roles, PermissionKind.READ)
        details = sorted(
            (self.evaluator.capabilities_of(r) for r in roles),
            key=lambda d: (-d.level, d.name),
        )
        return CheckAccessResult(
            user_id=str(principal.user_id),
            username=principal.username,
            roles=roles,
            permissions=self.evaluator.permissions_for(roles),
            role_details=[RoleDTO.from_definition(d) for d in details],
            highest_role=(
                RoleDTO.from_definition(decision.highest_role) if decision.highest_role else None
            ),
        )
