"""GetUserRoles query and handler."""

from datetime import datetime

from pydantic import BaseModel

from warden.domain.auth.model.identity import Identity
from warden.domain.auth.model.role_assignment import RoleAssignment
from warden.domain.auth.model.value import UserId
from warden.domain.auth.service.authorization import AuthorizationService
from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.query import Query, QueryHandler
from warden.domain.shared.query import Result as QueryResult


class GetUserRoles(Query):
    """Query to get all roles assigned to a user."""

    user_id: str  # UUID as string from API


class RoleAssignmentDTO(BaseModel):
    id: str
    user_id: str
    role: str
    assigned_by: str | None
    assigned_at: datetime

    @classmethod
    def from_assignment(cls, a: RoleAssignment) -> "RoleAssignmentDTO":
        return cls(
            id=str(a.id),
            user_id=str(a.user_id),
            role=a.role,
            assigned_by=str(a.assigned_by) if a.assigned_by else None,
            assigned_at=a.assigned_at,
        )


class GetUserRolesResult(QueryResult):
    roles: list[RoleAssignmentDTO]


class GetUserRolesHandler(QueryHandler[GetUserRoles, GetUserRolesResult]):
    __auth__ = requires(PermissionKind.READ)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    authorization_service: AuthorizationService

    async def run(self, cmd: GetUserRoles) -> GetUserRolesResult:
        assignments = await self.authorization_service.list_roles(UserId.parse(cmd.user_id))
        return GetUserRolesResult(
            roles=[RoleAssignmentDTO.from_assignment(a) for a in assignments]
        )
