"""Role listing and statistics queries."""

from datetime import datetime

from pydantic import BaseModel

from warden.domain.auth.model.identity import Identity
from warden.domain.auth.service.authorization import AuthorizationService
from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.authorization.role import RoleDefinition
from warden.domain.shared.model.value import utcnow
from warden.domain.shared.query import Query, QueryHandler
from warden.domain.shared.query import Result as QueryResult
from warden.domain.user.query.get_user import UserDTO


class RoleDTO(BaseModel):
    name: str
    level: int
    capabilities: list[PermissionKind]
    description: str

    @classmethod
    def from_definition(cls, d: RoleDefinition) -> "RoleDTO":
        return cls(
            name=d.name,
            level=d.level,
            capabilities=[k for k in PermissionKind if d.grants(k)],
            description=d.description,
        )


class RoleWithMembersDTO(RoleDTO):
    recognized: bool
    member_count: int
    members: list[str]


class ListRoles(Query):
    pass


class ListRolesResult(QueryResult):
    roles: list[RoleWithMembersDTO]


class ListRolesHandler(QueryHandler[ListRoles, ListRolesResult]):
    __auth__ = requires(PermissionKind.READ)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    authorization_service: AuthorizationService

    async def run(self, cmd: ListRoles) -> ListRolesResult:
        summaries = await self.authorization_service.list_all_roles()
        return ListRolesResult(
            roles=[
                RoleWithMembersDTO(
                    **RoleDTO.from_definition(s.definition).model_dump(),
                    recognized=s.recognized,
                    member_count=s.member_count,
                    members=[str(m) for m in s.members],
                )
                for s in summaries
            ]
        )


class ListUsersWithoutRoles(Query):
    pass


class ListUsersWithoutRolesResult(QueryResult):
    users: list[UserDTO]


class ListUsersWithoutRolesHandler(
    QueryHandler[ListUsersWithoutRoles, ListUsersWithoutRolesResult]
):
    __auth__ = requires(PermissionKind.READ)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    authorization_service: AuthorizationService

    async def run(self, cmd: ListUsersWithoutRoles) -> ListUsersWithoutRolesResult:
        users = await self.authorization_service.users_without_roles()
        return ListUsersWithoutRolesResult(users=[UserDTO.from_user(u) for u in users])


class RoleShareDTO(BaseModel):
    role: RoleDTO
    user_count: int
    percentage: float


class GetSystemStats(Query):
    pass


class SystemStatsResult(QueryResult):
    total_users: int
    total_roles: int
    users_without_roles: int
    active_users: int
    coverage: float
    role_breakdown: list[RoleShareDTO]
    generated_at: datetime


class GetSystemStatsHandler(QueryHandler[GetSystemStats, SystemStatsResult]):
    __auth__ = requires(PermissionKind.READ)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    authorization_service: AuthorizationService

    async def run(self, cmd: GetSystemStats) -> SystemStatsResult:
        stats = await self.authorization_service.system_stats()
        return SystemStatsResult(
            total_users=stats.total_users,
            total_roles=stats.total_roles,
            users_without_roles=stats.users_without_roles,
            active_users=stats.active_users,
            coverage=stats.coverage,
            role_breakdown=[
                RoleShareDTO(
                    role=RoleDTO.from_definition(s.definition),
                    user_count=s.user_count,
                    percentage=s.percentage,
                )
                for s in stats.role_breakdown
            ],
            generated_at=utcnow(),
        )
