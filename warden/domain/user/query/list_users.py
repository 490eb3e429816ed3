"""ListUsers query and handler."""

from warden.domain.auth.model.identity import Identity
from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.authorization.role import RoleName
from warden.domain.shared.query import Query, QueryHandler
from warden.domain.shared.query import Result as QueryResult
from warden.domain.user.query.get_user import UserDTO
from warden.domain.user.service.user import UserService


class ListUsers(Query):
    role: str | None = None


class ListUsersResult(QueryResult):
    users: list[UserDTO]


class ListUsersHandler(QueryHandler[ListUsers, ListUsersResult]):
    __auth__ = requires(PermissionKind.READ)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    user_service: UserService

    async def run(self, cmd: ListUsers) -> ListUsersResult:
        role = str(RoleName.parse(cmd.role)) if cmd.role else None
        users = await self.user_service.list(role=role)
        return ListUsersResult(users=[UserDTO.from_user(u) for u in users])
