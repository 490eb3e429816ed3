"""GetUser and GetMe queries."""

from datetime import datetime

from pydantic import BaseModel

from warden.domain.auth.model.identity import Identity
from warden.domain.auth.model.principal import Principal
from warden.domain.auth.model.value import UserId
from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator
from warden.domain.shared.authorization.gate import authenticated, requires
from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.query import Query, QueryHandler
from warden.domain.shared.query import Result as QueryResult
from warden.domain.user.model.user import User
from warden.domain.user.service.user import UserService


class UserDTO(BaseModel):
    id: str
    username: str
    firstname: str
    lastname: str
    phone: str
    email: str
    image_url: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "UserDTO":
        return cls(
            id=str(user.id),
            username=user.username,
            firstname=user.firstname,
            lastname=user.lastname,
            phone=user.phone,
            email=str(user.email),
            image_url=str(user.image_url) if user.image_url else None,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class GetUser(Query):
    user_id: str


class GetUserResult(QueryResult):
    user: UserDTO


class GetUserHandler(QueryHandler[GetUser, GetUserResult]):
    __auth__ = requires(PermissionKind.READ)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    user_service: UserService

    async def run(self, cmd: GetUser) -> GetUserResult:
        user = await self.user_service.get(UserId.parse(cmd.user_id))
        return GetUserResult(user=UserDTO.from_user(user))


class GetMe(Query):
    pass


class GetMeResult(QueryResult):
    user: UserDTO
    roles: list[str]


class GetMeHandler(QueryHandler[GetMe, GetMeResult]):
    __auth__ = authenticated()
    identity: Identity
    user_service: UserService

    async def run(self, cmd: GetMe) -> GetMeResult:
        assert isinstance(self.identity, Principal)

        user = await self.user_service.get(self.identity.user_id)
        return GetMeResult(user=UserDTO.from_user(user), roles=sorted(self.identity.roles))
