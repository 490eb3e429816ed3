"""User management commands: create, update and delete."""

from pydantic import ConfigDict

from warden.domain.auth.model.identity import Identity
from warden.domain.auth.model.value import UserId
from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator
from warden.domain.shared.authorization.gate import requires
from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.command import Command, CommandHandler, Result
from warden.domain.user.query.get_user import UserDTO
from warden.domain.user.service.user import UserService


class CreateUser(Command):
    username: str
    firstname: str
    lastname: str
    phone: str
    email: str
    image_url: str | None = None


class UserResult(Result):
    user: UserDTO


class CreateUserHandler(CommandHandler[CreateUser, UserResult]):
    __auth__ = requires(PermissionKind.CREATE)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    user_service: UserService

    async def run(self, cmd: CreateUser) -> UserResult:
        user = await self.user_service.create(**cmd.model_dump())
        return UserResult(user=UserDTO.from_user(user))


class UpdateUser(Command):
    """Partial update. Only fields that were explicitly set are applied."""

    model_config = ConfigDict(extra="forbid")

    user_id: str
    username: str | None = None
    firstname: str | None = None
    lastname: str | None = None
    phone: str | None = None
    email: str | None = None
    image_url: str | None = None

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude={"user_id"})


class UpdateUserHandler(CommandHandler[UpdateUser, UserResult]):
    __auth__ = requires(PermissionKind.UPDATE)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    user_service: UserService

    async def run(self, cmd: UpdateUser) -> UserResult:
        user = await self.user_service.update(UserId.parse(cmd.user_id), cmd.changes())
        return UserResult(user=UserDTO.from_user(user))


class DeleteUser(Command):
    user_id: str


class DeleteUserResult(Result):
    deleted_id: str


class DeleteUserHandler(CommandHandler[DeleteUser, DeleteUserResult]):
    __auth__ = requires(PermissionKind.DELETE)
    identity: Identity
    evaluator: AccessPolicyEvaluator
    user_service: UserService

    async def run(self, cmd: DeleteUser) -> DeleteUserResult:
        user_id = UserId.parse(cmd.user_id)
        await self.user_service.delete(user_id)
        return DeleteUserResult(deleted_id=str(user_id))
