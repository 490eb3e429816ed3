"""DI provider for user domain."""

from dishka import provide

from warden.domain.auth.port.role_repository import RoleAssignmentRepository
from warden.domain.user.command.manage_user import (
    CreateUserHandler,
    DeleteUserHandler,
    UpdateUserHandler,
)
from warden.domain.user.query.get_user import GetMeHandler, GetUserHandler
from warden.domain.user.query.list_users import ListUsersHandler
from warden.domain.user.port.repository import UserRepository
from warden.domain.user.service.user import UserService
from warden.util.di.base import Provider
from warden.util.di.scope import Scope


class UserProvider(Provider):
    create_user_handler = provide(CreateUserHandler, scope=Scope.UOW)
    update_user_handler = provide(UpdateUserHandler, scope=Scope.UOW)
    delete_user_handler = provide(DeleteUserHandler, scope=Scope.UOW)
    get_user_handler = provide(GetUserHandler, scope=Scope.UOW)
    get_me_handler = provide(GetMeHandler, scope=Scope.UOW)
    list_users_handler = provide(ListUsersHandler, scope=Scope.UOW)

    @provide(scope=Scope.UOW)
    def get_user_service(
        self,
        user_repo: UserRepository,
        assignment_repo: RoleAssignmentRepository,
    ) -> UserService:
        return UserService(_user_repo=user_repo, _assignment_repo=assignment_repo)
