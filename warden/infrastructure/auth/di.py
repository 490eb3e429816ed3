"""DI provider for auth infrastructure."""

from dishka import provide

from warden.domain.auth.port.role_repository import RoleAssignmentRepository, RoleRepository
from warden.infrastructure.auth.role_repository import (
    SqlRoleAssignmentRepository,
    SqlRoleRepository,
)
from warden.util.di.base import Provider
from warden.util.di.scope import Scope


class AuthInfraProvider(Provider):
    """DI provider for auth infrastructure adapters."""

    role_repo = provide(SqlRoleRepository, scope=Scope.UOW, provides=RoleRepository)
    role_assignment_repo = provide(
        SqlRoleAssignmentRepository,
        scope=Scope.UOW,
        provides=RoleAssignmentRepository,
    )
