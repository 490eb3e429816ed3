"""DI provider for auth domain."""

import logging
from uuid import UUID

import jwt
from dishka import from_context, provide
from starlette.requests import Request

from warden.config import Config
from warden.domain.auth.command.assign_role import AssignRoleHandler
from warden.domain.auth.command.change_role import ChangeRoleHandler, ClearRolesHandler
from warden.domain.auth.command.revoke_role import RevokeRoleHandler
from warden.domain.auth.command.role_admin import (
    CreateRoleHandler,
    DeleteRoleHandler,
    RunMaintenanceHandler,
    SetupInitialRolesHandler,
)
from warden.domain.auth.model.identity import Anonymous, Identity
from warden.domain.auth.model.principal import Principal
from warden.domain.auth.model.value import UserId
from warden.domain.auth.port.role_repository import RoleAssignmentRepository, RoleRepository
from warden.domain.auth.query.check_access import CheckAccessHandler
from warden.domain.auth.query.get_user_roles import GetUserRolesHandler
from warden.domain.auth.query.list_roles import (
    GetSystemStatsHandler,
    ListRolesHandler,
    ListUsersWithoutRolesHandler,
)
from warden.domain.auth.service.authorization import AuthorizationService
from warden.domain.auth.service.token import TokenService
from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator
from warden.domain.shared.authorization.policy_table import PolicyTable
from warden.domain.user.port.repository import UserRepository
from warden.util.di.base import Provider
from warden.util.di.scope import Scope

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith(BEARER_PREFIX):
        return None
    return auth_header[len(BEARER_PREFIX) :].strip() or None


class AuthProvider(Provider):
    """DI provider for auth domain services and handlers."""

    request = from_context(provides=Request, scope=Scope.UOW)

    # Command Handlers
    assign_role_handler = provide(AssignRoleHandler, scope=Scope.UOW)
    revoke_role_handler = provide(RevokeRoleHandler, scope=Scope.UOW)
    change_role_handler = provide(ChangeRoleHandler, scope=Scope.UOW)
    clear_roles_handler = provide(ClearRolesHandler, scope=Scope.UOW)
    create_role_handler = provide(CreateRoleHandler, scope=Scope.UOW)
    delete_role_handler = provide(DeleteRoleHandler, scope=Scope.UOW)
    setup_roles_handler = provide(SetupInitialRolesHandler, scope=Scope.UOW)
    maintenance_handler = provide(RunMaintenanceHandler, scope=Scope.UOW)

    # Query Handlers
    get_user_roles_handler = provide(GetUserRolesHandler, scope=Scope.UOW)
    list_roles_handler = provide(ListRolesHandler, scope=Scope.UOW)
    users_without_roles_handler = provide(ListUsersWithoutRolesHandler, scope=Scope.UOW)
    system_stats_handler = provide(GetSystemStatsHandler, scope=Scope.UOW)
    check_access_handler = provide(CheckAccessHandler, scope=Scope.UOW)

    @provide(scope=Scope.APP)
    def get_policy_table(self, config: Config) -> PolicyTable:
        """Build the policy table once and verify every permission is reachable."""
        table = config.policy_table()
        table.validate_coverage()
        logger.info("Policy table loaded: %s", ", ".join(r.name for r in table.roles()))
        return table

    @provide(scope=Scope.APP)
    def get_evaluator(self, table: PolicyTable) -> AccessPolicyEvaluator:
        return AccessPolicyEvaluator(table)

    @provide(scope=Scope.APP)
    def get_token_service(self, config: Config) -> TokenService:
        return TokenService(_config=config.auth.jwt)

    @provide(scope=Scope.UOW)
    def get_authorization_service(
        self,
        config: Config,
        role_repo: RoleRepository,
        assignment_repo: RoleAssignmentRepository,
        user_repo: UserRepository,
        evaluator: AccessPolicyEvaluator,
    ) -> AuthorizationService:
        return AuthorizationService(
            _role_repo=role_repo,
            _assignment_repo=assignment_repo,
            _user_repo=user_repo,
            _evaluator=evaluator,
            _base_role=config.auth.base_role,
        )

    @provide(scope=Scope.UOW)
    async def get_identity(
        self,
        request: Request,
        token_service: TokenService,
        assignment_repo: RoleAssignmentRepository,
    ) -> Identity:
        """Resolve Identity from JWT + role lookup.

        Returns Anonymous for unauthenticated requests, Principal for authenticated.
        Roles are read from the store on every request.
        """
        token = bearer_token(request)
        if token is None:
            return Anonymous()

        try:
            payload = token_service.validate_access_token(token)
            user_id = UserId(UUID(payload["sub"]))
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired access token")
            return Anonymous()
        except (jwt.InvalidTokenError, ValueError):
            logger.warning("Rejected invalid access token")
            return Anonymous()

        assignments = await assignment_repo.get_by_user_id(user_id)
        roles = frozenset(a.role for a in assignments)
        logger.debug("Identity resolved: user_id=%s, roles=%s", user_id, sorted(roles))

        return Principal(
            user_id=user_id,
            username=payload.get("username", ""),
            roles=roles,
        )
