from warden.domain.shared.authorization.evaluator import AccessPolicyEvaluator, Decision
from warden.domain.shared.authorization.gate import authenticated, public, requires
from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.authorization.policy_table import (
    CANONICAL_ROLE_NAMES,
    CANONICAL_ROLES,
    DEFAULT_POLICY_TABLE,
    PolicyTable,
)
from warden.domain.shared.authorization.role import RoleDefinition, RoleName

__all__ = [
    "AccessPolicyEvaluator",
    "CANONICAL_ROLES",
    "CANONICAL_ROLE_NAMES",
    "DEFAULT_POLICY_TABLE",
    "Decision",
    "PermissionKind",
    "PolicyTable",
    "RoleDefinition",
    "RoleName",
    "authenticated",
    "public",
    "requires",
]
