"""PolicyTable: the single source of truth for what each role may do.

Built once at startup and never mutated. Lookups for names the table does not
know return a zero-capability record instead of failing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.authorization.role import RoleDefinition
from warden.domain.shared.error import ConfigurationError

logger = logging.getLogger(__name__)

UNRECOGNIZED_DESCRIPTION = "Unrecognized role"


def unrecognized_role(name: str) -> RoleDefinition:
    """Zero-capability, level-0 record for a name outside the table."""
    return RoleDefinition.model_construct(
        name=name,
        level=0,
        capabilities=frozenset(),
        description=UNRECOGNIZED_DESCRIPTION,
    )


class PolicyTable:
    """Immutable mapping of role name to RoleDefinition."""

    def __init__(self, roles: Iterable[RoleDefinition]) -> None:
        by_name: dict[str, RoleDefinition] = {}
        for role in roles:
            if role.name in by_name:
                raise ConfigurationError(f"Duplicate role in policy table: {role.name}")
            by_name[role.name] = role
        self._roles: Mapping[str, RoleDefinition] = MappingProxyType(by_name)

    def capabilities_of(self, name: str) -> RoleDefinition:
        return self._roles.get(str(name)) or unrecognized_role(str(name))

    def is_recognized(self, name: str) -> bool:
        return str(name) in self._roles

    @property
    def names(self) -> frozenset[str]:
        return frozenset(self._roles)

    def roles(self) -> list[RoleDefinition]:
        """All defined roles, most privileged first (ties by name)."""
        return sorted(self._roles.values(), key=lambda r: (-r.level, r.name))

    def validate_coverage(self) -> None:
        """Startup check: every PermissionKind is granted by at least one role."""
        covered: set[PermissionKind] = set()
        for role in self._roles.values():
            covered |= role.capabilities
        missing = set(PermissionKind) - covered
        if missing:
            raise ConfigurationError(
                f"Permission kinds granted by no role: {sorted(k.value for k in missing)}"
            )
        logger.debug("Policy table covers all permission kinds (%d roles)", len(self._roles))

    def __len__(self) -> int:
        return len(self._roles)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._roles


_ALL = frozenset(PermissionKind)
_CRUD = frozenset(
    {PermissionKind.CREATE, PermissionKind.READ, PermissionKind.UPDATE, PermissionKind.DELETE}
)

CANONICAL_ROLES: tuple[RoleDefinition, ...] = (
    RoleDefinition(
        name="super_admin",
        level=3,
        capabilities=_ALL,
        description="Full access, including role management",
    ),
    RoleDefinition(
        name="developer",
        level=2,
        capabilities=_CRUD,
        description="Create, read, update and delete",
    ),
    RoleDefinition(
        name="admin",
        level=1,
        capabilities=frozenset({PermissionKind.READ}),
        description="Read-only access",
    ),
)

CANONICAL_ROLE_NAMES: frozenset[str] = frozenset(r.name for r in CANONICAL_ROLES)

DEFAULT_POLICY_TABLE = PolicyTable(CANONICAL_ROLES)
