"""AccessPolicyEvaluator: decides whether a set of roles grants a permission."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from warden.domain.shared.authorization.permission import PermissionKind
from warden.domain.shared.authorization.policy_table import DEFAULT_POLICY_TABLE, PolicyTable
from warden.domain.shared.authorization.role import RoleDefinition, RoleName

if TYPE_CHECKING:
    from warden.domain.auth.model.identity import Identity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Decision:
    """Outcome of one evaluation."""

    allowed: bool
    kind: PermissionKind
    highest_role: RoleDefinition | None


class AccessPolicyEvaluator:
    """Stateless evaluator over an immutable PolicyTable.

    ``evaluate`` is pure and never raises. ``guard`` is the request-side wrapper
    that logs the outcome and turns a denial into an AuthorizationError.
    """

    def __init__(self, table: PolicyTable = DEFAULT_POLICY_TABLE) -> None:
        self._table = table

    @property
    def table(self) -> PolicyTable:
        return self._table

    def capabilities_of(self, name: str | RoleName) -> RoleDefinition:
        return self._table.capabilities_of(str(name))

    def evaluate(
        self,
        assigned_roles: Iterable[str | RoleName],
        kind: PermissionKind,
    ) -> Decision:
        records = [self._table.capabilities_of(str(r)) for r in set(map(str, assigned_roles))]
        allowed = any(r.grants(kind) for r in records)
        highest = max(records, key=lambda r: (r.level, r.name)) if records else None
        return Decision(allowed=allowed, kind=kind, highest_role=highest)

    def permissions_for(
        self, assigned_roles: Iterable[str | RoleName]
    ) -> dict[PermissionKind, bool]:
        roles = [str(r) for r in assigned_roles]
        return {kind: self.evaluate(roles, kind).allowed for kind in PermissionKind}

    def guard(self, identity: "Identity | None", kind: PermissionKind) -> Decision:
        """Raise AuthorizationError unless ``identity`` holds ``kind``."""
        from warden.domain.auth.model.principal import Principal
        from warden.domain.shared.error import AuthorizationError

        if not isinstance(identity, Principal):
            logger.warning("Authorization denied: principal=anonymous kind=%s", kind)
            raise AuthorizationError("Authentication required", code="missing_token")

        decision = self.evaluate(identity.roles, kind)
        if decision.allowed:
            logger.info(
                "Authorization allowed: principal=%s kind=%s",
                identity.user_id,
                kind,
            )
            return decision

        logger.warning(
            "Authorization denied: principal=%s kind=%s roles=%s",
            identity.user_id,
            kind,
            sorted(identity.roles),
        )
        raise AuthorizationError(f"Access denied: {kind} permission required", code="access_denied")
