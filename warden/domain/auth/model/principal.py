"""Principal: authenticated identity with roles, resolved per-request."""

from dataclasses import dataclass

from warden.domain.auth.model.identity import Identity
from warden.domain.auth.model.value import UserId


@dataclass(frozen=True)
class Principal(Identity):
    """The authenticated identity of the current requester.

    Resolved per-request from the JWT plus a fresh role lookup. Role names are
    kept as plain strings; names outside the policy table grant nothing.
    """

    user_id: UserId
    username: str
    roles: frozenset[str]

    def has_role(self, name: str) -> bool:
        return name in self.roles
