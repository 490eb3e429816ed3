"""Read models produced by role administration."""

from dataclasses import dataclass, field
from enum import StrEnum

from warden.domain.auth.model.value import UserId
from warden.domain.shared.authorization.role import RoleDefinition


class MaintenanceAction(StrEnum):
    CLEANUP = "cleanup"
    ASSIGN_DEFAULT_ROLES = "assign_default_roles"
    ALL = "all"


@dataclass(frozen=True)
class RoleSummary:
    """A stored role with its policy definition and current members."""

    definition: RoleDefinition
    recognized: bool
    members: list[UserId]

    @property
    def member_count(self) -> int:
        return len(self.members)


@dataclass(frozen=True)
class RoleShare:
    definition: RoleDefinition
    user_count: int
    percentage: float


@dataclass(frozen=True)
class SystemStats:
    total_users: int
    total_roles: int
    users_without_roles: int
    role_breakdown: list[RoleShare]

    @property
    def active_users(self) -> int:
        return self.total_users - self.users_without_roles

    @property
    def coverage(self) -> float:
        """Percentage of users holding at least one role."""
        if self.total_users == 0:
            return 0.0
        return round(self.active_users / self.total_users * 100, 1)


@dataclass(frozen=True)
class SetupReport:
    required: list[str]
    created: list[str]

    @property
    def already_existed(self) -> list[str]:
        return [r for r in self.required if r not in self.created]


@dataclass
class MaintenanceReport:
    action: MaintenanceAction
    deleted_roles: list[str] = field(default_factory=list)
    assigned_users: list[UserId] = field(default_factory=list)
    default_role: str | None = None
