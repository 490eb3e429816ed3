"""Repository ports for roles and role assignments."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from warden.domain.auth.model.role_assignment import RoleAssignment
from warden.domain.auth.model.role_record import RoleRecord
from warden.domain.auth.model.value import UserId
from warden.domain.shared.port import Port


class RoleRepository(Port, Protocol):
    """Repository for stored role names."""

    @abstractmethod
    async def get(self, name: str) -> RoleRecord | None: ...

    @abstractmethod
    async def list(self) -> list[RoleRecord]: ...

    @abstractmethod
    async def save(self, role: RoleRecord) -> None: ...

    @abstractmethod
    async def delete(self, name: str) -> bool:
        """Delete a role. Returns True if deleted, False if not found."""
        ...


class RoleAssignmentRepository(Port, Protocol):
    """Repository for RoleAssignment entity persistence."""

    @abstractmethod
    async def get_by_user_id(self, user_id: UserId) -> list[RoleAssignment]:
        """Get all role assignments for a user."""
        ...

    @abstractmethod
    async def get_by_role(self, role: str) -> list[RoleAssignment]:
        """Get all assignments of a role."""
        ...

    @abstractmethod
    async def get(self, user_id: UserId, role: str) -> RoleAssignment | None:
        """Get a specific role assignment."""
        ...

    @abstractmethod
    async def save(self, assignment: RoleAssignment) -> None:
        """Insert an assignment. Raises ConflictError if the user already holds the role."""
        ...

    @abstractmethod
    async def delete(self, user_id: UserId, role: str) -> bool:
        """Delete a role assignment. Returns True if deleted, False if not found."""
        ...

    @abstractmethod
    async def delete_by_user_id(self, user_id: UserId) -> int:
        """Delete every assignment of a user. Returns the number removed."""
        ...

    @abstractmethod
    async def count_by_role(self) -> dict[str, int]:
        """Number of users holding each assigned role."""
        ...
