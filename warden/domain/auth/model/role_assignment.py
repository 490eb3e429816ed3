"""RoleAssignment entity: tracks user-role associations."""

from datetime import datetime
from uuid import UUID, uuid4

from pydantic import RootModel

from warden.domain.auth.model.value import UserId
from warden.domain.shared.model.entity import Entity
from warden.domain.shared.model.value import utcnow


class RoleAssignmentId(RootModel[UUID]):
    """Unique identifier for a RoleAssignment."""

    @classmethod
    def generate(cls) -> "RoleAssignmentId":
        return cls(uuid4())

    def __str__(self) -> str:
        return str(self.root)

    def __hash__(self) -> int:
        return hash(self.root)


class RoleAssignment(Entity):
    """Association between a user and a named role."""

    id: RoleAssignmentId
    user_id: UserId
    role: str
    assigned_by: UserId | None = None
    assigned_at: datetime

    @classmethod
    def create(
        cls,
        user_id: UserId,
        role: str,
        assigned_by: UserId | None,
    ) -> "RoleAssignment":
        return cls(
            id=RoleAssignmentId.generate(),
            user_id=user_id,
            role=role,
            assigned_by=assigned_by,
            assigned_at=utcnow(),
        )
