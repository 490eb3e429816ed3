"""Stored roles. The policy table decides what a role may do; this records that it exists."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from warden.domain.shared.authorization.role import RoleName
from warden.domain.shared.model.value import utcnow


class RoleRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    created_at: datetime

    @classmethod
    def create(cls, name: RoleName) -> "RoleRecord":
        return cls(name=str(name), created_at=utcnow())
