"""ActivityLog entity and its value objects."""

from datetime import datetime
from enum import StrEnum
from typing import Any
from uuid import UUID, uuid4

from pydantic import Field, RootModel, field_validator, validate_email

from warden.domain.shared.model.entity import Entity
from warden.domain.shared.model.value import to_utc, utcnow


class ActivityLogId(RootModel[UUID]):
    """Unique identifier for an ActivityLog."""

    @classmethod
    def generate(cls) -> "ActivityLogId":
        return cls(uuid4())

    @classmethod
    def parse(cls, value: str) -> "ActivityLogId":
        from warden.domain.shared.error import ValidationError

        try:
            return cls(UUID(value))
        except ValueError:
            raise ValidationError(
                f"Invalid activity log id: {value!r}", code="invalid_log_id", field="id"
            ) from None

    def __str__(self) -> str:
        return str(self.root)

    def __hash__(self) -> int:
        return hash(self.root)


class Severity(StrEnum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"

    @classmethod
    def _missing_(cls, value: object) -> "Severity | None":
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


def check_actor(value: str) -> str:
    """Actor labels are free text, but anything containing '@' must be a valid email."""
    value = value.strip()
    if not value:
        raise ValueError("user must not be empty")
    if "@" in value:
        _, email = validate_email(value)
        return email
    return value


class ActivityLog(Entity):
    """One audit-trail entry describing who did what."""

    id: ActivityLogId
    user: str
    action: str = Field(min_length=1)
    details: str = Field(min_length=1)
    severity: Severity
    timestamp: datetime
    created_at: datetime
    updated_at: datetime

    @field_validator("user")
    @classmethod
    def validate_user(cls, v: str) -> str:
        return check_actor(v)

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: datetime) -> datetime:
        return to_utc(v)

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v

    @classmethod
    def create(
        cls,
        *,
        user: str,
        action: str,
        details: str,
        severity: str | Severity,
        timestamp: datetime | None = None,
    ) -> "ActivityLog":
        now = utcnow()
        return cls(
            id=ActivityLogId.generate(),
            user=user,
            action=action,
            details=details,
            severity=severity,
            timestamp=timestamp or now,
            created_at=now,
            updated_at=now,
        )

    def apply(self, changes: dict[str, Any]) -> None:
        for field, value in changes.items():
            setattr(self, field, value)
        self.updated_at = utcnow()
