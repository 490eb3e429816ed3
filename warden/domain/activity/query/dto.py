from datetime import datetime

from pydantic import BaseModel

from warden.domain.activity.model.activity_log import ActivityLog, Severity


class ActivityLogDTO(BaseModel):
    id: str
    user: str
    action: str
    details: str
    severity: Severity
    timestamp: datetime
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_log(cls, log: ActivityLog) -> "ActivityLogDTO":
        return cls(
            id=str(log.id),
            user=log.user,
            action=log.action,
            details=log.details,
            severity=log.severity,
            timestamp=log.timestamp,
            created_at=log.created_at,
            updated_at=log.updated_at,
        )
