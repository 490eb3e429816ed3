"""Repository port for ActivityLog persistence."""

from __future__ import annotations

from abc import abstractmethod
from typing import Protocol

from warden.domain.activity.model.activity_log import ActivityLog, ActivityLogId, Severity
from warden.domain.activity.model.query import ActivityLogFilter, PageRequest
from warden.domain.shared.port import Port


class ActivityLogRepository(Port, Protocol):
    @abstractmethod
    async def get(self, log_id: ActivityLogId) -> ActivityLog | None: ...

    @abstractmethod
    async def find(
        self, criteria: ActivityLogFilter, page: PageRequest
    ) -> tuple[list[ActivityLog], int]:
        """One page of matching logs plus the total number of matches."""
        ...

    @abstractmethod
    async def save(self, log: ActivityLog) -> None:
        """Insert or update a log."""
        ...

    @abstractmethod
    async def delete(self, log_id: ActivityLogId) -> bool: ...

    @abstractmethod
    async def delete_many(self, log_ids: list[ActivityLogId]) -> int:
        """Delete the given logs. Unknown ids are ignored. Returns the number removed."""
        ...

    @abstractmethod
    async def count_by_severity(self) -> dict[Severity, int]: ...
