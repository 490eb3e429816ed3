"""Filtering, sorting and paging of activity logs."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from math import ceil

from warden.domain.activity.model.activity_log import ActivityLog, Severity

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class SortField(StrEnum):
    TIMESTAMP = "timestamp"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    ACTION = "action"
    SEVERITY = "severity"
    USER = "user"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class ActivityLogFilter:
    """Criteria for listing logs. Text filters match substrings."""

    user: str | None = None
    action: str | None = None
    severity: Severity | None = None
    start: datetime | None = None
    end: datetime | None = None


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_by: SortField = SortField.TIMESTAMP
    sort_order: SortOrder = SortOrder.DESC

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class ActivityLogPage:
    items: list[ActivityLog]
    total: int
    request: PageRequest

    @property
    def total_pages(self) -> int:
        return ceil(self.total / self.request.limit)

    @property
    def has_next(self) -> bool:
        return self.request.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.request.page > 1
