"""Typed description of a task listing.

``build_task_query`` turns the loose search/status/sort/page/limit inputs
into a fully specified ``TaskQuery``. It knows nothing about the store;
``tasks.list_tasks`` translates it into SQL.
"""

import enum
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from config import settings
from models import TaskStatus


class StatusFilter(str, enum.Enum):
    ALL = "All"
    PENDING = TaskStatus.PENDING.value
    IN_PROGRESS = TaskStatus.IN_PROGRESS.value
    COMPLETED = TaskStatus.COMPLETED.value


class SortOrder(str, enum.Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    TITLE = "title"


# (field, descending) pairs; id breaks ties so paging is stable
ORDERINGS = {
    SortOrder.NEWEST: (("created_at", True), ("id", True)),
    SortOrder.OLDEST: (("created_at", False), ("id", False)),
    SortOrder.TITLE: (("title", False), ("id", False)),
}


@dataclass(frozen=True)
class TaskQuery:
    owner_id: int
    search: Optional[str]
    status: Optional[TaskStatus]
    order: Tuple[Tuple[str, bool], ...]
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def clamp_page(page) -> int:
    if page is None or page < 1:
        return 1
    return page


def clamp_limit(limit, maximum=None) -> int:
    maximum = maximum or settings.max_page_limit
    if limit is None:
        limit = settings.default_page_limit
    return max(1, min(limit, maximum))


def build_task_query(owner_id, search=None, status=StatusFilter.ALL,
                     sort=SortOrder.NEWEST, page=1, limit=None) -> TaskQuery:
    status = StatusFilter(status or StatusFilter.ALL)
    sort = SortOrder(sort or SortOrder.NEWEST)

    return TaskQuery(
        owner_id=owner_id,
        search=search or None,
        status=None if status is StatusFilter.ALL else TaskStatus(status.value),
        order=ORDERINGS[sort],
        page=clamp_page(page),
        limit=clamp_limit(limit),
    )


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit)
