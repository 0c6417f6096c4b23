from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class PaginationControl:
    """Buttons to show under the task grid. ``None`` in items is an ellipsis."""

    page: int
    total_pages: int
    items: List[Optional[int]]

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def visible(self) -> bool:
        return bool(self.items)


def build_pagination(page: int, total_pages: int) -> PaginationControl:
    # A single page needs no control at all
    if total_pages <= 1:
        return PaginationControl(page=page, total_pages=total_pages, items=[])

    items = []
    for i in range(1, total_pages + 1):
        if i == 1 or i == total_pages or page - 1 <= i <= page + 1:
            items.append(i)
        elif i == page - 2 or i == page + 2:
            items.append(None)
    return PaginationControl(page=page, total_pages=total_pages, items=items)
