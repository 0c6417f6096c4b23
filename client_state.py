"""Client-side state and the reducer that evolves it.

State is immutable: ``reduce(state, action)`` returns a new ClientState and
never touches the old one. Rendering reads the state and nothing else.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

DEFAULT_LIMIT = 10

STATUSES = ("Pending", "In Progress", "Completed")


@dataclass(frozen=True)
class Filters:
    search: str = ""
    status: str = "All"
    sort: str = "newest"
    page: int = 1
    limit: int = DEFAULT_LIMIT

    def as_params(self) -> Dict[str, Any]:
        return {
            "search": self.search,
            "status": self.status,
            "sort": self.sort,
            "page": self.page,
            "limit": self.limit,
        }


@dataclass(frozen=True)
class Session:
    user: Dict[str, Any]
    token: str

    @property
    def first_name(self) -> str:
        name = (self.user.get("name") or "").split()
        return name[0] if name else ""


@dataclass(frozen=True)
class PageInfo:
    page: int = 1
    limit: int = DEFAULT_LIMIT
    total_pages: int = 1
    total: int = 0


@dataclass(frozen=True)
class Notice:
    message: str
    kind: str = "success"


@dataclass(frozen=True)
class ClientState:
    session: Optional[Session] = None
    filters: Filters = field(default_factory=Filters)
    tasks: Tuple[Dict[str, Any], ...] = ()
    pagination: PageInfo = field(default_factory=PageInfo)
    notice: Optional[Notice] = None
    loading: bool = False

    @property
    def logged_in(self) -> bool:
        return self.session is not None


# Actions

@dataclass(frozen=True)
class LoggedIn:
    user: Dict[str, Any]
    token: str


@dataclass(frozen=True)
class LoggedOut:
    pass


@dataclass(frozen=True)
class SearchChanged:
    search: str


@dataclass(frozen=True)
class StatusChanged:
    status: str


@dataclass(frozen=True)
class SortChanged:
    sort: str


@dataclass(frozen=True)
class PageChanged:
    page: int


@dataclass(frozen=True)
class FetchStarted:
    pass


@dataclass(frozen=True)
class TasksLoaded:
    tasks: Tuple[Dict[str, Any], ...]
    page: int
    limit: int
    total_pages: int
    total: int

    @classmethod
    def from_response(cls, body: Dict[str, Any]) -> "TasksLoaded":
        pagination = body["pagination"]
        return cls(
            tasks=tuple(body["data"]),
            page=pagination["page"],
            limit=pagination["limit"],
            total_pages=pagination["totalPages"],
            total=body["total"],
        )


@dataclass(frozen=True)
class FetchFailed:
    message: str


@dataclass(frozen=True)
class Notified:
    message: str
    kind: str = "success"


@dataclass(frozen=True)
class NoticeDismissed:
    pass


def _with_filters(state: ClientState, **changes) -> ClientState:
    # Any filter change sends the user back to the first page
    changes.setdefault("page", 1)
    return replace(state, filters=replace(state.filters, **changes))


def reduce(state: ClientState, action) -> ClientState:
    if isinstance(action, LoggedIn):
        return replace(state, session=Session(user=action.user, token=action.token))

    if isinstance(action, LoggedOut):
        # Filters survive a logout, tasks do not
        return replace(state, session=None, tasks=(), pagination=PageInfo(), loading=False)

    if isinstance(action, SearchChanged):
        return _with_filters(state, search=action.search)

    if isinstance(action, StatusChanged):
        return _with_filters(state, status=action.status)

    if isinstance(action, SortChanged):
        return _with_filters(state, sort=action.sort)

    if isinstance(action, PageChanged):
        return replace(state, filters=replace(state.filters, page=max(1, action.page)))

    if isinstance(action, FetchStarted):
        return replace(state, loading=True)

    if isinstance(action, TasksLoaded):
        return replace(
            state,
            tasks=action.tasks,
            pagination=PageInfo(
                page=action.page,
                limit=action.limit,
                total_pages=action.total_pages,
                total=action.total,
            ),
            loading=False,
        )

    if isinstance(action, FetchFailed):
        return replace(state, loading=False, notice=Notice(action.message, "error"))

    if isinstance(action, Notified):
        return replace(state, notice=Notice(action.message, action.kind))

    if isinstance(action, NoticeDismissed):
        return replace(state, notice=None)

    raise TypeError(f"Unknown action: {action!r}")
