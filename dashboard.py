"""Task dashboard: wires user actions to API calls and state transitions.

Every action issues a single request and waits for it. Mutations never
patch the local task list; they refetch the current filtered page.
Failures turn into an error notice and leave the rest of the state as it
was. Responses are applied in the order they arrive, so a slow response
can overwrite a newer one.
"""

import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
from jinja2 import Environment, FileSystemLoader, select_autoescape

from client import ApiError, TaskFlowClient
from client_state import (
    STATUSES,
    ClientState,
    FetchFailed,
    FetchStarted,
    LoggedIn,
    LoggedOut,
    Notified,
    PageChanged,
    SearchChanged,
    SortChanged,
    StatusChanged,
    TasksLoaded,
    reduce,
)
from debounce import Debouncer
from pagination import build_pagination
from session_store import SessionStore

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

SEARCH_DEBOUNCE_SECONDS = 0.5


def _status_slug(status: str) -> str:
    return status.lower().replace(" ", "-")


def _format_date(value: Optional[str]) -> str:
    if not value:
        return ""
    try:
        d = datetime.fromisoformat(value)
    except ValueError:
        return value
    return f"{d:%b} {d.day}, {d.year}"


def view_model(state: ClientState) -> Dict[str, Any]:
    """Everything the template needs, derived from the state alone."""
    control = build_pagination(state.pagination.page, state.pagination.total_pages)
    return {
        "logged_in": state.logged_in,
        "greeting": f"Hi, {state.session.first_name}" if state.logged_in else "",
        "filters": state.filters,
        "statuses": STATUSES,
        "loading": state.loading,
        "empty": state.logged_in and not state.loading and not state.tasks,
        "tasks": [
            {
                "id": task["id"],
                "title": task["title"],
                "description": task.get("description") or "No description provided.",
                "status": task["status"],
                "status_slug": _status_slug(task["status"]),
                "date": _format_date(task.get("created_at")),
            }
            for task in state.tasks
        ],
        "pagination": control,
        "notice": state.notice,
    }


def make_environment(templates_dir=TEMPLATES_DIR) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=select_autoescape(["html"]),
    )


def render(state: ClientState, env: Environment) -> str:
    return env.get_template("dashboard.html").render(**view_model(state))


class Dashboard:
    def __init__(self, client: TaskFlowClient, store: SessionStore,
                 debounce_wait: float = SEARCH_DEBOUNCE_SECONDS, env: Optional[Environment] = None):
        self.client = client
        self.store = store
        self.state = ClientState()
        self.env = env or make_environment()
        self._lock = threading.RLock()
        self._search = Debouncer(self._apply_search, debounce_wait)

    def dispatch(self, action) -> ClientState:
        with self._lock:
            self.state = reduce(self.state, action)
            return self.state

    def render(self) -> str:
        return render(self.state, self.env)

    def _notify(self, message: str, kind: str = "success"):
        self.dispatch(Notified(message, kind))

    def _fail(self, exc: Exception, fallback: str):
        if isinstance(exc, ApiError):
            message = exc.message or fallback
        else:
            logger.warning("%s: %s", fallback, exc)
            message = fallback
        self._notify(message, "error")

    # Session

    def start(self):
        """Restore a saved session, if any, and load the first page."""
        session = self.store.load()
        if session is None:
            return
        self.client.token = session.token
        self.dispatch(LoggedIn(user=session.user, token=session.token))
        self.fetch_tasks()

    def _login_success(self, body: Dict[str, Any], message: str):
        state = self.dispatch(LoggedIn(user=body["user"], token=body["token"]))
        self.store.save(state.session)
        self._notify(message)
        self.fetch_tasks()

    def login(self, email: str, password: str) -> bool:
        try:
            body = self.client.login(email, password)
        except (ApiError, httpx.HTTPError) as e:
            self._fail(e, "Login failed")
            return False
        self._login_success(body, "Login successful!")
        return True

    def register(self, name: str, email: str, password: str) -> bool:
        try:
            body = self.client.register(name, email, password)
        except (ApiError, httpx.HTTPError) as e:
            self._fail(e, "Registration failed")
            return False
        self._login_success(body, "Account created successfully!")
        return True

    def logout(self, notify: bool = True):
        self._search.cancel()
        self.client.token = None
        self.store.clear()
        self.dispatch(LoggedOut())
        if notify:
            self._notify("Logged out successfully")

    # Listing

    def fetch_tasks(self):
        if not self.state.logged_in:
            return
        filters = self.dispatch(FetchStarted()).filters
        try:
            body = self.client.list_tasks(**filters.as_params())
        except ApiError as e:
            if e.is_auth_error:
                self.logout(notify=False)
            self.dispatch(FetchFailed(e.message or "Failed to fetch tasks"))
            return
        except httpx.HTTPError as e:
            logger.warning("Fetching tasks failed: %s", e)
            self.dispatch(FetchFailed("Server error while fetching tasks"))
            return
        self.dispatch(TasksLoaded.from_response(body))

    def search(self, text: str):
        self._search(text)

    def flush_search(self):
        self._search.flush()

    def _apply_search(self, text: str):
        self.dispatch(SearchChanged(text))
        self.fetch_tasks()

    def filter_status(self, status: str):
        self.dispatch(StatusChanged(status))
        self.fetch_tasks()

    def sort_by(self, sort: str):
        self.dispatch(SortChanged(sort))
        self.fetch_tasks()

    def go_to_page(self, page: int):
        self.dispatch(PageChanged(page))
        self.fetch_tasks()

    def next_page(self):
        if self.state.filters.page < self.state.pagination.total_pages:
            self.go_to_page(self.state.filters.page + 1)

    def prev_page(self):
        if self.state.filters.page > 1:
            self.go_to_page(self.state.filters.page - 1)

    # Mutations

    def save_task(self, title: str, description: str = "", status: str = "Pending",
                  task_id: Optional[int] = None) -> bool:
        try:
            if task_id is None:
                self.client.create_task(title, description, status)
            else:
                self.client.update_task(task_id, title=title, description=description, status=status)
        except (ApiError, httpx.HTTPError) as e:
            self._fail(e, "Operation failed")
            return False
        self._notify("Task updated!" if task_id is not None else "Task created!")
        self.fetch_tasks()
        return True

    def change_status(self, task_id: int, status: str) -> bool:
        try:
            self.client.update_task(task_id, status=status)
        except (ApiError, httpx.HTTPError) as e:
            self._fail(e, "Update failed")
            return False
        self._notify(f"Status updated to {status}")
        self.fetch_tasks()
        return True

    def delete_task(self, task_id: int) -> bool:
        try:
            self.client.delete_task(task_id)
        except (ApiError, httpx.HTTPError) as e:
            self._fail(e, "Delete failed")
            return False
        self._notify("Task deleted")
        self.fetch_tasks()
        return True
