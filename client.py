"""HTTP client for the TaskFlow API.

Each method issues exactly one request and either returns the decoded
payload or raises ApiError. There are no retries.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, errors: Optional[List[Dict[str, str]]] = None):
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
        super().__init__(message)

    @property
    def is_auth_error(self) -> bool:
        return self.status_code == 401


class TaskFlowClient:
    def __init__(self, base_url: str = DEFAULT_BASE_URL, http: Optional[httpx.Client] = None,
                 token: Optional[str] = None):
        self.http = http or httpx.Client(base_url=base_url)
        self.token = token

    def close(self):
        self.http.close()

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        response = self.http.request(method, path, headers=self._headers(), **kwargs)
        try:
            body = response.json()
        except ValueError:
            raise ApiError(response.status_code, f"Unexpected response from server ({response.status_code})")

        if not isinstance(body, dict) or not body.get("success"):
            body = body if isinstance(body, dict) else {}
            errors = body.get("errors") or []
            message = body.get("message") or (errors[0]["message"] if errors else "Request failed")
            logger.debug("%s %s failed with %s: %s", method, path, response.status_code, message)
            raise ApiError(response.status_code, message, errors)
        return body

    # Auth

    def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        body = self._request("POST", "/api/auth/register",
                             json={"name": name, "email": email, "password": password})
        self.token = body["token"]
        return body

    def login(self, email: str, password: str) -> Dict[str, Any]:
        body = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.token = body["token"]
        return body

    def me(self) -> Dict[str, Any]:
        return self._request("GET", "/api/auth/me")["user"]

    # Tasks

    def list_tasks(self, search: str = "", status: str = "All", sort: str = "newest",
                   page: int = 1, limit: int = 10) -> Dict[str, Any]:
        params = {"status": status, "sort": sort, "page": page, "limit": limit}
        if search:
            params["search"] = search
        return self._request("GET", "/api/tasks", params=params)

    def get_task(self, task_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/tasks/{task_id}")["data"]

    def create_task(self, title: str, description: str = "", status: Optional[str] = None) -> Dict[str, Any]:
        payload = {"title": title, "description": description}
        if status:
            payload["status"] = status
        return self._request("POST", "/api/tasks", json=payload)["data"]

    def update_task(self, task_id: int, **fields) -> Dict[str, Any]:
        return self._request("PUT", f"/api/tasks/{task_id}", json=fields)["data"]

    def delete_task(self, task_id: int) -> None:
        self._request("DELETE", f"/api/tasks/{task_id}")
