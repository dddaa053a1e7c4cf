"""REST client for the remote task store.

Talks to the store's small JSON API:

    GET    /categories
    GET    /tasks[?category=<name>]
    GET    /tasks/{id}
    POST   /tasks
    PUT    /tasks/{id}
    DELETE /tasks/{id}

Paths are configurable. All failures are raised as ``TransportError``.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence
from urllib.parse import quote

import requests

from taskboard.config import Settings, load_settings
from taskboard.errors import TransportError
from taskboard.models.constants import CATEGORY_ENVELOPE_KEYS, TASK_ENVELOPE_KEYS
from taskboard.models.task import TaskPatch, TaskPayload, safe_str

logger = logging.getLogger(__name__)


def decode_envelope(data: Any, keys: Sequence[str]) -> List[Any]:
    """Extract the item list from a response body.

    Accepts a bare list, or an object holding the list under one of
    ``keys``; the first key holding a list wins. Anything else decodes to
    an empty list.
    """
    if isinstance(data, list):
        return data
    if isinstance(data, Mapping):
        for key in keys:
            value = data.get(key)
            if isinstance(value, list):
                return value
    return []


def category_name(entry: Any) -> str:
    """Category name from a string entry or an object with name/category."""
    if isinstance(entry, str):
        return entry.strip()
    if isinstance(entry, Mapping):
        return safe_str(entry.get("name") or entry.get("category") or "").strip()
    return ""


def error_message(data: Any, status_code: int) -> str:
    """User-facing message for a failed response."""
    if isinstance(data, Mapping):
        message = data.get("message") or data.get("error")
        if message:
            return safe_str(message)
    return f"HTTP {status_code}"


class TaskApiClient:
    """Client for the task store REST API."""

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize the client.

        Args:
            settings: Base URL, path templates and timeout. If None, read
                from the environment via ``load_settings()``.
        """
        self.settings = settings or load_settings()
        self.headers = {"Content-Type": "application/json"}

    # URL building

    def api_url(self, path: str) -> str:
        return self.settings.api_base_url.rstrip("/") + path

    def tasks_path(self, category: str = "") -> str:
        if category:
            return f"{self.settings.tasks_path}?category={quote(category, safe='')}"
        return self.settings.tasks_path

    def task_by_id_path(self, task_id: str) -> str:
        return self.settings.task_by_id_path.replace("{id}", quote(safe_str(task_id), safe=""), 1)

    def categories_path(self) -> str:
        return self.settings.categories_path

    # Transport

    def request(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> Any:
        """Send a request and decode the JSON response body.

        Returns:
            Decoded JSON, the raw text when the body is not JSON, or None
            for an empty body

        Raises:
            TransportError: On network failure or a non-2xx status
        """
        url = self.api_url(path)
        try:
            response = requests.request(
                method,
                url,
                headers=self.headers,
                data=json.dumps(body) if body is not None else None,
                timeout=self.settings.http_timeout_sec,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {type(e).__name__}: {str(e)}")
            raise TransportError(str(e)) from e

        text = response.text
        data: Any = None
        if text:
            try:
                data = json.loads(text)
            except ValueError:
                data = text

        if not response.ok:
            message = error_message(data, response.status_code)
            logger.error(f"{method} {url} returned HTTP {response.status_code}: {message}")
            raise TransportError(message, status_code=response.status_code)

        logger.debug(f"{method} {url} -> HTTP {response.status_code}")
        return data

    def fetch_categories(self) -> List[str]:
        """Fetch the authoritative category names (trimmed, non-empty)."""
        data = self.request("GET", self.categories_path())
        names = (category_name(entry) for entry in decode_envelope(data, CATEGORY_ENVELOPE_KEYS))
        return [name for name in names if name]

    def fetch_tasks(self, category: str = "") -> List[Any]:
        """Fetch raw task records, optionally filtered to one category."""
        data = self.request("GET", self.tasks_path(category))
        return decode_envelope(data, TASK_ENVELOPE_KEYS)

    def get_task(self, task_id: str) -> Any:
        """Fetch one raw task record."""
        return self.request("GET", self.task_by_id_path(task_id))

    def create_task(self, payload: TaskPayload) -> Any:
        return self.request("POST", self.tasks_path(), payload.to_request_body())

    def update_task(self, task_id: str, payload: Any) -> Any:
        """Replace or patch a task; ``payload`` is a TaskPayload or TaskPatch."""
        if isinstance(payload, (TaskPayload, TaskPatch)):
            body = payload.to_request_body()
        else:
            body = dict(payload)
        return self.request("PUT", self.task_by_id_path(task_id), body)

    def delete_task(self, task_id: str) -> Any:
        return self.request("DELETE", self.task_by_id_path(task_id))
