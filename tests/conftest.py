"""Pytest fixtures and configuration for taskboard tests."""

import threading
from typing import Any, Callable, Dict, List, Optional

import pytest

from taskboard.errors import TransportError
from taskboard.models.task import TaskPatch, TaskPayload
from taskboard.store.task_store import StoreCallbacks, TaskStore


def _raw_id(record: Dict[str, Any]) -> str:
    for key in ("id", "taskId", "_id"):
        if record.get(key) is not None:
            return str(record[key])
    return ""


class Gate:
    """Holds one transport call until released."""

    def __init__(self):
        self.entered = threading.Event()
        self.release = threading.Event()


class FakeTransport:
    """In-process stand-in for TaskApiClient.

    Records every call. ``failures`` maps a method name to an exception to
    raise, or to a callable receiving the call args and returning an
    exception (or None to let the call through). ``gates`` maps a method
    name to a Gate; the first call of that method waits on it.
    """

    def __init__(self, tasks: Optional[List[Dict[str, Any]]] = None, categories: Optional[List[Any]] = None):
        self.tasks: List[Dict[str, Any]] = [dict(t) for t in (tasks or [])]
        self.categories: List[Any] = list(categories or [])
        self.calls: List[tuple] = []
        self.failures: Dict[str, Any] = {}
        self.gates: Dict[str, Gate] = {}
        self.observers: Dict[str, Callable[..., None]] = {}
        self._lock = threading.Lock()

    def _enter(self, name: str, *args: Any) -> None:
        with self._lock:
            self.calls.append((name,) + args)
            gate = self.gates.pop(name, None)
        observer = self.observers.get(name)
        if observer is not None:
            observer(*args)
        if gate is not None:
            gate.entered.set()
            gate.release.wait(timeout=5)
        failure = self.failures.get(name)
        if callable(failure):
            failure = failure(*args)
        if failure is not None:
            raise failure

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]

    def fetch_categories(self) -> List[Any]:
        self._enter("fetch_categories")
        return list(self.categories)

    def fetch_tasks(self, category: str = "") -> List[Dict[str, Any]]:
        self._enter("fetch_tasks", category)
        if category:
            return [dict(t) for t in self.tasks if t.get("category") == category]
        return [dict(t) for t in self.tasks]

    def get_task(self, task_id: str) -> Dict[str, Any]:
        self._enter("get_task", task_id)
        for task in self.tasks:
            if _raw_id(task) == task_id:
                return dict(task)
        raise TransportError(f"Task {task_id} not found", status_code=404)

    def create_task(self, payload: TaskPayload) -> Dict[str, Any]:
        self._enter("create_task", payload)
        record = {"id": str(len(self.tasks) + 100), **payload.to_request_body()}
        self.tasks.append(record)
        return record

    def update_task(self, task_id: str, payload: Any) -> Dict[str, Any]:
        self._enter("update_task", task_id, payload)
        body = payload.to_request_body() if isinstance(payload, (TaskPayload, TaskPatch)) else dict(payload)
        for task in self.tasks:
            if _raw_id(task) == task_id:
                task.update(body)
                return dict(task)
        raise TransportError(f"Task {task_id} not found", status_code=404)

    def delete_task(self, task_id: str) -> None:
        self._enter("delete_task", task_id)
        self.tasks = [t for t in self.tasks if _raw_id(t) != task_id]


class RecordingView:
    """Collects everything the store reports through its callbacks."""

    def __init__(self):
        self.renders = 0
        self.notifications: List[tuple] = []
        self.categories: List[tuple] = []
        self.observed: List[tuple] = []

    def callbacks(self) -> StoreCallbacks:
        return StoreCallbacks(
            on_render=self.on_render,
            on_notify=lambda message, is_error: self.notifications.append((message, is_error)),
            on_categories=lambda cats: self.categories.append(tuple(cats)),
            on_observed_categories=lambda cats: self.observed.append(tuple(cats)),
        )

    def on_render(self) -> None:
        self.renders += 1

    @property
    def errors(self) -> List[str]:
        return [message for message, is_error in self.notifications if is_error]

    @property
    def successes(self) -> List[str]:
        return [message for message, is_error in self.notifications if not is_error]


@pytest.fixture
def raw_tasks():
    """Task records as the server might send them (mixed shapes)."""
    return [
        {"id": "1", "title": "Write report", "category": "Work", "status": "Done",
         "due_date": "2024-03-05", "created_at": "2024-03-01T09:00:00"},
        {"taskId": "2", "title": "Buy milk", "category": "Home", "status": "Not Started",
         "created_at": "2024-03-02T09:00:00"},
        {"_id": "3", "title": "Plan sprint", "category": "Work", "status": "IN_PROGRESS",
         "dueDate": "2024-03-04", "created_at": "2024-03-03T09:00:00"},
    ]


@pytest.fixture
def make_transport():
    """Factory for a FakeTransport over custom records."""
    return FakeTransport


@pytest.fixture
def transport(raw_tasks):
    return FakeTransport(tasks=raw_tasks, categories=["Work", "Home"])


@pytest.fixture
def gate():
    return Gate()


@pytest.fixture
def view():
    return RecordingView()


@pytest.fixture
def store(transport, view):
    return TaskStore(transport, view.callbacks())
