"""Normalization of server task records into canonical Tasks.

The task store is not strict about its record shape: identifiers may be
exposed as ``id``, ``taskId`` or ``_id``, due dates as ``due_date`` or
``dueDate``, and statuses either as codes or display labels. Everything
downstream of this module only ever sees canonical ``Task`` objects.
"""

from typing import Any, Iterable, List, Mapping, Optional

from taskboard.models.task import Task, safe_str, status_to_code
from taskboard.models.constants import DEFAULT_TASK_TITLE

ID_KEYS = ("id", "taskId", "_id")
DUE_DATE_KEYS = ("due_date", "dueDate")


def _first_present(raw: Mapping[str, Any], keys: Iterable[str]) -> Optional[Any]:
    """Return the first value under ``keys`` that is present and not None."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def normalize_task(raw: Any) -> Task:
    """Normalize a raw server record to a Task.

    Never raises. A record without any identifier produces a Task with an
    empty ``id``; callers building collections must discard it (see
    ``normalize_tasks``).

    Args:
        raw: Task record as decoded from the server response

    Returns:
        Canonical Task object
    """
    if not isinstance(raw, Mapping):
        return Task(id="")

    return Task(
        id=safe_str(_first_present(raw, ID_KEYS)),
        title=safe_str(raw.get("title") or DEFAULT_TASK_TITLE),
        category=safe_str(raw.get("category") or ""),
        status=status_to_code(raw.get("status")),
        due_date=safe_str(_first_present(raw, DUE_DATE_KEYS) or ""),
        description=safe_str(raw.get("description") or ""),
        created_at=safe_str(raw.get("created_at") or ""),
        updated_at=safe_str(raw.get("updated_at") or ""),
    )


def normalize_tasks(rows: Iterable[Any]) -> List[Task]:
    """Normalize records, dropping those without an identifier.

    Input order is preserved.
    """
    tasks = [normalize_task(row) for row in rows]
    return [task for task in tasks if task.id]
