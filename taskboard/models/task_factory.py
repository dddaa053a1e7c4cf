"""Task payload factory for taskboard.

This module centralizes how create/update payloads are assembled from form
input and validated before anything is sent to the task store.
"""

from typing import Any, Optional

from taskboard.errors import PayloadValidationError
from taskboard.models.task import DEFAULT_STATUS_LABEL, TaskPayload, code_to_label, safe_str


def build_payload(
    title: Any,
    selected_category: Any = "",
    new_category: Any = "",
    due_date: Any = "",
    status: Any = DEFAULT_STATUS_LABEL,
    description: Any = "",
) -> TaskPayload:
    """Assemble a payload the way the task form does.

    The category comes from the selected value, or else from the newly typed
    one. Title and typed category are trimmed; status may be given as a code
    or a label and is always sent as a label.

    Args:
        title: Title as entered
        selected_category: Category picked from the known list (may be empty)
        new_category: Category typed in by the user (may be empty)
        due_date: Due date string, empty for none
        status: Status code or label
        description: Description HTML

    Returns:
        TaskPayload (not yet validated)
    """
    category = safe_str(selected_category) or safe_str(new_category).strip()
    return TaskPayload(
        title=safe_str(title).strip(),
        category=category,
        due_date=safe_str(due_date),
        status=code_to_label(status),
        description=safe_str(description),
    )


def validate_payload(payload: TaskPayload) -> TaskPayload:
    """Check the required fields of a create/update payload.

    Raises:
        PayloadValidationError: If title or category is blank
    """
    if not payload.title.strip():
        raise PayloadValidationError("Title is required.", field="title")
    if not payload.category.strip():
        raise PayloadValidationError("Category is required.", field="category")
    return payload


def payload_from_task(task: Any, overrides: Optional[dict] = None) -> TaskPayload:
    """Payload reproducing an existing task, with optional field overrides."""
    values = {
        "title": task.title,
        "category": task.category,
        "due_date": task.due_date,
        "status": code_to_label(task.status),
        "description": task.description,
    }
    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value
    values["status"] = code_to_label(values["status"])
    return TaskPayload(**values)
