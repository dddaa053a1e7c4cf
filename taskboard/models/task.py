"""Task data model for taskboard."""

from enum import Enum
from typing import Any, Dict, Optional
from pydantic import BaseModel, Field

from taskboard.models.constants import DEFAULT_TASK_TITLE


class TaskStatus(str, Enum):
    """Workflow status codes (one board column each)."""
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


# Column order on the board and in status breakdowns
STATUS_ORDER = (TaskStatus.NOT_STARTED, TaskStatus.IN_PROGRESS, TaskStatus.DONE)

STATUS_LABEL_FROM_CODE: Dict[TaskStatus, str] = {
    TaskStatus.NOT_STARTED: "Not Started",
    TaskStatus.IN_PROGRESS: "In Progress",
    TaskStatus.DONE: "Done",
}

STATUS_CODE_FROM_LABEL: Dict[str, TaskStatus] = {
    label: code for code, label in STATUS_LABEL_FROM_CODE.items()
}

DEFAULT_STATUS_LABEL = STATUS_LABEL_FROM_CODE[TaskStatus.NOT_STARTED]


def safe_str(value: Any) -> str:
    """Render any value as a string, with None becoming ""."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return safe_str(value.value)
    return str(value)


def status_to_code(value: Any) -> TaskStatus:
    """Map a status code or display label to its code.

    Unrecognized input maps to NOT_STARTED. Never raises.
    """
    text = safe_str(value).strip()
    if text in TaskStatus.__members__:
        return TaskStatus(text)
    return STATUS_CODE_FROM_LABEL.get(text, TaskStatus.NOT_STARTED)


def code_to_label(value: Any) -> str:
    """Map a status code to its display label.

    A value that already is a label is returned unchanged; anything else
    maps to "Not Started". Never raises.
    """
    text = safe_str(value).strip()
    if text in TaskStatus.__members__:
        return STATUS_LABEL_FROM_CODE[TaskStatus(text)]
    if text in STATUS_CODE_FROM_LABEL:
        return text
    return DEFAULT_STATUS_LABEL


class Task(BaseModel):
    """Canonical Task model, as held in the store caches."""

    id: str = Field(..., description="Server task identifier (empty when the record had none)")
    title: str = Field(DEFAULT_TASK_TITLE, description="Task title")
    category: str = Field("", description="Category name (empty = uncategorized)")
    status: TaskStatus = Field(TaskStatus.NOT_STARTED, description="Workflow status code")
    due_date: str = Field("", description="ISO-ish due date, empty when there is none")
    description: str = Field("", description="Opaque HTML fragment")
    created_at: str = Field("", description="Opaque sortable creation timestamp")
    updated_at: str = Field("", description="Opaque sortable update timestamp")

    @property
    def status_label(self) -> str:
        return code_to_label(self.status)


class TaskPayload(BaseModel):
    """Outbound body for task create and update requests.

    ``status`` is sent as the display label, which is what the task
    store expects on the wire.
    """

    title: str = ""
    category: str = ""
    due_date: str = ""
    status: str = DEFAULT_STATUS_LABEL
    description: str = ""

    def to_request_body(self) -> Dict[str, Any]:
        body = self.model_dump()
        body["status"] = code_to_label(body["status"])
        return body


class TaskPatch(BaseModel):
    """Partial update body; only fields that were set are sent."""

    title: Optional[str] = None
    category: Optional[str] = None
    due_date: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None

    def to_request_body(self) -> Dict[str, Any]:
        body = self.model_dump(exclude_none=True)
        if "status" in body:
            body["status"] = code_to_label(body["status"])
        return body
