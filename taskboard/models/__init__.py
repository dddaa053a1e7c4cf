"""Data models for taskboard."""

from taskboard.models.task import (
    Task,
    TaskStatus,
    TaskPayload,
    TaskPatch,
    STATUS_ORDER,
    status_to_code,
    code_to_label,
)
from taskboard.models.stats import StatsSnapshot, StatusBreakdown, CategoryBreakdown

__all__ = [
    "Task",
    "TaskStatus",
    "TaskPayload",
    "TaskPatch",
    "STATUS_ORDER",
    "status_to_code",
    "code_to_label",
    "StatsSnapshot",
    "StatusBreakdown",
    "CategoryBreakdown",
]
