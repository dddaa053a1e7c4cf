"""Statistics snapshot models for taskboard.

Snapshots are derived from a task collection on demand and never stored.
"""

from typing import List
from pydantic import BaseModel, Field

from taskboard.models.task import TaskStatus


class StatusBreakdown(BaseModel):
    """Count and share of tasks in one workflow status."""
    key: TaskStatus
    label: str
    count: int = 0
    percent: float = 0.0


class CategoryBreakdown(BaseModel):
    """Count and share of tasks in one category."""
    label: str
    count: int = 0
    percent: float = 0.0


class StatsSnapshot(BaseModel):
    """Aggregate completion statistics for a task collection."""

    total: int = Field(0, description="Number of tasks in the collection")
    completed_percent: float = Field(0.0, description="Share of DONE tasks, 0-100, unrounded")
    by_status: List[StatusBreakdown] = Field(
        default_factory=list,
        description="One entry per status, in board column order",
    )
    by_category: List[CategoryBreakdown] = Field(
        default_factory=list,
        description="One entry per category, count desc then label asc",
    )
