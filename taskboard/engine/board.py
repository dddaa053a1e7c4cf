"""Board view helpers: search, sort, column grouping and due-date display.

These work on snapshots of the store caches and never mutate them.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from taskboard.models.constants import DEFAULT_OWNER_NAME, NO_DUE_LABEL, SORT_DUE_SOON, SORT_RECENT
from taskboard.models.task import STATUS_ORDER, Task, TaskStatus, safe_str


def parse_due_date(value: str) -> Optional[datetime]:
    """Parse an ISO-ish due date, returning None when empty or unparseable."""
    text = safe_str(value).strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_due(value: str) -> str:
    """Short due-date label for a card, e.g. "Mar 5", or "No due"."""
    due = parse_due_date(value)
    if due is None:
        return NO_DUE_LABEL
    return f"{due:%b} {due.day}"


def _due_sort_key(task: Task) -> float:
    due = parse_due_date(task.due_date)
    if due is None:
        return float("inf")
    try:
        return due.timestamp()
    except (OverflowError, OSError, ValueError):
        return float("inf")


def filter_and_sort(tasks: Iterable[Task], query: str = "", sort_mode: str = SORT_RECENT) -> List[Task]:
    """Apply the title search and the selected sort order.

    Args:
        tasks: Tasks to show (usually the visible cache)
        query: Case-insensitive substring matched against titles
        sort_mode: "recent" (newest first) or "due_soon" (earliest due first,
            tasks without a due date last, then newest first)

    Returns:
        New list; the input is left untouched
    """
    needle = safe_str(query).strip().lower()
    result = [task for task in tasks if not needle or needle in task.title.lower()]

    # Both modes fall back to created_at descending
    result.sort(key=lambda task: task.created_at, reverse=True)
    if sort_mode == SORT_DUE_SOON:
        result.sort(key=_due_sort_key)
    return result


def group_by_status(tasks: Iterable[Task]) -> Dict[TaskStatus, List[Task]]:
    """Bucket tasks into board columns, keeping their order within a column."""
    columns: Dict[TaskStatus, List[Task]] = {status: [] for status in STATUS_ORDER}
    for task in tasks:
        columns[task.status].append(task)
    return columns


def column_counts(tasks: Iterable[Task]) -> Dict[TaskStatus, int]:
    """Number of cards per column."""
    return {status: len(column) for status, column in group_by_status(tasks).items()}


def board_title(owner_name: Optional[str]) -> str:
    """Board heading, e.g. "Alex's To Do List"."""
    name = safe_str(owner_name).strip() or DEFAULT_OWNER_NAME
    return f"{name}'s To Do List"
