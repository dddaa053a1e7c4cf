"""Completion statistics for taskboard.

Aggregates a task collection into per-status and per-category counts and
percentages. The aggregation is deterministic: statuses always come out in
board column order, categories by decreasing count with ties broken by
label, so equal inputs always produce equal snapshots.
"""

import math
import numbers
from collections import Counter
from typing import Iterable, List

from taskboard.engine.categories import locale_sort_key
from taskboard.models.constants import UNCATEGORIZED_LABEL
from taskboard.models.stats import CategoryBreakdown, StatsSnapshot, StatusBreakdown
from taskboard.models.task import STATUS_ORDER, Task, TaskStatus, code_to_label, safe_str


def percent_of(count: int, total: int) -> float:
    """Share of ``count`` in ``total`` as 0-100, or 0 when total is 0."""
    if not total:
        return 0.0
    return count / total * 100


def format_percent(value: object) -> str:
    """Format a percentage for display.

    Rounds to one decimal place, drops the decimal when it is zero and
    appends "%": 33.333 -> "33.3%", 100 -> "100%". Non-finite or
    non-numeric values render as "0%".
    """
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return "0%"
    value = float(value)
    if not math.isfinite(value):
        return "0%"

    # Half-up rounding to one decimal
    rounded = math.floor(value * 10 + 0.5) / 10
    if rounded.is_integer():
        return f"{rounded:.0f}%"
    return f"{rounded:.1f}%"


def _category_label(task: Task) -> str:
    return safe_str(task.category).strip() or UNCATEGORIZED_LABEL


def compute_stats(tasks: Iterable[Task]) -> StatsSnapshot:
    """Compute a stats snapshot for a task collection.

    Args:
        tasks: Canonical tasks (typically the store's all-tasks snapshot)

    Returns:
        StatsSnapshot with total, completion share and breakdowns
    """
    tasks = list(tasks)
    total = len(tasks)

    status_counts = Counter(task.status for task in tasks)
    by_status: List[StatusBreakdown] = [
        StatusBreakdown(
            key=status,
            label=code_to_label(status),
            count=status_counts.get(status, 0),
            percent=percent_of(status_counts.get(status, 0), total),
        )
        for status in STATUS_ORDER
    ]

    category_counts = Counter(_category_label(task) for task in tasks)
    by_category = [
        CategoryBreakdown(label=label, count=count, percent=percent_of(count, total))
        for label, count in sorted(
            category_counts.items(),
            key=lambda item: (-item[1], locale_sort_key(item[0])),
        )
    ]

    return StatsSnapshot(
        total=total,
        completed_percent=percent_of(status_counts.get(TaskStatus.DONE, 0), total),
        by_status=by_status,
        by_category=by_category,
    )
