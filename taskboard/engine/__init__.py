"""Pure task-board logic for taskboard."""

from taskboard.engine.normalizer import normalize_task, normalize_tasks
from taskboard.engine.stats import compute_stats, format_percent, percent_of
from taskboard.engine.categories import (
    CategorySet,
    set_authoritative,
    merge_observed,
    is_known,
    categories_from_tasks,
)
from taskboard.engine.board import filter_and_sort, group_by_status, column_counts, format_due, board_title

__all__ = [
    "normalize_task",
    "normalize_tasks",
    "compute_stats",
    "format_percent",
    "percent_of",
    "CategorySet",
    "set_authoritative",
    "merge_observed",
    "is_known",
    "categories_from_tasks",
    "filter_and_sort",
    "group_by_status",
    "column_counts",
    "format_due",
    "board_title",
]
