"""Client-side task state and reconciliation for taskboard."""

from taskboard.store.task_store import TaskStore, StoreCallbacks
from taskboard.store.drag import DragTransition, TransitionResult, TransitionState

__all__ = [
    "TaskStore",
    "StoreCallbacks",
    "DragTransition",
    "TransitionResult",
    "TransitionState",
]
