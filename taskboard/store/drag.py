"""Optimistic status change for drag-and-drop between board columns.

A drop moves the card immediately (the cached task's status is changed in
place and the board re-rendered before any request is sent), then asks the
task store to persist the new status:

    IDLE -> PENDING -> COMMITTED    store accepted; tasks are reloaded
                    -> ROLLED_BACK  store refused; previous status restored

Drops that cannot apply end as IGNORED without touching anything.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

from taskboard.errors import TransportError
from taskboard.models.task import (
    STATUS_CODE_FROM_LABEL,
    TaskPatch,
    TaskStatus,
    code_to_label,
    safe_str,
)

if TYPE_CHECKING:
    from taskboard.store.task_store import TaskStore

logger = logging.getLogger(__name__)


class TransitionState(str, Enum):
    """Lifecycle of one drag transition."""
    IDLE = "idle"
    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"
    IGNORED = "ignored"


@dataclass
class TransitionResult:
    """Outcome of a drop."""
    task_id: str
    state: TransitionState
    previous_status: Optional[TaskStatus] = None
    target_status: Optional[TaskStatus] = None
    error: Optional[str] = None


def parse_target_status(value: Any) -> Optional[TaskStatus]:
    """Drop-zone status as a code, or None when it names no known status."""
    if isinstance(value, TaskStatus):
        return value
    text = safe_str(value).strip()
    if text in TaskStatus.__members__:
        return TaskStatus(text)
    return STATUS_CODE_FROM_LABEL.get(text)


class DragTransition:
    """Runs optimistic status transitions against a TaskStore's visible cache.

    At most one transition per task id is in flight; a second drop on the
    same card while the first is pending is ignored.
    """

    def __init__(self, store: "TaskStore"):
        self.store = store
        self._pending: Dict[str, TaskStatus] = {}

    def is_pending(self, task_id: str) -> bool:
        return task_id in self._pending

    def state(self, task_id: str) -> TransitionState:
        """Current state for a card: PENDING while its request is in flight."""
        return TransitionState.PENDING if self.is_pending(task_id) else TransitionState.IDLE

    async def drop(self, task_id: str, target_status: Any) -> TransitionResult:
        """Move a visible task to ``target_status``.

        Args:
            task_id: Id of the dragged card
            target_status: Status code or label of the drop zone

        Returns:
            TransitionResult describing how the transition ended
        """
        task_id = safe_str(task_id)
        target = parse_target_status(target_status)
        task = self.store.find_task(task_id) if task_id else None

        if task is None or target is None or task.status == target or self.is_pending(task_id):
            logger.debug(f"Ignoring drop of task {task_id!r} onto {target_status!r}")
            return TransitionResult(task_id=task_id, state=TransitionState.IGNORED, target_status=target)

        previous = task.status
        task.status = target
        self._pending[task_id] = previous
        self.store.render()

        label = code_to_label(target)
        try:
            await self.store.call_transport(self.store.transport.update_task, task_id, TaskPatch(status=label))
        except TransportError as e:
            task.status = previous
            logger.error(f"Failed to move task {task_id} to {target.value}: {type(e).__name__}: {str(e)}")
            self.store.render()
            self.store.notify(f"Move failed: {e}", True)
            return TransitionResult(
                task_id=task_id,
                state=TransitionState.ROLLED_BACK,
                previous_status=previous,
                target_status=target,
                error=str(e),
            )
        finally:
            self._pending.pop(task_id, None)

        logger.debug(f"Moved task {task_id} from {previous.value} to {target.value}")
        self.store.notify(f"Moved to {label}.")
        await self.store.load_tasks(self.store.current_category_filter)
        return TransitionResult(
            task_id=task_id,
            state=TransitionState.COMMITTED,
            previous_status=previous,
            target_status=target,
        )
