"""Client-side task state for taskboard.

TaskStore owns three caches and keeps them consistent with the remote task
store:

- ``visible_tasks``: last successful load for the active category filter
- ``all_tasks``: last successful unfiltered load, used only for statistics
- ``categories``: authoritative category set from the categories endpoint

All operations are coroutines meant to run on a single event loop. Blocking
transport calls run in worker threads; caches are only replaced on the loop,
in one step after the awaited response arrives. Each cache carries a request
generation so that a response to an older request never overwrites the
result of a newer one.

Create, update and delete go straight to the task store and leave the caches
alone; callers follow a successful write with ``resync()``. Only drag-driven
status changes are applied optimistically (see ``taskboard.store.drag``).
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from taskboard.engine.categories import (
    CategorySet,
    categories_from_tasks,
    is_known,
    merge_observed,
    set_authoritative,
)
from taskboard.engine.normalizer import normalize_task, normalize_tasks
from taskboard.engine.stats import compute_stats
from taskboard.errors import PayloadValidationError, TransportError
from taskboard.models.stats import StatsSnapshot
from taskboard.models.task import Task, TaskPayload, safe_str
from taskboard.models.task_factory import validate_payload
from taskboard.store.drag import DragTransition, TransitionResult

logger = logging.getLogger(__name__)

VISIBLE = "visible_tasks"
ALL = "all_tasks"
CATEGORIES = "categories"


def _noop(*args: Any) -> None:
    return None


@dataclass
class StoreCallbacks:
    """Hooks the view layer registers with the store.

    on_render: cache contents changed; redraw from the store's snapshots
    on_notify: (message, is_error) for every success and failure
    on_categories: authoritative category set replaced
    on_observed_categories: category set for pickers widened from tasks
    """

    on_render: Callable[[], None] = _noop
    on_notify: Callable[[str, bool], None] = _noop
    on_categories: Callable[[CategorySet], None] = _noop
    on_observed_categories: Callable[[CategorySet], None] = _noop


class TaskStore:
    """Task caches plus the operations that reconcile them with the server."""

    def __init__(self, transport: Any, callbacks: Optional[StoreCallbacks] = None):
        """Initialize an empty store.

        Args:
            transport: Object with the TaskApiClient methods (fetch_categories,
                fetch_tasks, get_task, create_task, update_task, delete_task)
            callbacks: View hooks; no-ops when omitted
        """
        self.transport = transport
        self.callbacks = callbacks or StoreCallbacks()

        self.visible_tasks: List[Task] = []
        self.all_tasks: List[Task] = []
        self.categories: CategorySet = ()
        self.observed_categories: CategorySet = ()
        self.current_category_filter: str = ""

        self._generations: Dict[str, int] = {VISIBLE: 0, ALL: 0, CATEGORIES: 0}
        self.drag = DragTransition(self)

    # Plumbing

    async def call_transport(self, func: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking transport call without blocking the event loop."""
        return await asyncio.to_thread(func, *args)

    def render(self) -> None:
        self.callbacks.on_render()

    def notify(self, message: str, is_error: bool = False) -> None:
        self.callbacks.on_notify(message, is_error)

    def _begin(self, cache: str) -> int:
        self._generations[cache] += 1
        return self._generations[cache]

    def _is_stale(self, cache: str, generation: int) -> bool:
        if self._generations[cache] != generation:
            logger.debug(f"Discarding stale response for {cache} (generation {generation})")
            return True
        return False

    # Queries

    def find_task(self, task_id: str) -> Optional[Task]:
        """Visible task with ``task_id``, or None."""
        for task in self.visible_tasks:
            if task.id == task_id:
                return task
        return None

    def stats(self) -> StatsSnapshot:
        """Statistics over the whole task set, regardless of the filter."""
        return compute_stats(self.all_tasks)

    def picker_categories(self) -> CategorySet:
        """Categories to offer in selection widgets."""
        return self.observed_categories or self.categories

    # Loading

    async def load_categories(self) -> CategorySet:
        """Replace the authoritative category set.

        Best-effort: on failure the set becomes empty and the error is only
        logged, so task viewing is never blocked. Picker categories are only
        reset by a successful load.
        """
        generation = self._begin(CATEGORIES)
        try:
            names = await self.call_transport(self.transport.fetch_categories)
        except TransportError as e:
            if self._is_stale(CATEGORIES, generation):
                return self.categories
            logger.warning(f"Failed to load categories: {type(e).__name__}: {str(e)}")
            self.categories = ()
            self.callbacks.on_categories(self.categories)
            return self.categories

        if self._is_stale(CATEGORIES, generation):
            return self.categories

        self.categories = set_authoritative(names)
        self.observed_categories = self.categories
        logger.debug(f"Loaded {len(self.categories)} categories")
        self.callbacks.on_categories(self.categories)
        self.callbacks.on_observed_categories(self.observed_categories)
        return self.categories

    async def load_tasks(self, category_filter: str = "") -> bool:
        """Load the visible tasks for a category filter and refresh stats data.

        With a filter, a second unfiltered request refreshes ``all_tasks``;
        without one, the visible list already is the full set and is reused.

        Args:
            category_filter: Category name, or "" for all tasks

        Returns:
            True if the loaded tasks were applied, False on failure or when a
            newer load superseded this one
        """
        category = safe_str(category_filter)
        self.current_category_filter = category
        generation = self._begin(VISIBLE)

        try:
            rows = await self.call_transport(self.transport.fetch_tasks, category)
        except TransportError as e:
            if self._is_stale(VISIBLE, generation):
                return False
            logger.error(f"Failed to load tasks for {category!r}: {type(e).__name__}: {str(e)}")
            self.notify(f"Load failed: {e}", True)
            return False

        if self._is_stale(VISIBLE, generation):
            return False

        self.visible_tasks = normalize_tasks(rows)
        logger.debug(f"Loaded {len(self.visible_tasks)} tasks for {category!r}")
        self.render()

        self.observed_categories = merge_observed(
            self.picker_categories(), categories_from_tasks(self.visible_tasks)
        )
        self.callbacks.on_observed_categories(self.observed_categories)

        if category:
            return await self._load_all_tasks()

        self._begin(ALL)
        self.all_tasks = list(self.visible_tasks)
        self.render()
        return True

    async def _load_all_tasks(self) -> bool:
        generation = self._begin(ALL)
        try:
            rows = await self.call_transport(self.transport.fetch_tasks, "")
        except TransportError as e:
            if self._is_stale(ALL, generation):
                return False
            logger.error(f"Failed to load all tasks for stats: {type(e).__name__}: {str(e)}")
            self.notify(f"Load failed: {e}", True)
            return False

        if self._is_stale(ALL, generation):
            return False

        self.all_tasks = normalize_tasks(rows)
        logger.debug(f"Loaded {len(self.all_tasks)} tasks for stats")
        self.render()
        return True

    async def load_task(self, task_id: str) -> Optional[Task]:
        """Fetch a single task, refreshing its visible copy if present.

        Returns:
            The normalized task, or None on failure
        """
        try:
            raw = await self.call_transport(self.transport.get_task, task_id)
        except TransportError as e:
            logger.error(f"Failed to load task {task_id}: {type(e).__name__}: {str(e)}")
            self.notify(f"Failed to load task: {e}", True)
            return None

        task = normalize_task(raw)
        if not task.id:
            logger.error(f"Task {task_id} response has no id")
            self.notify("Failed to load task: invalid task record", True)
            return None

        for index, cached in enumerate(self.visible_tasks):
            if cached.id == task_id:
                self.visible_tasks[index] = task
                self.render()
                break
        return task

    async def reconcile_category_filter(self) -> bool:
        """Drop a filter on a category that no longer exists.

        Returns:
            True if the filter was reset (and an unfiltered load ran)
        """
        current = self.current_category_filter
        if not current or is_known(self.categories, current):
            return False

        logger.info(f"Category filter {current!r} no longer exists; showing all tasks")
        self.current_category_filter = ""
        await self.load_tasks("")
        return True

    async def resync(self) -> None:
        """Re-synchronize all caches after a write."""
        await self.load_categories()
        if not await self.reconcile_category_filter():
            await self.load_tasks(self.current_category_filter)

    async def refresh(self) -> None:
        """Reload tasks for the current filter, then the categories."""
        await self.load_tasks(self.current_category_filter)
        await self.load_categories()

    # Writes

    def _validate(self, payload: TaskPayload) -> bool:
        try:
            validate_payload(payload)
        except PayloadValidationError as e:
            logger.debug(f"Rejected payload: {e.message}")
            self.notify(e.message, True)
            return False
        return True

    async def create_task(self, payload: TaskPayload) -> bool:
        """Create a task on the server. Caches are left for ``resync()``."""
        if not self._validate(payload):
            return False
        try:
            await self.call_transport(self.transport.create_task, payload)
        except TransportError as e:
            logger.error(f"Failed to create task {payload.title[:50]!r}: {type(e).__name__}: {str(e)}")
            self.notify(f"Save failed: {e}", True)
            return False
        self.notify("Created.")
        return True

    async def update_task(self, task_id: str, payload: TaskPayload) -> bool:
        """Replace a task on the server. Caches are left for ``resync()``."""
        if not self._validate(payload):
            return False
        try:
            await self.call_transport(self.transport.update_task, task_id, payload)
        except TransportError as e:
            logger.error(f"Failed to update task {task_id}: {type(e).__name__}: {str(e)}")
            self.notify(f"Save failed: {e}", True)
            return False
        self.notify("Updated.")
        return True

    async def delete_task(self, task_id: str) -> bool:
        """Delete a task on the server. Caches are left for ``resync()``."""
        try:
            await self.call_transport(self.transport.delete_task, task_id)
        except TransportError as e:
            logger.error(f"Failed to delete task {task_id}: {type(e).__name__}: {str(e)}")
            self.notify(f"Delete failed: {e}", True)
            return False
        self.notify("Deleted.")
        return True

    async def move_task(self, task_id: str, target_status: Any) -> TransitionResult:
        """Drag a visible task to another column (optimistic)."""
        return await self.drag.drop(task_id, target_status)

    def visible_snapshot(self) -> Sequence[Task]:
        """Read-only view of the visible cache for renderers."""
        return tuple(self.visible_tasks)
