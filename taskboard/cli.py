"""Command line board for taskboard.

A thin view over TaskStore: every command runs store operations on one
event loop, and output is produced only from store snapshots and
notifications.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional, TextIO

from taskboard.config import Settings, load_settings
from taskboard.engine.board import board_title, filter_and_sort, format_due, group_by_status
from taskboard.engine.categories import CategorySet
from taskboard.engine.stats import format_percent
from taskboard.integrations.task_api import TaskApiClient
from taskboard.models.constants import SORT_MODES, SORT_RECENT, UNCATEGORIZED_LABEL
from taskboard.models.stats import StatsSnapshot
from taskboard.models.task import Task, code_to_label
from taskboard.models.task_factory import build_payload, payload_from_task
from taskboard.preferences import load_theme, save_theme, toggle_theme
from taskboard.store.drag import TransitionState
from taskboard.store.task_store import StoreCallbacks, TaskStore


class TerminalView:
    """Store callbacks that write to the terminal."""

    def __init__(self, out: TextIO = sys.stdout, err: TextIO = sys.stderr):
        self.out = out
        self.err = err
        self.had_error = False
        self.render_count = 0
        self.picker_categories: CategorySet = ()

    def callbacks(self) -> StoreCallbacks:
        return StoreCallbacks(
            on_render=self.on_render,
            on_notify=self.on_notify,
            on_categories=self.on_categories,
            on_observed_categories=self.on_categories,
        )

    def on_render(self) -> None:
        self.render_count += 1

    def on_notify(self, message: str, is_error: bool) -> None:
        if is_error:
            self.had_error = True
            print(f"Error: {message}", file=self.err)
        else:
            print(message, file=self.out)

    def on_categories(self, categories: CategorySet) -> None:
        self.picker_categories = categories


def format_card(task: Task) -> str:
    category = task.category or UNCATEGORIZED_LABEL
    return f"  [{category}] {task.title} ({format_due(task.due_date)})  #{task.id}"


def format_board(title: str, tasks: List[Task]) -> str:
    lines = [title, ""]
    for status, column in group_by_status(tasks).items():
        lines.append(f"{code_to_label(status)} ({len(column)})")
        lines.extend(format_card(task) for task in column)
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def format_stats(stats: StatsSnapshot) -> str:
    lines = [
        f"Total tasks: {stats.total}",
        f"Completed: {format_percent(stats.completed_percent)}",
        "",
        "By status:",
    ]
    for row in stats.by_status:
        lines.append(f"  {row.label:<14} {row.count:>4}  {format_percent(row.percent)}")
    lines.append("")
    lines.append("By category:")
    if not stats.by_category:
        lines.append("  No data")
    for row in stats.by_category:
        lines.append(f"  {row.label:<14} {row.count:>4}  {format_percent(row.percent)}")
    return "\n".join(lines) + "\n"


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="taskboard",
        description="taskboard - a three-column task board",
    )
    subparsers = parser.add_subparsers(dest="command")

    board_parser = subparsers.add_parser("board", help="Show the board")
    board_parser.add_argument("--category", default="", help="Only show this category")
    board_parser.add_argument("--search", default="", help="Filter titles by text")
    board_parser.add_argument("--sort", choices=SORT_MODES, default=SORT_RECENT, help="Card order")

    subparsers.add_parser("stats", help="Show completion statistics")

    show_parser = subparsers.add_parser("show", help="Show one task")
    show_parser.add_argument("task_id", help="Task ID")

    add_parser = subparsers.add_parser("add", help="Create a task")
    add_parser.add_argument("--title", required=True, help="Task title")
    add_parser.add_argument("--category", required=True, help="Task category")
    add_parser.add_argument("--due", default="", help="Due date (YYYY-MM-DD)")
    add_parser.add_argument("--status", default="Not Started", help="Status label or code")
    add_parser.add_argument("--description", default="", help="Description")

    edit_parser = subparsers.add_parser("edit", help="Edit a task")
    edit_parser.add_argument("task_id", help="Task ID")
    edit_parser.add_argument("--title", help="New title")
    edit_parser.add_argument("--category", help="New category")
    edit_parser.add_argument("--due", help="New due date")
    edit_parser.add_argument("--status", help="New status label or code")
    edit_parser.add_argument("--description", help="New description")

    move_parser = subparsers.add_parser("move", help="Move a task to another column")
    move_parser.add_argument("task_id", help="Task ID")
    move_parser.add_argument("status", help="Target status label or code")
    move_parser.add_argument("--category", default="", help="Category filter in effect")

    delete_parser = subparsers.add_parser("delete", help="Delete a task")
    delete_parser.add_argument("task_id", help="Task ID")

    theme_parser = subparsers.add_parser("theme", help="Show or change the theme")
    theme_parser.add_argument("value", nargs="?", choices=["light", "dark", "toggle"], help="New theme")

    return parser


async def cmd_board(store: TaskStore, view: TerminalView, settings: Settings, args: argparse.Namespace) -> None:
    await store.load_categories()
    if await store.load_tasks(args.category):
        tasks = filter_and_sort(store.visible_snapshot(), args.search, args.sort)
        view.out.write(format_board(board_title(settings.owner_name), tasks))


async def cmd_stats(store: TaskStore, view: TerminalView, settings: Settings, args: argparse.Namespace) -> None:
    if await store.load_tasks(""):
        view.out.write(format_stats(store.stats()))


async def cmd_show(store: TaskStore, view: TerminalView, settings: Settings, args: argparse.Namespace) -> None:
    task = await store.load_task(args.task_id)
    if task is None:
        return
    view.out.write(
        f"{task.title}\n"
        f"  id:          {task.id}\n"
        f"  status:      {task.status_label}\n"
        f"  category:    {task.category or UNCATEGORIZED_LABEL}\n"
        f"  due:         {format_due(task.due_date)}\n"
        f"  description: {task.description}\n"
    )


async def cmd_add(store: TaskStore, view: TerminalView, settings: Settings, args: argparse.Namespace) -> None:
    payload = build_payload(
        title=args.title,
        new_category=args.category,
        due_date=args.due,
        status=args.status,
        description=args.description,
    )
    if await store.create_task(payload):
        await store.resync()


async def cmd_edit(store: TaskStore, view: TerminalView, settings: Settings, args: argparse.Namespace) -> None:
    task = await store.load_task(args.task_id)
    if task is None:
        return
    payload = payload_from_task(task, {
        "title": args.title,
        "category": args.category,
        "due_date": args.due,
        "status": args.status,
        "description": args.description,
    })
    if await store.update_task(task.id, payload):
        await store.resync()


async def cmd_move(store: TaskStore, view: TerminalView, settings: Settings, args: argparse.Namespace) -> None:
    if not await store.load_tasks(args.category):
        return
    result = await store.move_task(args.task_id, args.status)
    if result.state == TransitionState.IGNORED:
        view.out.write(f"Nothing to move for task {args.task_id}.\n")


async def cmd_delete(store: TaskStore, view: TerminalView, settings: Settings, args: argparse.Namespace) -> None:
    if await store.delete_task(args.task_id):
        await store.resync()


COMMANDS = {
    "board": cmd_board,
    "stats": cmd_stats,
    "show": cmd_show,
    "add": cmd_add,
    "edit": cmd_edit,
    "move": cmd_move,
    "delete": cmd_delete,
}


def cmd_theme(settings: Settings, args: argparse.Namespace, out: TextIO) -> int:
    path = settings.preferences_file
    if args.value is None:
        theme = load_theme(path)
    elif args.value == "toggle":
        theme = toggle_theme(path)
    else:
        theme = save_theme(path, args.value)
    print(f"Theme: {theme}", file=out)
    return 0


def run_cli(
    argv: Optional[List[str]] = None,
    settings: Optional[Settings] = None,
    transport: Optional[object] = None,
    view: Optional[TerminalView] = None,
) -> int:
    """Parse arguments and dispatch to command handlers.

    Returns:
        Exit code (0 for success, 1 if any operation reported an error)
    """
    parser = create_parser()
    args = parser.parse_args(argv)
    settings = settings or load_settings()
    view = view or TerminalView()

    if args.command is None:
        args = parser.parse_args(["board"])

    if args.command == "theme":
        return cmd_theme(settings, args, view.out)

    store = TaskStore(transport or TaskApiClient(settings), view.callbacks())
    asyncio.run(COMMANDS[args.command](store, view, settings, args))
    return 1 if view.had_error else 0


def main() -> None:
    settings = load_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    sys.exit(run_cli(settings=settings))


if __name__ == "__main__":
    main()
