#!/usr/bin/env python3
"""
TODO MATRIX - CLI Interface
===========================
Command shell driving one in-memory matrix for the life of the process.
Nothing is saved: the board starts empty every run.

Usage:
    todo-matrix                       Interactive session
    todo-matrix --script day.txt      Replay commands from a file
    echo "add buy milk" | todo-matrix

Commands:
    add buy milk                      Add to the end of DO FIRST
    toggle 3f2a                       Toggle completion (id or unique id prefix)
    edit 3f2a buy oat milk            Change the text
    delete 3f2a                       Delete
    drag do_first 0 do_later 0        Move by drag coordinates
    drag do_first 0                   Cancelled drag (no destination)
    show [--json]                     Print the board
    quit
"""

import argparse
import json
import logging
import shlex
import sys
from typing import Iterable, Iterator, Optional, TextIO

from .config import get_log_level
from .drag import DragLocation, DragResult
from .exceptions import MatrixError, ValidationError
from .manager import TaskStore
from .schema import Partition, Priority, to_priority

logger = logging.getLogger("todo_matrix.cli")

PROMPT = "matrix> "


class CommandError(Exception):
    """A command line could not be parsed"""


class HelpShown(Exception):
    """A command line only asked for help, which has already been printed"""


class _LineParser(argparse.ArgumentParser):
    """ArgumentParser that reports errors instead of exiting the process"""

    def exit(self, status=0, message=None):
        if status == 0:
            raise HelpShown()
        raise CommandError(message or "")

    def error(self, message):
        raise CommandError(f"{self.prog}: {message}")


def build_command_parser() -> argparse.ArgumentParser:
    """Parser for a single session command"""
    parser = _LineParser(prog="", add_help=False)
    subparsers = parser.add_subparsers(dest="command", parser_class=_LineParser)

    add_parser = subparsers.add_parser("add", help="Add a task to DO FIRST")
    add_parser.add_argument("text", nargs="+", help="Task text")

    toggle_parser = subparsers.add_parser("toggle", help="Toggle task completion")
    toggle_parser.add_argument("task_id", help="Task ID or unique prefix")

    delete_parser = subparsers.add_parser("delete", help="Delete a task")
    delete_parser.add_argument("task_id", help="Task ID or unique prefix")

    edit_parser = subparsers.add_parser("edit", help="Change task text")
    edit_parser.add_argument("task_id", help="Task ID or unique prefix")
    edit_parser.add_argument("text", nargs="+", help="New text")

    drag_parser = subparsers.add_parser("drag", help="Move a task by drag coordinates")
    drag_parser.add_argument("source_bucket", help="Source bucket")
    drag_parser.add_argument("source_index", type=int, help="Index in source bucket")
    drag_parser.add_argument("dest_bucket", nargs="?", help="Destination bucket (omit to cancel)")
    drag_parser.add_argument("dest_index", nargs="?", type=int, help="Index after the task is lifted out")

    show_parser = subparsers.add_parser("show", help="Print the board")
    show_parser.add_argument("--json", action="store_true", help="Output as JSON")

    subparsers.add_parser("help", help="List commands")
    subparsers.add_parser("quit", help="End the session")

    return parser


def parse_bucket(token: str) -> Priority:
    """Accept do_first, DO-FIRST, 'do first' for Priority.DO_FIRST"""
    return to_priority(token.strip().upper().replace("-", "_").replace(" ", "_"))


def resolve_task_id(partition: Partition, token: str) -> str:
    """Expand a unique id prefix to the full task id"""
    if partition.get_task(token) is not None:
        return token

    matches = [
        task.id
        for section in partition.sections
        for task in section.tasks
        if task.id.startswith(token)
    ]
    if len(matches) > 1:
        raise ValidationError(f"Ambiguous task id prefix: {token} ({len(matches)} matches)", field="id")
    return matches[0] if matches else token


def execute(store: TaskStore, args: argparse.Namespace, out: TextIO) -> None:
    """Run one parsed command against the store"""
    if args.command == "add":
        partition = store.add(" ".join(args.text))
        task = partition.section(Priority.DO_FIRST).tasks[-1]
        print(f"✅ Added: [{task.id}] {task.text}", file=out)

    elif args.command == "toggle":
        task_id = resolve_task_id(store.get_snapshot(), args.task_id)
        task = store.toggle_completion(task_id).get_task(task_id)
        if task:
            print(f"{'✅ Done' if task.completed else '⬜ Reopened'}: {task.text}", file=out)
        else:
            print(f"❌ Task not found: {args.task_id}", file=out)

    elif args.command == "delete":
        task_id = resolve_task_id(store.get_snapshot(), args.task_id)
        task = store.get_snapshot().get_task(task_id)
        store.delete(task_id)
        if task:
            print(f"🗑️ Deleted: {task.text}", file=out)
        else:
            print(f"❌ Task not found: {args.task_id}", file=out)

    elif args.command == "edit":
        task_id = resolve_task_id(store.get_snapshot(), args.task_id)
        task = store.update_text(task_id, " ".join(args.text)).get_task(task_id)
        if task:
            print(f"✏️ Updated: [{task.id}] {task.text}", file=out)
        else:
            print(f"❌ Task not found: {args.task_id}", file=out)

    elif args.command == "drag":
        if (args.dest_bucket is None) != (args.dest_index is None):
            raise ValidationError("Destination needs both a bucket and an index", field="destination")
        source = DragLocation(bucket_id=parse_bucket(args.source_bucket), index=_index(args.source_index))
        destination = None
        if args.dest_bucket is not None:
            destination = DragLocation(bucket_id=parse_bucket(args.dest_bucket), index=_index(args.dest_index))
        store.apply_drag(DragResult(source=source, destination=destination))
        if destination is None:
            print("↩️ Drag cancelled", file=out)
        else:
            print(f"↔️ Moved to {destination.bucket_id.value}[{destination.index}]", file=out)

    elif args.command == "show":
        partition = store.get_snapshot()
        if args.json:
            print(json.dumps(partition.model_dump(mode="json"), indent=2), file=out)
        else:
            print(store.get_status_report(), file=out)

    elif args.command == "help":
        print(__doc__.split("Commands:", 1)[1].rstrip(), file=out)


def _index(value: int) -> int:
    if value < 0:
        raise ValidationError(f"Index must not be negative: {value}", field="index")
    return value


def run_session(store: TaskStore, lines: Iterable[str], out: Optional[TextIO] = None) -> int:
    """
    Execute command lines in order.

    Blank lines and lines starting with '#' are skipped. A failing line is
    reported and the session continues.

    Returns:
        Number of lines that failed
    """
    out = out or sys.stdout
    parser = build_command_parser()
    failures = 0

    for lineno, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        try:
            args = parser.parse_args(shlex.split(line))
        except HelpShown:
            continue
        except (CommandError, ValueError) as e:
            print(f"❌ line {lineno}: {str(e).strip() or 'invalid command'}", file=out)
            failures += 1
            continue

        if args.command is None:
            continue
        if args.command == "quit":
            break

        try:
            execute(store, args, out)
        except MatrixError as e:
            print(f"❌ line {lineno}: {e}", file=out)
            failures += 1

    return failures


def _prompt_lines() -> Iterator[str]:
    while True:
        try:
            yield input(PROMPT)
        except EOFError:
            print()
            return


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="todo-matrix",
        description="TODO MATRIX - Eisenhower matrix task organizer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("Commands:", 1)[1],
    )
    parser.add_argument("--script", help="Read commands from a file instead of stdin")
    parser.add_argument("--log-level", default=get_log_level(), help="Logging level (default: %(default)s)")
    parser.add_argument("--strict", action="store_true", help="Exit with status 1 if any command failed")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    store = TaskStore()

    if args.script:
        with open(args.script, "r", encoding="utf-8") as f:
            failures = run_session(store, f)
    elif sys.stdin.isatty():
        failures = run_session(store, _prompt_lines())
    else:
        failures = run_session(store, sys.stdin)

    logger.debug(f"Session ended with {failures} failed command(s)")
    return 1 if args.strict and failures else 0


if __name__ == "__main__":
    sys.exit(main())
