"""
TODO MATRIX - Task Store
========================
Owns the current partition and routes every mutation through one of a
small set of operations. Each operation builds a new Partition and swaps
it in; sections and tasks that did not change are shared with the
previous snapshot, so a renderer can detect changes by identity.

Rejected operations raise and leave the current snapshot untouched.
Lookups by an unknown task id are no-ops, since late UI events (a toggle
arriving after a delete) are expected.
"""

import logging
import threading
from typing import Callable, List, Optional

from .config import new_task_id
from .drag import DragResult, resolve_drag
from .exceptions import InvalidIndexError, ValidationError
from .schema import Partition, Priority, Section, Task, create_partition, to_priority

logger = logging.getLogger("todo_matrix")


class TaskStore:
    """
    Single owner of the matrix state.

    Key features:
    - add / toggle / delete / rename / move
    - immutable snapshots with structural sharing
    - one mutation in flight at a time
    """

    def __init__(
        self,
        id_factory: Optional[Callable[[], str]] = None,
        partition: Optional[Partition] = None
    ):
        self._id_factory = id_factory or new_task_id
        self._partition = partition if partition is not None else create_partition()
        self._lock = threading.Lock()

    def get_snapshot(self) -> Partition:
        """Current read-only partition"""
        return self._partition

    # ========================================
    # TASK OPERATIONS
    # ========================================

    def add(self, text: str) -> Partition:
        """Create a task at the end of DO_FIRST"""
        _require_text(text)

        with self._lock:
            task_id = self._id_factory()
            if self._partition.find(task_id) is not None:
                raise ValidationError(f"Duplicate task id: {task_id}", field="id")

            task = Task(id=task_id, text=text, completed=False, priority=Priority.DO_FIRST)
            section = self._partition.section(Priority.DO_FIRST)
            partition = self._partition = self._partition.replace_sections(
                section.model_copy(update={"tasks": section.tasks + (task,)})
            )

        logger.info(f"➕ Added task {task_id} to {Priority.DO_FIRST.value}")
        return partition

    def toggle_completion(self, task_id: str) -> Partition:
        """Flip the completed flag of a task"""
        with self._lock:
            task = self._partition.get_task(task_id)
            if task is None:
                logger.debug(f"Toggle ignored, task not found: {task_id}")
                return self._partition
            updated = task.model_copy(update={"completed": not task.completed})
            partition = self._replace_task(updated)

        logger.info(f"{'✅' if updated.completed else '⬜'} Task {task_id} completed={updated.completed}")
        return partition

    def delete(self, task_id: str) -> Partition:
        """Remove a task from whichever section holds it"""
        with self._lock:
            found = self._partition.find(task_id)
            if found is None:
                logger.debug(f"Delete ignored, task not found: {task_id}")
                return self._partition
            section, index, _ = found
            tasks = section.tasks[:index] + section.tasks[index + 1:]
            partition = self._partition = self._partition.replace_sections(
                section.model_copy(update={"tasks": tasks})
            )

        logger.info(f"🗑️ Deleted task {task_id} from {section.id.value}")
        return partition

    def update_text(self, task_id: str, new_text: str) -> Partition:
        """Replace the text of a task, keeping its place and completion"""
        _require_text(new_text)

        with self._lock:
            task = self._partition.get_task(task_id)
            if task is None:
                logger.debug(f"Edit ignored, task not found: {task_id}")
                return self._partition
            partition = self._replace_task(task.model_copy(update={"text": new_text}))

        logger.info(f"✏️ Updated text of task {task_id}")
        return partition

    def move(
        self,
        source_bucket_id,
        source_index: int,
        dest_bucket_id,
        dest_index: int
    ) -> Partition:
        """
        Move one task within a section or across sections.

        dest_index is a position in the destination list after the task has
        been removed from its source, which is how drag libraries report
        drops. Valid values run from 0 to len(destination) inclusive, the
        upper bound meaning "append".
        """
        source_id = to_priority(source_bucket_id)
        dest_id = to_priority(dest_bucket_id)

        with self._lock:
            source = self._partition.section(source_id)
            if not _is_index(source_index) or not 0 <= source_index < source.task_count:
                logger.warning(f"⛔ Move rejected: no task at {source_id.value}[{source_index}]")
                raise InvalidIndexError(source_id.value, source_index, source.task_count)

            remaining = list(source.tasks)
            task = remaining.pop(source_index)

            dest_tasks = remaining if dest_id == source_id else list(self._partition.section(dest_id).tasks)
            if not _is_index(dest_index) or not 0 <= dest_index <= len(dest_tasks):
                logger.warning(f"⛔ Move rejected: cannot insert at {dest_id.value}[{dest_index}]")
                raise InvalidIndexError(dest_id.value, dest_index, len(dest_tasks), insertion=True)

            if dest_id == source_id and dest_index == source_index:
                logger.debug(f"Move of {task.id} to its own position ignored")
                return self._partition

            if dest_id == source_id:
                dest_tasks.insert(dest_index, task)
                updated = [source.model_copy(update={"tasks": tuple(dest_tasks)})]
            else:
                task = task.model_copy(update={"priority": dest_id})
                dest_tasks.insert(dest_index, task)
                dest = self._partition.section(dest_id)
                updated = [
                    source.model_copy(update={"tasks": tuple(remaining)}),
                    dest.model_copy(update={"tasks": tuple(dest_tasks)}),
                ]
            partition = self._partition = self._partition.replace_sections(*updated)

        logger.info(
            f"↔️ Moved task {task.id}: {source_id.value}[{source_index}] -> {dest_id.value}[{dest_index}]"
        )
        return partition

    def apply_drag(self, result: DragResult) -> Partition:
        """Apply a finished drag gesture"""
        return resolve_drag(self, result)

    # ========================================
    # HELPER METHODS
    # ========================================

    def _replace_task(self, task: Task) -> Partition:
        """Swap a task for its updated copy at the same position (lock held)"""
        section, index, _ = self._partition.find(task.id)
        tasks = section.tasks[:index] + (task,) + section.tasks[index + 1:]
        self._partition = self._partition.replace_sections(
            section.model_copy(update={"tasks": tasks})
        )
        return self._partition

    # ========================================
    # REPORTING
    # ========================================

    def get_status_report(self) -> str:
        """Generate human-readable board"""
        partition = self._partition

        lines = [
            "📋 TODO MATRIX",
            f"Progress: {'█' * (partition.progress_pct // 10)}{'░' * (10 - partition.progress_pct // 10)} "
            f"{partition.progress_pct}% ({partition.completed_count}/{partition.task_count})",
        ]

        for section in partition.sections:
            lines.append("")
            lines.append(f"{section.title} [{section.completed_count}/{section.task_count}]")
            lines.extend(_section_lines(section))

        return "\n".join(lines)


def _section_lines(section: Section) -> List[str]:
    if not section.tasks:
        return ["  (empty)"]
    return [
        f"  {index}. {'✅' if task.completed else '⬜'} [{task.id}] {task.text}"
        for index, task in enumerate(section.tasks)
    ]


def _is_index(value) -> bool:
    # bool is an int subclass but never a position
    return isinstance(value, int) and not isinstance(value, bool)


def _require_text(text: str) -> None:
    if not isinstance(text, str) or not text.strip():
        logger.warning("⛔ Rejected blank task text")
        raise ValidationError("Task text must not be empty", field="text")
