"""
TODO MATRIX - Eisenhower Matrix Task Organizer
==============================================

Tasks live in four fixed buckets (DO FIRST, DO LATER, DELEGATE, ELIMINATE)
and move between and within them by drag-and-drop.

Usage:
    from todo_matrix import TaskStore, DragResult, Priority

    store = TaskStore()
    store.add("buy milk")
    store.add("file taxes")

    # Drag "buy milk" into DO LATER
    store.apply_drag(DragResult.from_payload({
        "source": {"droppableId": "DO_FIRST", "index": 0},
        "destination": {"droppableId": "DO_LATER", "index": 0},
    }))

    snapshot = store.get_snapshot()
    print(snapshot[Priority.DO_LATER].tasks)
    print(store.get_status_report())
"""

from .schema import (
    MATRIX_SECTIONS,
    PRIORITY_ORDER,
    Partition,
    Priority,
    Section,
    Task,
    create_partition,
    to_priority,
)
from .exceptions import (
    InvalidIndexError,
    MatrixError,
    UnknownBucketError,
    ValidationError,
)
from .drag import DragLocation, DragResult, resolve_drag
from .manager import TaskStore

__version__ = "1.0.0"
__all__ = [
    "TaskStore",
    "Partition",
    "Section",
    "Task",
    "Priority",
    "PRIORITY_ORDER",
    "MATRIX_SECTIONS",
    "create_partition",
    "to_priority",
    "DragLocation",
    "DragResult",
    "resolve_drag",
    "MatrixError",
    "ValidationError",
    "InvalidIndexError",
    "UnknownBucketError",
]
