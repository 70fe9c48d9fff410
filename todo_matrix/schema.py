"""
TODO MATRIX - Schema Definition
===============================
Tasks partitioned into the four fixed buckets of an Eisenhower matrix.

All models are frozen. A mutation never edits a model in place, it builds
a new one with model_copy(update=...), so unchanged sections and tasks can
be shared between successive snapshots.
"""

from enum import Enum
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .exceptions import UnknownBucketError


class Priority(str, Enum):
    """Bucket ids, which double as task priorities"""
    DO_FIRST = "DO_FIRST"     # Urgent and important
    DO_LATER = "DO_LATER"     # Important, not urgent
    DELEGATE = "DELEGATE"     # Urgent, not important
    ELIMINATE = "ELIMINATE"   # Neither


PRIORITY_ORDER: Tuple[Priority, ...] = (
    Priority.DO_FIRST,
    Priority.DO_LATER,
    Priority.DELEGATE,
    Priority.ELIMINATE,
)


def to_priority(value) -> Priority:
    """Coerce a bucket id (member or string value) to a Priority"""
    if isinstance(value, Priority):
        return value
    try:
        return Priority(value)
    except (ValueError, TypeError):
        raise UnknownBucketError(value) from None


class Task(BaseModel):
    """Individual task"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    text: str
    completed: bool = False
    priority: Priority = Priority.DO_FIRST

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        # stored as given; only all-whitespace text is refused
        if not value.strip():
            raise ValueError("task text must not be empty")
        return value


class Section(BaseModel):
    """One bucket of the matrix, holding tasks in manual order"""
    model_config = ConfigDict(frozen=True)

    id: Priority
    title: str
    color: str
    tasks: Tuple[Task, ...] = ()

    @property
    def task_count(self) -> int:
        return len(self.tasks)

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.tasks if t.completed)

    def index_of(self, task_id: str) -> Optional[int]:
        """Position of a task in this section, or None"""
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                return index
        return None


class Partition(BaseModel):
    """Complete state: the four sections and their contents"""
    model_config = ConfigDict(frozen=True)

    sections: Tuple[Section, ...]

    @model_validator(mode="after")
    def _check_invariants(self) -> "Partition":
        ids = tuple(section.id for section in self.sections)
        if ids != PRIORITY_ORDER:
            raise ValueError(
                f"sections must be exactly {[p.value for p in PRIORITY_ORDER]}, got {[p.value for p in ids]}"
            )

        seen = set()
        for section in self.sections:
            for task in section.tasks:
                if task.priority != section.id:
                    raise ValueError(
                        f"task {task.id} has priority {task.priority.value} but sits in {section.id.value}"
                    )
                if task.id in seen:
                    raise ValueError(f"task {task.id} appears more than once")
                seen.add(task.id)
        return self

    def __getitem__(self, bucket_id) -> Section:
        return self.section(bucket_id)

    def section(self, bucket_id) -> Section:
        """Get section by bucket id"""
        return self.sections[PRIORITY_ORDER.index(to_priority(bucket_id))]

    def find(self, task_id: str) -> Optional[Tuple[Section, int, Task]]:
        """Locate a task: (section, index, task) or None"""
        for section in self.sections:
            index = section.index_of(task_id)
            if index is not None:
                return section, index, section.tasks[index]
        return None

    def get_task(self, task_id: str) -> Optional[Task]:
        """Get task by ID"""
        found = self.find(task_id)
        return found[2] if found else None

    def replace_sections(self, *updated: Section) -> "Partition":
        """New partition with the given sections swapped in, all others shared"""
        by_id = {section.id: section for section in updated}
        sections = tuple(by_id.get(existing.id, existing) for existing in self.sections)
        return Partition(sections=sections)

    # Completion tracking
    @property
    def task_count(self) -> int:
        return sum(section.task_count for section in self.sections)

    @property
    def completed_count(self) -> int:
        return sum(section.completed_count for section in self.sections)

    @property
    def progress_pct(self) -> int:
        total = self.task_count
        if not total:
            return 0
        return int((self.completed_count / total) * 100)

    @property
    def status_summary(self) -> Dict[str, int]:
        return {section.id.value: section.task_count for section in self.sections}


# ============================================================
# MATRIX LAYOUT
# ============================================================

MATRIX_SECTIONS = [
    {"id": Priority.DO_FIRST, "title": "DO FIRST", "color": "green"},
    {"id": Priority.DO_LATER, "title": "DO LATER", "color": "blue"},
    {"id": Priority.DELEGATE, "title": "DELEGATE", "color": "yellow"},
    {"id": Priority.ELIMINATE, "title": "ELIMINATE", "color": "red"},
]


def create_partition() -> Partition:
    """Create the initial partition: four empty sections"""
    return Partition(sections=tuple(Section(**section_def) for section_def in MATRIX_SECTIONS))
