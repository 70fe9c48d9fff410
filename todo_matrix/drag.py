"""
TODO MATRIX - Drag Transfer Resolver
====================================
Turns a finished drag gesture into a TaskStore.move call.

A gesture reports where the task was picked up (source) and, if it was
dropped on a bucket, where it landed (destination). A cancelled gesture or
a drop outside every bucket has no destination and changes nothing.

Index convention: destination.index is the position in the destination
list AFTER the dragged task has been lifted out of its source. Dragging
the first of [A, B, C] to sit after C is reported as index 2, not 3.
"""

import logging
from typing import TYPE_CHECKING, Any, Mapping, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .exceptions import UnknownBucketError, ValidationError
from .schema import Partition, Priority

if TYPE_CHECKING:
    from .manager import TaskStore

logger = logging.getLogger("todo_matrix.drag")

# Keys accepted for the bucket id in host payloads
BUCKET_KEYS = ("bucket_id", "bucketId", "droppableId")


class DragLocation(BaseModel):
    """A position inside a bucket"""
    model_config = ConfigDict(frozen=True)

    bucket_id: Priority = Field(validation_alias=AliasChoices(*BUCKET_KEYS))
    index: int = Field(ge=0)


class DragResult(BaseModel):
    """Outcome of one drag gesture; destination is None when cancelled"""
    model_config = ConfigDict(frozen=True)

    source: DragLocation
    destination: Optional[DragLocation] = None

    @property
    def cancelled(self) -> bool:
        return self.destination is None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "DragResult":
        """
        Parse the loosely-shaped event a drag-and-drop UI library emits:

            {"draggableId": "...",
             "source": {"droppableId": "DO_FIRST", "index": 0},
             "destination": {"droppableId": "DO_LATER", "index": 2} | None}

        Unrelated keys are ignored.
        """
        try:
            return cls.model_validate(payload)
        except PydanticValidationError as exc:
            for error in exc.errors():
                loc = error.get("loc") or ()
                if loc and loc[-1] in BUCKET_KEYS and error.get("type") == "enum":
                    raise UnknownBucketError(error.get("input")) from None
            raise ValidationError(
                f"Malformed drag result ({exc.error_count()} error(s)): {exc.errors()[0]['msg']}",
                field="payload",
            ) from exc


def resolve_drag(store: "TaskStore", result: DragResult) -> Partition:
    """Apply a drag result to the store and return the resulting partition"""
    if result.destination is None:
        logger.debug(
            f"Drag from {result.source.bucket_id.value}[{result.source.index}] cancelled"
        )
        return store.get_snapshot()

    return store.move(
        result.source.bucket_id,
        result.source.index,
        result.destination.bucket_id,
        result.destination.index,
    )
