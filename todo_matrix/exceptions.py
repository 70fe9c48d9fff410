"""
TODO MATRIX - Error Hierarchy
=============================
Every error raised by the store is local and recoverable: the operation
is rejected and the current partition stays as it was.
"""

from typing import Any, Optional


class MatrixError(Exception):
    """Base error for the todo matrix"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        super().__init__(message)
        self.recoverable = recoverable


class ValidationError(MatrixError):
    """Rejected input: blank text, malformed drag payload, duplicate id"""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class InvalidIndexError(MatrixError):
    """Index outside the valid range of a bucket"""

    def __init__(self, bucket_id: Any, index: int, size: int, insertion: bool = False) -> None:
        # insertion ranges include the end position
        upper = size if insertion else size - 1
        valid = f"0..{upper}" if upper >= 0 else "bucket is empty"
        super().__init__(
            f"Index {index} out of range for bucket {bucket_id} ({valid})"
        )
        self.bucket_id = bucket_id
        self.index = index
        self.size = size


class UnknownBucketError(MatrixError):
    """Bucket id is not one of the four fixed priorities"""

    def __init__(self, bucket_id: Any) -> None:
        super().__init__(f"Unknown bucket: {bucket_id!r}")
        self.bucket_id = bucket_id
