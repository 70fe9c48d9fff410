"""
TODO MATRIX - Configuration
===========================
Settings read from environment variables, with defaults.

    TODO_MATRIX_LOG_LEVEL   logging level for the CLI (default INFO)
    TODO_MATRIX_ID_LENGTH   truncate generated task ids (default 0 = full uuid4)
"""

import os
import uuid


def get_log_level() -> str:
    """Get logging level name"""
    return os.environ.get("TODO_MATRIX_LOG_LEVEL", "INFO").upper()


def get_id_length() -> int:
    """Get generated id length (0 keeps the full uuid)"""
    raw = os.environ.get("TODO_MATRIX_ID_LENGTH", "0")
    try:
        return max(0, int(raw))
    except ValueError:
        return 0


def new_task_id() -> str:
    """Default id factory for new tasks"""
    task_id = str(uuid.uuid4())
    length = get_id_length()
    return task_id[:length] if length else task_id
