"""Utility functions for file handling, logging and parallel execution."""

from .file_utils import (
    is_gzipped,
    open_text_auto,
    read_text_auto,
    ensure_parent_dir,
    log_thread_info
)
from .logging_utils import (
    setup_logging,
    get_logger
)
from .tasks import (
    TaskFailure,
    run_tasks
)

__all__ = [
    'is_gzipped',
    'open_text_auto',
    'read_text_auto',
    'ensure_parent_dir',
    'log_thread_info',
    'setup_logging',
    'get_logger',
    'TaskFailure',
    'run_tasks'
]
