"""Background execution of discovery and download calls."""

from .worker import (
    BackgroundTask,
    ErrorMessage,
    ProgressMessage,
    ResultMessage,
    start_download,
    start_scan,
)

__all__ = [
    "BackgroundTask",
    "ErrorMessage",
    "ProgressMessage",
    "ResultMessage",
    "start_download",
    "start_scan",
]
