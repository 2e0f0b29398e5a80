"""Core components for web font discovery and download."""

from .config import AppConfig, DownloadConfig, ExtractorConfig, HttpConfig
from .exceptions import (
    FontgrabError,
    NetworkError,
    NotFoundError,
    ParseError,
    SelectionError,
    StorageError,
)
from .models import (
    DownloadFailure,
    DownloadReport,
    FamilyGroup,
    FontFormat,
    FontRecord,
    InferredFontEntry,
    SelectionCriteria,
)

__all__ = [
    "AppConfig",
    "DownloadConfig",
    "DownloadFailure",
    "DownloadReport",
    "ExtractorConfig",
    "FamilyGroup",
    "FontFormat",
    "FontRecord",
    "FontgrabError",
    "HttpConfig",
    "InferredFontEntry",
    "NetworkError",
    "NotFoundError",
    "ParseError",
    "SelectionCriteria",
    "SelectionError",
    "StorageError",
]
