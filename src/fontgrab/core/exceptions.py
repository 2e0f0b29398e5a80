"""Custom exceptions for the web font harvester."""

from typing import Any


class FontgrabError(Exception):
    """Base exception for all fontgrab errors."""

    def __init__(self, message: str, details: Any | None = None):
        super().__init__(message)
        self.details = details


class NetworkError(FontgrabError):
    """Exception raised for transport failures and unsuccessful HTTP responses."""


class ParseError(FontgrabError):
    """Exception raised when fetched or embedded content cannot be interpreted."""


class StorageError(FontgrabError):
    """Exception raised for directory and file operation errors."""


class SelectionError(FontgrabError):
    """Exception raised when selection criteria cannot be resolved."""


class NotFoundError(FontgrabError):
    """Exception raised when an expected resource yields nothing."""


class ConfigurationError(FontgrabError):
    """Exception raised for configuration errors."""


# Network errors
class HTTPStatusError(NetworkError):
    """Exception raised for non-2xx HTTP responses."""

    def __init__(self, url: str, status_code: int):
        super().__init__(f"HTTP {status_code} for {url}", details={"status_code": status_code})
        self.url = url
        self.status_code = status_code


class NetworkConnectionError(NetworkError):
    """Exception raised when a connection cannot be established."""

    def __init__(self, url: str, error: str):
        super().__init__(f"Request to {url} failed: {error}")


class NetworkTimeoutError(NetworkError):
    """Exception raised when a request times out."""

    def __init__(self, url: str):
        super().__init__(f"Request to {url} timed out")


class InvalidTargetUrlError(NetworkError):
    """Exception raised when the page URL cannot be requested at all."""

    def __init__(self, url: str):
        super().__init__(f"Invalid URL: {url}")


# Parse errors
class DataUrlError(ParseError):
    """Exception raised for malformed inline data payloads."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid data URL: {reason}")


class ContentDecodeError(ParseError):
    """Exception raised when a response body cannot be decoded as text."""

    def __init__(self, url: str, error: str):
        super().__init__(f"Failed to decode response body from {url}: {error}")


# Storage errors
class DirectoryCreateError(StorageError):
    """Exception raised when an output directory cannot be created."""

    def __init__(self, directory: str, error: str):
        super().__init__(f"Could not create output directory {directory}: {error}")


class FileWriteError(StorageError):
    """Exception raised when a font file cannot be written."""

    def __init__(self, file_path: str, error: str):
        super().__init__(f"Failed writing file {file_path}: {error}")


# Selection errors
class EmptySelectionError(SelectionError):
    """Exception raised when no selection clause is active."""

    def __init__(self):
        super().__init__("No selection criteria provided")


class NoMatchingFontsError(SelectionError):
    """Exception raised when active selection clauses match no font."""

    def __init__(self):
        super().__init__("No fonts matched the provided selectors")


# Not found errors
class NoFontsFoundError(NotFoundError):
    """Exception raised when a page references no font files."""

    def __init__(self, url: str):
        super().__init__(f"No fonts were found on {url}")
        self.url = url


# Configuration errors
class ConfigFileNotFoundError(ConfigurationError):
    """Exception raised when configuration file is not found."""

    def __init__(self, config_path: str):
        super().__init__(f"Configuration file not found: {config_path}")


class EmptyConfigFileError(ConfigurationError):
    """Exception raised when configuration file is empty."""

    def __init__(self, config_path: str):
        super().__init__(f"Empty configuration file: {config_path}")


class InvalidYamlError(ConfigurationError):
    """Exception raised for invalid YAML content."""

    def __init__(self, config_path: str, error: str):
        super().__init__(f"Invalid YAML in {config_path}: {error}")


class ConfigLoadError(ConfigurationError):
    """Exception raised when configuration loading fails."""

    def __init__(self, error: str):
        super().__init__(f"Failed to load configuration: {error}")


class TimeoutSecondsPositiveError(ValueError):
    """Exception raised for non-positive timeouts."""

    def __init__(self):
        super().__init__("timeout must be positive")


# Worker errors
class WorkerDisconnectedError(FontgrabError):
    """Exception raised when a background worker ends without a terminal message."""

    def __init__(self, task_name: str):
        super().__init__(f"{task_name} worker disconnected unexpectedly")
