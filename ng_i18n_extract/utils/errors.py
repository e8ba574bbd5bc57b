"""
Custom exceptions for the Angular i18n text extractor.

Per-file errors (reading, parsing or rewriting one source file) are caught by
the extractors and turned into warnings. Session-level errors (the source root
is missing, the artifact cannot be written) propagate to the caller.
"""

from typing import Any, Optional


class I18nExtractError(Exception):
    """Base exception for all extractor-specific errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Per-file Exceptions (non-fatal)
# =============================================================================


class SourceFileError(I18nExtractError):
    """Base exception for errors tied to a single source file."""

    def __init__(self, path: str, reason: str) -> None:
        """Initialize with the offending path and the underlying message."""
        message = f"Could not process {path}: {reason}"
        super().__init__(message, {"path": path, "reason": reason})
        self.path = path
        self.reason = reason


class SourceReadError(SourceFileError):
    """A source file could not be read or decoded."""

    pass


class SourceWriteError(SourceFileError):
    """A rewritten source file could not be written back."""

    pass


class MarkupParseError(SourceFileError):
    """A markup template could not be loaded into a node tree."""

    pass


# =============================================================================
# Session Exceptions (fatal)
# =============================================================================


class SessionError(I18nExtractError):
    """Base exception for errors that abort an extraction run."""

    pass


class SourceDirectoryNotFoundError(SessionError):
    """The directory to scan does not exist."""

    def __init__(self, path: str) -> None:
        """Initialize with the missing directory."""
        message = f"Source directory '{path}' does not exist"
        super().__init__(message, {"path": path})


class OutputDirectoryError(SessionError):
    """The directory for the output artifact could not be created."""

    def __init__(self, path: str, reason: str) -> None:
        """Initialize with directory and reason."""
        message = f"Cannot create output directory '{path}': {reason}"
        super().__init__(message, {"path": path, "reason": reason})


class ArtifactWriteError(SessionError):
    """The extraction artifact could not be written."""

    def __init__(self, path: str, reason: str) -> None:
        """Initialize with artifact path and reason."""
        message = f"Cannot write extraction artifact '{path}': {reason}"
        super().__init__(message, {"path": path, "reason": reason})


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(I18nExtractError):
    """Configuration error."""

    pass


class InvalidOptionError(ConfigurationError):
    """An option has a value the extractor cannot work with."""

    def __init__(self, name: str, value: Any, reason: str) -> None:
        """Initialize with option name, value and reason."""
        message = f"Invalid value {value!r} for option '{name}': {reason}"
        super().__init__(message, {"option": name, "value": value, "reason": reason})
