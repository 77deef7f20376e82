"""Typed exceptions for configuration, export and I/O failures."""

from __future__ import annotations


class AARBuilderError(Exception):
    """Base class for all package errors."""


class ConfigurationError(AARBuilderError, ValueError):
    """Raised when page geometry or font settings cannot produce a layout."""


class ResourceError(AARBuilderError):
    """Raised when an artifact cannot be generated or written."""


class ExportBlockedError(AARBuilderError):
    """Raised when validation errors prevent a document export."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"{len(self.errors)} validation error(s) block export")


class IOFormatError(ValueError):
    """Base class for I/O format related errors."""


class UnsupportedFormatError(IOFormatError):
    """Raised when no exporter is registered for a format."""
