"""Error types shared across Grove components."""

from __future__ import annotations


class GroveError(RuntimeError):
    """Base class for every error Grove reports to its caller."""


class NotFoundError(GroveError):
    """Raised when a referenced tree template is absent from the collection."""


class NameCollisionError(GroveError):
    """Raised (or collected) when an imported template name is already taken."""

    def __init__(self, name: str) -> None:
        super().__init__(f"A tree named '{name}' already exists")
        self.name = name


class InvalidDurationError(GroveError):
    """Raised for malformed or unusable growth durations."""


class InvalidTimeSpecError(GroveError):
    """Raised for malformed time windows, graph units or grid specs."""


class MalformedRecordError(GroveError):
    """Raised when a line of the exchange format cannot be parsed."""

    def __init__(self, message: str, *, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class StorageError(GroveError):
    """Raised when the collection or history file cannot be read or written."""


__all__ = [
    "GroveError",
    "InvalidDurationError",
    "InvalidTimeSpecError",
    "MalformedRecordError",
    "NameCollisionError",
    "NotFoundError",
    "StorageError",
]
