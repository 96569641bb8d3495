"""Error kinds raised or reported by toget."""

from __future__ import annotations


class TogetError(Exception):
    """Base class for every toget error."""


class InvalidArgument(TogetError, ValueError):
    """Raised when a builder is created without a usable base URL."""


class TransportNotBound(TogetError, RuntimeError):
    """Raised when I/O is requested before ``upon()`` bound a transport."""


class TransportFailure(TogetError):
    """Network level failure reported by a transport."""

    def __init__(self, message: str, *, timed_out: bool = False) -> None:
        super().__init__(message)
        self.timed_out = timed_out


class ResponseStatusError(TogetError):
    """Describes a 4xx/5xx response that carried no body."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class PathTemplateError(TogetError, ValueError):
    """Raised when path parameters do not satisfy a path template."""


class StatusTableError(TogetError, RuntimeError):
    """Raised when the bundled status code table cannot be loaded."""


__all__ = [
    "TogetError",
    "InvalidArgument",
    "TransportNotBound",
    "TransportFailure",
    "ResponseStatusError",
    "PathTemplateError",
    "StatusTableError",
]
