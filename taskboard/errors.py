"""Error types for taskboard."""

from typing import Optional


class TaskboardError(Exception):
    """Base class for taskboard errors."""


class TransportError(TaskboardError):
    """The task store answered with a non-2xx status, or could not be reached.

    ``str(error)`` is the human-readable message shown to the user.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PayloadValidationError(TaskboardError):
    """A task payload failed local validation; no request was sent."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field
