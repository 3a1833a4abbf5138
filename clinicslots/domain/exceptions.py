"""
Domain-specific exception hierarchy for the clinic slot application.

Every error carries the status ``code`` used when it is shaped into the
``{"error": {"code": ..., "message": ...}}`` envelope.
"""

from typing import Any, Dict


class TimeslotError(Exception):
    """Base class for all application-level errors."""

    code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)

    def to_envelope(self) -> Dict[str, Any]:
        """Shape the error into the response envelope."""
        return {"error": {"code": self.code, "message": self.message}}


class ClinicNotFoundError(TimeslotError):
    """Raised when the requested clinic id does not exist."""

    code = 400
    default_message = "Clinic does not exist"


class InvalidRangeError(TimeslotError):
    """Raised when the date range is reversed or not longer than a day."""

    code = 400
    default_message = "Invalid date range"


class InternalFailureError(TimeslotError):
    """Wraps any unexpected fault raised while computing slots."""


class MalformedScheduleError(InternalFailureError):
    """Raised when an opening-hours or break string cannot be parsed."""


class RepositoryError(InternalFailureError):
    """Raised when clinic or dentist records cannot be fetched."""
