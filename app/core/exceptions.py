"""
Domain errors for the academic records service.

Route handlers translate these into HTTP responses; services never raise
HTTPException themselves.
"""

from typing import Any, Dict, Optional


class TwoemError(Exception):
    """Base class for every domain error raised by the services."""

    def __init__(self, message: str, error_code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class InvalidMark(TwoemError):
    """A unit mark or exam score is not an integer in [0, 100]."""


class InvalidFeeEntry(TwoemError):
    """A fee ledger line failed validation."""


class AllocationConflict(TwoemError):
    """The candidate registration number is already taken. Retryable."""


class RegistrationFailed(TwoemError):
    """Registration number allocation kept conflicting after every retry."""


class NotEligible(TwoemError):
    """Certificate requested while the grade is not Pass or fees are owed."""


class DuplicateStudent(TwoemError):
    pass


class DuplicateEnrollment(TwoemError):
    pass


class ResourceNotFound(TwoemError):
    pass


class ConfigurationError(TwoemError):
    """Required configuration is missing or invalid."""


class CourseInUse(TwoemError):
    """The course still has enrollments and cannot be deleted."""
