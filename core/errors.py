# core/errors.py
"""
Exception hierarchy for the records console.

Screens never see these directly; the controller turns them into
ActionResult values.
"""

from __future__ import annotations
from typing import Dict, Optional


class ConsoleError(Exception):
    """Base class for every error raised by the console core."""


class RegistrationInvalid(ConsoleError):
    """A registration form failed client-side validation."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__(f"Registration form has {len(self.errors)} invalid field(s)")


class NextOfKinInvalid(ConsoleError):
    """A next-of-kin edit failed validation."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__(f"Next of kin form has {len(self.errors)} invalid field(s)")


class InvalidAmountError(ConsoleError, ValueError):
    """A bill or payment amount was missing, malformed or not positive."""


class StudentNotFound(ConsoleError, KeyError):
    def __init__(self, student_id: str):
        self.student_id = student_id
        super().__init__(student_id)

    def __str__(self) -> str:
        return f"Student not found: {self.student_id}"


class ApiError(ConsoleError):
    """Base class for remote data access failures."""


class ApiConnectionError(ApiError):
    """The server could not be reached."""

    def __init__(self, message: str = "Could not connect to the server."):
        super().__init__(message)


class ApiResponseError(ApiError):
    """The server answered with a failure status or envelope."""

    def __init__(self, message: str, status_code: Optional[int] = None, response_code: Optional[str] = None):
        self.status_code = status_code
        self.response_code = response_code
        super().__init__(message)
