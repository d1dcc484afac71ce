# social_support/exceptions.py
"""Custom exceptions for the application."""
from __future__ import annotations


class SnapshotFormatError(ValueError):
    """A stored or supplied snapshot does not have the expected shape."""


class WizardStateError(RuntimeError):
    """The requested action is not allowed in the wizard's current state."""


class ApiException(Exception):
    """Exception raised when a remote service answers with an error."""

    def __init__(self, message: str, status_code: int | None = None,
                 response_data: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}

    def __str__(self) -> str:
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class NetworkException(Exception):
    """Exception raised when a remote service cannot be reached in time."""

    def __init__(self, message: str, original_error: Exception | None = None,
                 timed_out: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.timed_out = timed_out
