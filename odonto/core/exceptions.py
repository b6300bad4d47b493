"""
Custom exceptions for the application.
Following SOLID principles - centralized error handling.

Controllers translate these into flash messages, JSON failure payloads or
HTTP status codes; none of them should reach the user as a stack trace.
"""

from typing import List, Optional


class OdontoError(Exception):
    """Base class for expected business failures."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(OdontoError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity: str, entity_id: Optional[int] = None):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ValidationFailedError(OdontoError):
    """Raised when submitted fields fail validation.

    Carries every error message so the form can be re-rendered with all of
    them at once.
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid data")


class InvalidTransitionError(OdontoError):
    """Raised when a volunteer application is no longer pending."""

    def __init__(self, current_status: str):
        self.current_status = current_status
        super().__init__(f"Application has already been {current_status}.")


class PersistenceError(OdontoError):
    """Wraps a database failure after the session has been rolled back."""

    pass
