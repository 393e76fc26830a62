"""Failures the registration flow reports back to callers.

Each error carries the HTTP status it maps to and a message that is safe to
show to the person filling in the form.
"""

GENERIC_STORAGE_MESSAGE = 'Internal server error. Please try again later.'


class RegistrationError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(RegistrationError):
    """Missing or malformed input."""
    status_code = 400


class ConflictError(RegistrationError):
    """An account already uses the submitted email."""
    status_code = 409


class StorageError(RegistrationError):
    """The user store could not be reached or rejected the query."""
    status_code = 500

    def __init__(self, message: str = GENERIC_STORAGE_MESSAGE) -> None:
        super().__init__(message)
