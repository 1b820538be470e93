"""Errors raised while processing an enrollment request."""


class EnrollmentError(Exception):
    """Base exception for enrollment processing errors.

    Attributes:
        status_code: HTTP status reported to the caller
    """

    status_code = 400


class ParseError(EnrollmentError):
    """Raised when the request body is empty or cannot be deserialized."""


class ValidationError(EnrollmentError):
    """Raised when a required field is missing or blank."""

    def __init__(self, message: str, missing_fields=None):
        self.missing_fields = list(missing_fields or [])
        super().__init__(message)


class UnexpectedError(EnrollmentError):
    """Wraps any failure that is not caused by the client request."""

    status_code = 500
