class DomainError(Exception):
    """Base exception for business rule violations.

    `status_code` is the HTTP status the JSON layer answers with.
    """

    status_code = 400


class ValidationError(DomainError):
    """Input is malformed or the action is not allowed on that date/record."""


class AuthorizationError(DomainError):
    status_code = 403


class NotFoundError(DomainError):
    """A referenced student, class, holiday or attendance record does not exist."""

    status_code = 404
