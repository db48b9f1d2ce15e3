class DomainError(Exception):
    """Base exception for business rule violations."""


class NotFoundError(DomainError):
    """Raised when a viewer, event or range yields nothing to work on."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a viewer lacks permission for an action or a report.

    The message is always one of the fixed user-facing strings in
    ``core.constants``.
    """
