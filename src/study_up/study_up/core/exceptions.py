class DomainError(Exception):
    """Base exception for business rule violations.

    `code` is the stable machine-readable string, `http_status` the status the
    JSON controllers answer with.
    """

    code = "DOMAIN"
    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "INVALID"
    http_status = 400


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = "BAD_CRED"
    http_status = 401


class InactiveAccountError(DomainError):
    code = "INACTIVE"
    http_status = 403


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "FORBIDDEN"
    http_status = 403


class NotFoundError(DomainError):
    code = "NOT_FOUND"
    http_status = 404


class DuplicateEmailError(DomainError):
    code = "DUP_EMAIL"
    http_status = 409


class ConflictError(DomainError):
    """Raised when the request clashes with current state (already processed, full, ...)."""

    code = "CONFLICT"
    http_status = 409
