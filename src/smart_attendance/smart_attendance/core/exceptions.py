class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "error"
    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation"


class DuplicateError(ValidationError):
    """Raised when a uniqueness rule would be broken."""

    code = "duplicate"


class NotFoundError(DomainError):
    """Raised when an id-addressed record does not exist."""

    code = "not_found"
    status_code = 404


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = "authentication"
    status_code = 401
