class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "DOMAIN_ERROR"
    http_status = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "INVALID_INPUT"


class InvalidAmountError(ValidationError):
    """Raised when a payment amount is zero or negative."""

    code = "INVALID_AMOUNT"


class ExceedsBalanceError(ValidationError):
    """Raised when a payment is larger than the outstanding balance."""

    code = "EXCEEDS_BALANCE"


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""

    code = "NOT_FOUND"
    http_status = 404


class ConflictError(DomainError):
    """Raised when creating an entity that already exists."""

    code = "CONFLICT"
    http_status = 409


class ExpiredError(DomainError):
    """Raised when a QR attendance session is past its validity window."""

    code = "EXPIRED"


class AlreadyDoneError(DomainError):
    """Raised when a student scans the same QR session twice."""

    code = "ALREADY_DONE"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    code = "AUTHENTICATION_FAILED"
    http_status = 401
