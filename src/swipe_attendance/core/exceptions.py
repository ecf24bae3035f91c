class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a teacher lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a student or record does not exist for the teacher."""


class DuplicateKeyError(DomainError):
    """Raised when a unique key (e.g. roll number per teacher) already exists."""


class OutOfRangeError(DomainError):
    """Raised when a decision is submitted after the roster end was reached."""
