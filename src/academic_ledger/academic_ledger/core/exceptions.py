class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AmbiguousScopeError(ValidationError):
    """Raised when an individual-ID lookup is combined with cohort dimensions."""
