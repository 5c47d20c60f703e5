"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class InvalidIDError(ValidationError):
    """A required identifier was missing or blank."""


class InvalidCompanyIDError(ValidationError):
    """The caller's tenant (company) could not be determined."""


class ForbiddenError(DomainException):
    """The operation crosses a tenant boundary or is refused by policy."""


class RestoreExpiredError(ForbiddenError):
    """The retention window of a soft-deleted design has already elapsed."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class ConflictError(DomainException):
    """The stored entity changed since it was read."""


class OperationCancelledError(Exception):
    """The request was cancelled or its deadline passed.

    Not a DomainException: it always propagates to the caller.
    """
