"""Domain-level exceptions.

All failures are expressed as subclasses of DomainException so the CLI
layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class AlreadyExistsError(DomainException):
    """A product with the same business key or primary key already exists."""


class VersionConflictError(DomainException):
    """The stored version no longer matches the expected version."""


class InternalError(DomainException):
    """The authoritative store failed in an unexpected way."""


class StorageConnectionError(InternalError):
    """The authoritative store could not be reached."""


class CacheError(DomainException):
    """The cache could not be reached or returned unreadable data.

    Never surfaced to callers of the application handlers.
    """
