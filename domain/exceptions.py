"""Domain exceptions for business rule violations."""


class DomainError(Exception):
    """Base exception for domain layer."""


class ValidationError(DomainError):
    """Raised when input validation fails."""


class RecordNotFoundError(DomainError):
    """Raised when a record is not found in the repository."""


class AccessDeniedError(DomainError):
    """Raised when the acting user is not allowed to perform an operation."""


class ConflictError(DomainError):
    """Raised when an operation conflicts with the current state of a record."""


class DuplicateRecordError(ConflictError):
    """Raised when a unique constraint (e.g. a share grant) would be violated."""


class InfrastructureError(DomainError):
    """Raised when infrastructure operations fail (DB, network, etc.)."""


class BlobNotFoundError(RecordNotFoundError):
    """Raised when a blob manifest does not exist in the blob store."""


class BlobStorageError(InfrastructureError):
    """Raised when reading, writing or deleting blob content fails."""


class RangeNotSatisfiableError(ValidationError):
    """Raised when a requested byte range cannot be served."""
