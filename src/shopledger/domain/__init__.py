"""Domain layer for shopledger.

Services live in their own modules (``shopledger.domain.order`` and so on)
and are not imported here, so the ledger store can import entities without
pulling in the services that depend on it.
"""

from shopledger.domain.errors import (
    DomainError,
    ValidationError,
    NotFoundError,
    ConflictError,
    DependencyError,
    PartialWriteError,
    DegradedConsistencyWarning,
)

__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "DependencyError",
    "PartialWriteError",
    "DegradedConsistencyWarning",
]
