from .base import (
    ConcurrencyConflictError,
    DuplicateKeyError,
    EmptyBatchError,
    NotFoundError,
    ReferentialConstraintError,
    RepositoryError,
    UnexpectedPersistenceError,
)

__all__ = [
    "RepositoryError",
    "NotFoundError",
    "EmptyBatchError",
    "DuplicateKeyError",
    "ReferentialConstraintError",
    "ConcurrencyConflictError",
    "UnexpectedPersistenceError",
]
