"""
Custom exceptions for repository and export operations.
"""

from typing import Any, Iterable

# canonical repository-level exception

class RepositoryError(Exception):
    """
    Base exception for repository/export errors.

    - message: human-friendly message (safe to show to clients)
    - fields: optional list of field names related to the error
    - constraint: optional DB constraint name or identifier (for logs only)
    - error_code: canonical short code (e.g., 'duplicate', 'not_found') used by clients
    """

    # Map canonical error_code -> default HTTP status.
    ERROR_CODE_TO_STATUS = {
        "not_found": 404,
        "empty_batch": 400,
        "duplicate": 409,
        "referential_constraint": 409,
        "concurrency_conflict": 409,
        "unexpected": 500,
    }

    def __init__(self, message: str, *, fields: Iterable[str] | None = None,
                 constraint: str | None = None, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        self.fields = list(fields) if fields else None
        self.constraint = constraint
        self.error_code = error_code

    def __str__(self) -> str:
        base = self.message
        parts = []
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.error_code:
            parts.append(f"code: {self.error_code}")
        if parts:
            return f"{base} ({'; '.join(parts)})"
        return base

    def to_payload(self) -> dict:
        """
        Return a JSON-serializable dict suitable for HTTP responses.
        Standard shape:
            {
                "detail": "A human-friendly message",
                "code": "duplicate",           # optional canonical code
                "fields": ["proxy_config_name"],  # optional list for client usage
            }
        `constraint` and raw driver messages are never included.
        """
        payload: dict[str, Any] = {"detail": self.message}
        if self.error_code:
            payload["code"] = self.error_code
        if self.fields:
            payload["fields"] = list(self.fields)
        return payload

    def http_status(self) -> int:
        """
        Return the HTTP status code that should accompany this error.
        Unknown or missing codes default to 400 (Bad Request).
        """
        if self.error_code:
            return self.ERROR_CODE_TO_STATUS.get(self.error_code, 400)
        return 400


class NotFoundError(RepositoryError):
    """A referenced entity (AMT profile, CIRA, Wireless, Proxy, 802.1x, ...) does not exist."""

    def __init__(self, resource: str, name: str | None = None, *, message: str | None = None):
        self.resource = resource
        self.name = name
        if message is None:
            message = f"{resource} profile {name} Not Found" if name else f"{resource} Not Found"
        super().__init__(message, error_code="not_found")


class EmptyBatchError(RepositoryError):
    def __init__(self, message: str = "Operation failed: no entries supplied"):
        super().__init__(message, error_code="empty_batch")


class DuplicateKeyError(RepositoryError):
    def __init__(self, message: str, *, fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(message, fields=fields, constraint=constraint, error_code="duplicate")


class ReferentialConstraintError(RepositoryError):
    """
    Raised when a delete would orphan a referencing row, or a write points at a
    row that does not exist. `detail` carries the store's own description when
    one was available.
    """

    def __init__(self, message: str, *, detail: str | None = None, constraint: str | None = None):
        super().__init__(message, constraint=constraint, error_code="referential_constraint")
        self.detail = detail


class ConcurrencyConflictError(RepositoryError):
    """
    An update affected no rows. `latest` is the row as it is now (or None when
    it no longer exists) so the caller can decide how to reconcile.
    """

    def __init__(self, message: str, *, latest: Any = None):
        super().__init__(message, error_code="concurrency_conflict")
        self.latest = latest


class UnexpectedPersistenceError(RepositoryError):
    """Any failure that is not one of the above. The message is always generic."""

    def __init__(self, message: str):
        super().__init__(message, error_code="unexpected")


__all__ = [
    "RepositoryError",
    "NotFoundError",
    "EmptyBatchError",
    "DuplicateKeyError",
    "ReferentialConstraintError",
    "ConcurrencyConflictError",
    "UnexpectedPersistenceError",
]
