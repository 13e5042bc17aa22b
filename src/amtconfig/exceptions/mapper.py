import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError

from .base import (
    DuplicateKeyError,
    ReferentialConstraintError,
    RepositoryError,
    UnexpectedPersistenceError,
)
from .integrity_classifier import ConstraintKind, classify_integrity_error, extract_detail

logger = logging.getLogger(__name__)


def unexpected_message(operation: str, resource: str, name: str | None = None) -> str:
    target = f"{resource} {name}" if name else resource
    return f"Operation failed: {operation} {target}"


# -----------------------
# Mapper
# -----------------------

def raise_mapped_integrity_error(
    exc: IntegrityError,
    *,
    operation: str,
    resource: str,
    name: str | None = None,
    foreign_key_message: str | None = None,
) -> None:
    """
    Map a SQLAlchemy IntegrityError to a taxonomy error and raise it.

    Unique violations become DuplicateKeyError and foreign-key violations
    ReferentialConstraintError. `foreign_key_message` overrides the
    foreign-key message (used by delete, where the violation means "still
    referenced"); otherwise the driver's detail string is used when present.
    Everything else becomes UnexpectedPersistenceError.
    """
    kind, constraint_name = classify_integrity_error(exc)

    if kind is ConstraintKind.UNIQUE:
        # expected client-level scenario (409), INFO is enough
        logger.info(
            "mapper.duplicate_detected",
            extra={"resource": resource, "operation": operation, "constraint": constraint_name},
        )
        message = f"{resource} {name} already exists" if name else f"{resource} already exists"
        raise DuplicateKeyError(message, constraint=constraint_name) from exc

    if kind is ConstraintKind.FOREIGN_KEY:
        detail = extract_detail(exc)
        logger.info(
            "mapper.foreign_key_violation",
            extra={"resource": resource, "operation": operation, "constraint": constraint_name},
        )
        message = foreign_key_message or detail or f"{resource} references an entity that does not exist"
        raise ReferentialConstraintError(message, detail=detail, constraint=constraint_name) from exc

    # not-null, check and unknown violations stay opaque to the caller
    logger.warning(
        "mapper.unmapped_integrity_error",
        extra={"resource": resource, "operation": operation, "kind": kind.value, "constraint": constraint_name},
    )
    logger.debug(
        "mapper.unmapped_integrity_raw",
        extra={"resource": resource, "raw": str(exc.orig) if exc.orig is not None else str(exc)},
    )
    raise UnexpectedPersistenceError(unexpected_message(operation, resource, name)) from exc


# -----------------------
# Async context manager to DRY error handling in repositories
# -----------------------
@asynccontextmanager
async def db_error_handler(
    operation: str,
    resource: str,
    *,
    name: str | None = None,
    foreign_key_message: str | None = None,
):
    """
    Usage:
        async with db_error_handler("insert", "Proxy", name=entity.proxy_config_name):
            ... gateway calls that may raise ...

    Taxonomy errors raised inside the block pass through untouched. Integrity
    errors are classified and mapped; anything else becomes a generic
    UnexpectedPersistenceError chained to the original exception.
    """
    try:
        yield
    except RepositoryError:
        raise
    except IntegrityError as exc:
        raise_mapped_integrity_error(
            exc,
            operation=operation,
            resource=resource,
            name=name,
            foreign_key_message=foreign_key_message,
        )
    except Exception as exc:
        logger.exception(
            "mapper.unexpected_error",
            extra={"resource": resource, "operation": operation, "entity_name": name},
        )
        raise UnexpectedPersistenceError(unexpected_message(operation, resource, name)) from exc
