"""
Classification of low-level integrity failures into constraint kinds.

Only unique and foreign-key violations change what the caller sees (see
`mapper.py`); not-null and check violations are recognized so they are logged
under the right name, but surface as unexpected persistence failures.

The classifier is pure: it reads the driver exception attached to a SQLAlchemy
`IntegrityError` and never touches a session.
"""
import logging
from enum import Enum

from sqlalchemy.exc import IntegrityError

logger = logging.getLogger(__name__)


class ConstraintKind(str, Enum):
    UNIQUE = "unique"
    FOREIGN_KEY = "foreign_key"
    NOT_NULL = "not_null"
    CHECK = "check"
    UNKNOWN = "unknown"


# https://www.postgresql.org/docs/current/errcodes-appendix.html
class PostgresErrorCodes(str, Enum):
    UNIQUE_VIOLATION = "23505"
    NOT_NULL_VIOLATION = "23502"
    FOREIGN_KEY_VIOLATION = "23503"
    CHECK_VIOLATION = "23514"


PGCODE_KIND_MAP = {
    PostgresErrorCodes.UNIQUE_VIOLATION: ConstraintKind.UNIQUE,
    PostgresErrorCodes.NOT_NULL_VIOLATION: ConstraintKind.NOT_NULL,
    PostgresErrorCodes.FOREIGN_KEY_VIOLATION: ConstraintKind.FOREIGN_KEY,
    PostgresErrorCodes.CHECK_VIOLATION: ConstraintKind.CHECK,
}


def _match_any(msg: str, keywords: list[str]) -> bool:
    return any(keyword in msg for keyword in keywords)


def _sqlstate(orig) -> str | None:
    # psycopg2 and the asyncpg adapter expose `pgcode`, psycopg 3 `sqlstate`
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def _classify_from_code(orig) -> tuple[ConstraintKind | None, str | None]:
    code = _sqlstate(orig)
    if not code:
        return None, None

    diag = getattr(orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None) if diag else None
    constraint_name = constraint_name or getattr(orig, "constraint_name", None)

    kind = PGCODE_KIND_MAP.get(code)
    if kind is not None:
        logger.debug(
            "classifier.sqlstate",
            extra={"sqlstate": code, "constraint_name": constraint_name, "kind": kind.value},
        )
        return kind, constraint_name

    logger.warning(
        "classifier.unknown_sqlstate",
        extra={"sqlstate": code, "constraint_name": constraint_name},
    )
    return ConstraintKind.UNKNOWN, constraint_name


def _classify_from_generic_message(msg: str) -> ConstraintKind:
    """Fallback for drivers without SQLSTATE codes (SQLite, MySQL)."""
    normalized = (msg or "").lower()

    if _match_any(normalized, ["unique constraint", "unique failed", "unique violation", "duplicate"]):
        return ConstraintKind.UNIQUE

    if _match_any(normalized, ["foreign key constraint", "foreign key", "is not present in table"]):
        return ConstraintKind.FOREIGN_KEY

    if _match_any(normalized, ["not null constraint", "null value in column"]):
        return ConstraintKind.NOT_NULL

    if _match_any(normalized, ["check constraint", "check failed"]):
        return ConstraintKind.CHECK

    logger.warning("classifier.unknown_message", extra={"message_snippet": normalized[:200]})
    return ConstraintKind.UNKNOWN


def classify_integrity_error(exc: IntegrityError) -> tuple[ConstraintKind, str | None]:
    """
    Classify a SQLAlchemy IntegrityError.

    Returns:
        A tuple of (ConstraintKind, constraint name if the driver reported one)
    """
    orig = exc.orig

    kind, constraint_name = _classify_from_code(orig)
    if kind is not None:
        return kind, constraint_name

    return _classify_from_generic_message(str(orig) if orig is not None else str(exc)), None


def extract_detail(exc: IntegrityError) -> str | None:
    """
    Best-effort extraction of the driver's DETAIL line, e.g.
    'Key (proxy_config_name, tenant_id)=(p9, ) is not present in table "proxyconfigs".'
    """
    orig = exc.orig
    if orig is None:
        return None

    detail = getattr(orig, "detail", None)
    if detail:
        return detail

    diag = getattr(orig, "diag", None)
    detail = getattr(diag, "message_detail", None) if diag else None
    if detail:
        return detail

    # SQLAlchemy's asyncpg adapter keeps the asyncpg exception as the cause
    return getattr(orig.__cause__, "detail", None) or None
