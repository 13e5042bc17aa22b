from types import SimpleNamespace

import pytest
from sqlalchemy.exc import IntegrityError

from amtconfig.exceptions.integrity_classifier import (
    ConstraintKind,
    classify_integrity_error,
    extract_detail,
)


class FakeDriverError(Exception):
    """Stands in for a DBAPI exception; attributes are set per test."""

    def __init__(self, message: str = "", **attrs):
        super().__init__(message)
        for key, value in attrs.items():
            setattr(self, key, value)


def integrity_error(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, orig)


@pytest.mark.parametrize(
    "code, expected",
    [
        ("23505", ConstraintKind.UNIQUE),
        ("23503", ConstraintKind.FOREIGN_KEY),
        ("23502", ConstraintKind.NOT_NULL),
        ("23514", ConstraintKind.CHECK),
        ("23P01", ConstraintKind.UNKNOWN),
    ],
)
def test_classifies_by_pgcode(code, expected):
    kind, _ = classify_integrity_error(integrity_error(FakeDriverError("boom", pgcode=code)))
    assert kind is expected


def test_sqlstate_attribute_is_also_read():
    orig = FakeDriverError("boom", sqlstate="23505")

    kind, _ = classify_integrity_error(integrity_error(orig))

    assert kind is ConstraintKind.UNIQUE


def test_constraint_name_comes_from_diag():
    orig = FakeDriverError(
        "boom",
        pgcode="23503",
        diag=SimpleNamespace(constraint_name="fk_profiles_cira", message_detail=None),
    )

    kind, constraint = classify_integrity_error(integrity_error(orig))

    assert kind is ConstraintKind.FOREIGN_KEY
    assert constraint == "fk_profiles_cira"


@pytest.mark.parametrize(
    "message, expected",
    [
        ("UNIQUE constraint failed: proxyconfigs.proxy_config_name", ConstraintKind.UNIQUE),
        ("FOREIGN KEY constraint failed", ConstraintKind.FOREIGN_KEY),
        ("NOT NULL constraint failed: profiles.activation", ConstraintKind.NOT_NULL),
        ("CHECK constraint failed: port_range", ConstraintKind.CHECK),
        ("disk I/O error", ConstraintKind.UNKNOWN),
    ],
)
def test_classifies_sqlite_messages(message, expected):
    """
    Behavior:
            - Drivers without SQLSTATE (SQLite) are classified from the message text.
    """
    kind, constraint = classify_integrity_error(integrity_error(FakeDriverError(message)))

    assert kind is expected
    assert constraint is None


class TestExtractDetail:

    def test_detail_attribute(self):
        orig = FakeDriverError("boom", detail='Key (name)=(p9) is not present in table "proxyconfigs".')
        assert extract_detail(integrity_error(orig)).startswith("Key (name)=(p9)")

    def test_diag_message_detail(self):
        orig = FakeDriverError("boom", diag=SimpleNamespace(message_detail="from diag"))
        assert extract_detail(integrity_error(orig)) == "from diag"

    def test_cause_detail(self):
        orig = FakeDriverError("boom")
        orig.__cause__ = FakeDriverError("inner", detail="from cause")
        assert extract_detail(integrity_error(orig)) == "from cause"

    def test_no_detail(self):
        assert extract_detail(integrity_error(FakeDriverError("boom"))) is None
