import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from amtconfig.exceptions import (
    DuplicateKeyError,
    EmptyBatchError,
    NotFoundError,
    ReferentialConstraintError,
    UnexpectedPersistenceError,
)
from amtconfig.exceptions.mapper import db_error_handler

from .test_integrity_classifier import FakeDriverError, integrity_error


@pytest.mark.asyncio
class TestDbErrorHandler:

    async def test_unique_violation_becomes_duplicate(self):
        with pytest.raises(DuplicateKeyError, match="Proxy config p1 already exists") as exc_info:
            async with db_error_handler("insert", "Proxy config", name="p1"):
                raise integrity_error(FakeDriverError("boom", pgcode="23505"))

        assert isinstance(exc_info.value.__cause__, IntegrityError)
        assert exc_info.value.http_status() == 409

    async def test_foreign_key_uses_driver_detail(self):
        orig = FakeDriverError("boom", pgcode="23503", detail="Key (cira_config_name)=(x) is not present")

        with pytest.raises(ReferentialConstraintError) as exc_info:
            async with db_error_handler("insert", "AMT profile", name="profile1"):
                raise integrity_error(orig)

        assert str(exc_info.value).startswith("Key (cira_config_name)=(x) is not present")
        assert exc_info.value.detail == "Key (cira_config_name)=(x) is not present"

    async def test_foreign_key_message_override(self):
        orig = FakeDriverError("boom", pgcode="23503", detail="still referenced from table profiles")

        with pytest.raises(ReferentialConstraintError) as exc_info:
            async with db_error_handler(
                "delete", "CIRA config", name="cira1", foreign_key_message="CIRA config cira1 still referenced",
            ):
                raise integrity_error(orig)

        assert exc_info.value.message == "CIRA config cira1 still referenced"
        assert exc_info.value.detail == "still referenced from table profiles"

    async def test_check_violation_is_unexpected(self):
        with pytest.raises(UnexpectedPersistenceError) as exc_info:
            async with db_error_handler("update", "Proxy config", name="p1"):
                raise integrity_error(FakeDriverError("boom", pgcode="23514"))

        # raw driver text never reaches the caller
        assert exc_info.value.message == "Operation failed: update Proxy config p1"
        assert exc_info.value.http_status() == 500

    async def test_other_exceptions_are_wrapped_and_chained(self):
        error = OperationalError("SELECT 1", {}, Exception("connection refused"))

        with pytest.raises(UnexpectedPersistenceError) as exc_info:
            async with db_error_handler("get", "Domain"):
                raise error

        assert exc_info.value.message == "Operation failed: get Domain"
        assert exc_info.value.__cause__ is error

    @pytest.mark.parametrize(
        "error",
        [NotFoundError("CIRA", "cira1"), EmptyBatchError(), DuplicateKeyError("dup")],
    )
    async def test_taxonomy_errors_pass_through(self, error):
        with pytest.raises(type(error)) as exc_info:
            async with db_error_handler("insert", "Proxy config"):
                raise error

        assert exc_info.value is error


class TestPayload:

    def test_not_found_message_and_payload(self):
        error = NotFoundError("Wireless", "wifi-home")

        assert error.message == "Wireless profile wifi-home Not Found"
        assert error.to_payload() == {"detail": "Wireless profile wifi-home Not Found", "code": "not_found"}
        assert error.http_status() == 404

    def test_payload_never_exposes_constraint(self):
        error = DuplicateKeyError("Domain corp already exists", fields=["name"], constraint="pk_domains")

        assert error.to_payload() == {"detail": "Domain corp already exists", "code": "duplicate", "fields": ["name"]}
        assert error.constraint == "pk_domains"
        # the constraint name stays out of anything a caller might log or echo
        assert "pk_domains" not in str(error)
        assert str(error) == "Domain corp already exists (fields: name; code: duplicate)"

    def test_empty_batch_is_bad_request(self):
        assert EmptyBatchError().http_status() == 400
