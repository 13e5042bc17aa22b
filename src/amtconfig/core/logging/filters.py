"""
Logging filters and the context helpers that feed them.

Request and tenant identifiers live in `contextvars` so they follow a logical
operation across `await` boundaries and `asyncio.gather` fan-out (each task
copies the context it was created in). `ContextFilter` stamps them on every
record; `RedactFilter` masks secret-looking `extra` attributes.

Typical caller:

    with log_context(request_id=incoming_id, tenant_id=tenant):
        bundle = await exporter.export(name, tenant)
"""
import contextvars
import logging
from contextlib import contextmanager
from logging import LogRecord

_request_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)
_tenant_id_ctx: contextvars.ContextVar[str | None] = contextvars.ContextVar("tenant_id", default=None)


def set_request_id(request_id: str | None) -> contextvars.Token:
    """Set the request id for the current context; returns a token for `reset_request_id`."""
    return _request_id_ctx.set(request_id)


def reset_request_id(token: contextvars.Token) -> None:
    _request_id_ctx.reset(token)


def get_request_id() -> str | None:
    return _request_id_ctx.get()


def bind_tenant(tenant_id: str | None) -> contextvars.Token:
    return _tenant_id_ctx.set(tenant_id)


def reset_tenant(token: contextvars.Token) -> None:
    _tenant_id_ctx.reset(token)


def get_tenant_id() -> str | None:
    return _tenant_id_ctx.get()


@contextmanager
def log_context(*, request_id: str | None = None, tenant_id: str | None = None):
    """Bind both identifiers for the duration of the block and restore them afterwards."""
    request_token = set_request_id(request_id)
    tenant_token = bind_tenant(tenant_id)
    try:
        yield
    finally:
        reset_tenant(tenant_token)
        reset_request_id(request_token)


class ContextFilter(logging.Filter):
    """
    Guarantees every LogRecord has `request_id` and `tenant_id` attributes.

    Values passed explicitly through `extra` win over the context. The empty
    string is a real tenant, so only None falls back to the "-" sentinel.
    """

    def filter(self, record: LogRecord) -> bool:
        record.request_id = getattr(record, "request_id", None) or get_request_id() or "-"

        tenant_id = getattr(record, "tenant_id", None)
        if tenant_id is None:
            tenant_id = get_tenant_id()
        record.tenant_id = "-" if tenant_id is None else tenant_id
        return True


class RedactFilter(logging.Filter):
    """Replaces values of secret-looking attributes (e.g. `mps_password`, `psk_passphrase`)."""

    SENSITIVE = ("password", "secret", "token", "passphrase", "authorization", "cert")
    # attributes that merely name a secret, never hold one
    ALLOWED = {"secret_key"}
    MASK = "***REDACTED***"

    def filter(self, record: LogRecord) -> bool:
        for key in list(record.__dict__.keys()):
            lowered = key.lower()
            if lowered in self.ALLOWED:
                continue
            if any(marker in lowered for marker in self.SENSITIVE):
                record.__dict__[key] = self.MASK
        return True
