"""
Secret lookups for the export pipeline.

`SecretResolver` is the interface the exporter consumes; `VaultSecretResolver`
implements it against a HashiCorp Vault KV v2 mount. Resolver methods may
raise. `SecretLookup` wraps a resolver so that every lookup returns a value or
None and any failure is only logged: a missing secret must never abort an
export.
"""
import logging
from typing import Any, Protocol

import httpx

from amtconfig.config import Settings

logger = logging.getLogger(__name__)


class SecretResolver(Protocol):
    async def get_secret_at_path(self, path: str) -> dict[str, Any] | None: ...

    async def get_secret_from_key(self, path: str, key: str) -> str | None: ...


class VaultSecretResolver:
    """
    KV v2 client: `GET {address}/v1/{mount}/data/{path}` with `X-Vault-Token`.

    A 404 means the secret does not exist and yields None; every other non-2xx
    answer raises `httpx.HTTPStatusError`.
    """

    def __init__(
        self,
        address: str,
        token: str,
        *,
        mount: str = "secret",
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.mount = mount.strip("/")
        self._client = httpx.AsyncClient(
            base_url=address.rstrip("/"),
            headers={"X-Vault-Token": token},
            timeout=timeout,
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs) -> "VaultSecretResolver":
        return cls(
            settings.VAULT_ADDRESS,
            settings.VAULT_TOKEN,
            mount=settings.VAULT_MOUNT,
            timeout=settings.VAULT_TIMEOUT_SECONDS,
            **kwargs,
        )

    async def get_secret_at_path(self, path: str) -> dict[str, Any] | None:
        response = await self._client.get(f"/v1/{self.mount}/data/{path.strip('/')}")
        if response.status_code == 404:
            logger.debug("vault.secret_missing", extra={"path": path})
            return None
        response.raise_for_status()

        # KV v2 nests the secret under data.data
        return (response.json().get("data") or {}).get("data")

    async def get_secret_from_key(self, path: str, key: str) -> str | None:
        data = await self.get_secret_at_path(path)
        if not data:
            return None
        value = data.get(key)
        return None if value is None else str(value)

    async def aclose(self) -> None:
        await self._client.aclose()


class SecretLookup:
    """Never-raising view over a `SecretResolver`."""

    def __init__(self, resolver: SecretResolver | None):
        self.resolver = resolver

    async def at_path(self, path: str) -> dict[str, Any] | None:
        if self.resolver is None:
            return None
        try:
            return await self.resolver.get_secret_at_path(path)
        except Exception:
            logger.warning("secrets.lookup_failed", exc_info=True, extra={"path": path})
            return None

    async def from_key(self, path: str, key: str) -> str | None:
        if self.resolver is None:
            return None
        try:
            return await self.resolver.get_secret_from_key(path, key)
        except Exception:
            logger.warning("secrets.lookup_failed", exc_info=True, extra={"path": path, "secret_key": key})
            return None
