"""
Fire-and-forget notification of configuration changes.

Repositories publish one `ConfigEvent` per successful mutation. Publishing is
best effort: `publish_safely` logs and absorbs any failure, so a broken
publisher can never fail the write that triggered it.
"""
import logging
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfigEvent:
    operation: str           # insert | update | delete | replace_all | delete_for_profile
    resource: str            # e.g. "Proxy", "CIRA", "Profile proxy associations"
    name: str
    tenant_id: str
    message: str
    level: str = "success"
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict:
        return asdict(self)


class EventPublisher(Protocol):
    async def publish(self, event: ConfigEvent) -> None: ...


class LoggingEventPublisher:
    """Default publisher: events become INFO log records."""

    async def publish(self, event: ConfigEvent) -> None:
        logger.info(
            "event.published",
            extra={
                "event_operation": event.operation,
                "resource": event.resource,
                "entity_name": event.name,
                "tenant_id": event.tenant_id,
                "event_message": event.message,
                "level_name": event.level,
            },
        )


class WebhookEventPublisher:
    """
    POSTs each event as JSON to a single URL.

    Non-2xx answers raise `httpx.HTTPStatusError`; callers go through
    `publish_safely`, which absorbs it.
    """

    def __init__(self, url: str, *, timeout: float = 5.0, client: httpx.AsyncClient | None = None):
        self.url = url
        self.timeout = timeout
        self._client = client

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    async def publish(self, event: ConfigEvent) -> None:
        client = await self._ensure_client()
        start_time = time.perf_counter()

        response = await client.post(
            self.url,
            json=event.to_dict(),
            headers={"X-Event-Operation": event.operation},
        )
        response.raise_for_status()

        logger.debug(
            "event.webhook.delivered",
            extra={
                "status_code": response.status_code,
                "response_time_ms": int((time.perf_counter() - start_time) * 1000),
            },
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


async def publish_safely(publisher: EventPublisher, event: ConfigEvent) -> None:
    try:
        await publisher.publish(event)
    except Exception:
        logger.warning(
            "event.publish_failed",
            exc_info=True,
            extra={"event_operation": event.operation, "resource": event.resource, "entity_name": event.name},
        )
