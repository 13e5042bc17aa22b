"""
Wiring of every repository onto one connection gateway and event publisher.
"""
from amtconfig.config import Settings
from amtconfig.database.gateway import Database, create_database
from amtconfig.events import EventPublisher, LoggingEventPublisher, WebhookEventPublisher
from amtconfig.repositories import (
    CiraConfigRepository,
    DomainRepository,
    Ieee8021xProfileRepository,
    ProfileProxyConfigRepository,
    ProfileRepository,
    ProfileWirelessConfigRepository,
    ProxyConfigRepository,
    WirelessProfileRepository,
)


class ConfigStore:

    def __init__(self, db: Database, publisher: EventPublisher | None = None):
        self.db = db
        self.publisher = publisher or LoggingEventPublisher()

        self.proxy_configs = ProxyConfigRepository(db, self.publisher)
        self.cira_configs = CiraConfigRepository(db, self.publisher)
        self.domains = DomainRepository(db, self.publisher)
        self.wireless_profiles = WirelessProfileRepository(db, self.publisher)
        self.ieee8021x_profiles = Ieee8021xProfileRepository(db, self.publisher)
        self.profiles = ProfileRepository(db, self.publisher)
        self.profile_proxy_configs = ProfileProxyConfigRepository(db, self.publisher)
        self.profile_wireless_configs = ProfileWirelessConfigRepository(db, self.publisher)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConfigStore":
        """Gateway from the database settings; webhook events when EVENT_WEBHOOK_URL is set."""
        publisher: EventPublisher = LoggingEventPublisher()
        if settings.EVENT_WEBHOOK_URL:
            publisher = WebhookEventPublisher(settings.EVENT_WEBHOOK_URL)
        return cls(create_database(settings), publisher)

    async def close(self) -> None:
        if isinstance(self.publisher, WebhookEventPublisher):
            await self.publisher.aclose()
        await self.db.dispose()
