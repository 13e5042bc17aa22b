from amtconfig.database.gateway import Database
from amtconfig.events import EventPublisher
from amtconfig.models import ProfileProxyConfig, ProxyConfig
from .base_repository import BaseRepository


class ProxyConfigRepository(BaseRepository[ProxyConfig]):
    """Proxy configurations; referenced by profiles through `profiles_proxyconfigs`."""

    def __init__(self, db: Database, publisher: EventPublisher | None = None):
        super().__init__(
            ProxyConfig,
            "proxy_config_name",
            db,
            label="Proxy config",
            referenced_by=[(ProfileProxyConfig, "proxy_config_name")],
            publisher=publisher,
        )
