from amtconfig.database.gateway import Database
from amtconfig.events import EventPublisher
from amtconfig.models import Profile, ProfileProxyConfig, ProfileWirelessConfig
from .association_repository import AssociationRepository
from .base_repository import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    """
    AMT profiles.

    Nothing references a profile; its association rows are removed by the
    database (ON DELETE CASCADE) when the profile is deleted.
    """

    def __init__(self, db: Database, publisher: EventPublisher | None = None):
        super().__init__(Profile, "profile_name", db, label="AMT profile", publisher=publisher)


class ProfileProxyConfigRepository(AssociationRepository[ProfileProxyConfig]):

    def __init__(self, db: Database, publisher: EventPublisher | None = None):
        super().__init__(
            ProfileProxyConfig,
            "proxy_config_name",
            db,
            label="Profile proxy configs",
            publisher=publisher,
        )


class ProfileWirelessConfigRepository(AssociationRepository[ProfileWirelessConfig]):

    def __init__(self, db: Database, publisher: EventPublisher | None = None):
        super().__init__(
            ProfileWirelessConfig,
            "wireless_profile_name",
            db,
            label="Profile wireless configs",
            publisher=publisher,
        )
