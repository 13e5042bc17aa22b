from amtconfig.database.gateway import Database
from amtconfig.events import EventPublisher
from amtconfig.models import ProfileWirelessConfig, WirelessProfile
from .base_repository import BaseRepository


class WirelessProfileRepository(BaseRepository[WirelessProfile]):

    def __init__(self, db: Database, publisher: EventPublisher | None = None):
        super().__init__(
            WirelessProfile,
            "wireless_profile_name",
            db,
            label="Wireless profile",
            referenced_by=[(ProfileWirelessConfig, "wireless_profile_name")],
            publisher=publisher,
        )
