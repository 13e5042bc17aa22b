from amtconfig.database.gateway import Database
from amtconfig.events import EventPublisher
from amtconfig.models import Ieee8021xProfile, Profile, WirelessProfile
from .base_repository import BaseRepository


class Ieee8021xProfileRepository(BaseRepository[Ieee8021xProfile]):
    """802.1x profiles; referenced by AMT profiles (wired) and wireless profiles."""

    def __init__(self, db: Database, publisher: EventPublisher | None = None):
        super().__init__(
            Ieee8021xProfile,
            "profile_name",
            db,
            label="802.1x profile",
            referenced_by=[
                (Profile, "ieee8021x_profile_name"),
                (WirelessProfile, "ieee8021x_profile_name"),
            ],
            publisher=publisher,
        )
