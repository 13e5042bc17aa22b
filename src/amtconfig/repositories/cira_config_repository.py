from amtconfig.database.gateway import Database
from amtconfig.events import EventPublisher
from amtconfig.models import CiraConfig, Profile
from .base_repository import BaseRepository


class CiraConfigRepository(BaseRepository[CiraConfig]):

    def __init__(self, db: Database, publisher: EventPublisher | None = None):
        super().__init__(
            CiraConfig,
            "cira_config_name",
            db,
            label="CIRA config",
            referenced_by=[(Profile, "cira_config_name")],
            publisher=publisher,
        )
