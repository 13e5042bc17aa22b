from amtconfig.database.gateway import Database
from amtconfig.events import EventPublisher
from amtconfig.models import Domain
from .base_repository import BaseRepository


class DomainRepository(BaseRepository[Domain]):
    """ACM domains. Profiles name a domain only at export time, so nothing references a row."""

    def __init__(self, db: Database, publisher: EventPublisher | None = None):
        super().__init__(Domain, "name", db, label="Domain", publisher=publisher)
