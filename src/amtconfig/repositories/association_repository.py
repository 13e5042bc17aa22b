"""
Ordered profile associations (profile -> proxy configs, profile -> wireless profiles).

An association row is owned by its profile: the whole ordered list is replaced
at once and removed together with the profile.
"""
import logging
from dataclasses import dataclass
from typing import Generic, Sequence, Type, TypeVar

from sqlalchemy import delete, insert, select

from amtconfig.database.base import Base
from amtconfig.database.gateway import Database
from amtconfig.events import ConfigEvent, EventPublisher, LoggingEventPublisher, publish_safely
from amtconfig.exceptions.base import EmptyBatchError
from amtconfig.exceptions.mapper import db_error_handler

ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssociationEntry:
    """One slot of a profile's ordered list: the referenced name and its priority."""
    name: str
    priority: int


class AssociationRepository(Generic[ModelType]):

    def __init__(
        self,
        model: Type[ModelType],
        target_attr: str,
        db: Database,
        *,
        label: str,
        publisher: EventPublisher | None = None,
    ):
        self.model = model
        self.target_attr = target_attr
        self.db = db
        self.label = label
        self.publisher = publisher or LoggingEventPublisher()

    def _profile_clause(self, profile_name: str, tenant_id: str):
        return (self.model.profile_name == profile_name) & (self.model.tenant_id == tenant_id)

    async def _publish(self, operation: str, message: str, profile_name: str, tenant_id: str) -> None:
        await publish_safely(
            self.publisher,
            ConfigEvent(
                operation=operation,
                resource=self.label,
                name=profile_name,
                tenant_id=tenant_id,
                message=message,
            ),
        )

    async def list_for_profile(self, profile_name: str, tenant_id: str) -> list[AssociationEntry]:
        """Entries of the profile ordered by ascending priority; empty when none."""
        target = getattr(self.model, self.target_attr)
        stmt = (
            select(target, self.model.priority)
            .where(self._profile_clause(profile_name, tenant_id))
            .order_by(self.model.priority)
        )
        async with db_error_handler("list", self.label, name=profile_name):
            result = await self.db.execute(stmt)

        return [AssociationEntry(name=row[0], priority=row[1]) for row in result.rows]

    async def replace_all(self, entries: Sequence[AssociationEntry], profile_name: str, tenant_id: str) -> bool:
        """
        Make `entries` the profile's complete list.

        The existing rows are deleted and the new ones inserted with a single
        multi-row INSERT, both in one transaction, so a failure leaves the
        previous list untouched.

        Raises:
            EmptyBatchError: `entries` is empty (nothing is written).
            ReferentialConstraintError: a referenced entity or the profile does not exist.
            DuplicateKeyError: two entries share a priority.
            UnexpectedPersistenceError: any other failure.
        """
        if not entries:
            logger.info("assoc.replace_all.empty", extra={"model": self.model.__name__, "profile_name": profile_name})
            raise EmptyBatchError(f"Operation failed: no {self.label} entries supplied for {profile_name}")

        rows = [
            {
                "profile_name": profile_name,
                "tenant_id": tenant_id,
                "priority": entry.priority,
                self.target_attr: entry.name,
            }
            for entry in entries
        ]
        statements = [
            delete(self.model).where(self._profile_clause(profile_name, tenant_id)),
            insert(self.model).values(rows),
        ]
        async with db_error_handler("replace_all", self.label, name=profile_name):
            await self.db.execute_in_transaction(statements)

        logger.info(
            "assoc.replace_all.success",
            extra={"model": self.model.__name__, "profile_name": profile_name, "entries": len(rows)},
        )
        await self._publish("replace_all", f"{self.label} saved", profile_name, tenant_id)
        return True

    async def delete_for_profile(self, profile_name: str, tenant_id: str) -> bool:
        """Remove every row of the profile; True iff anything was removed."""
        async with db_error_handler("delete", self.label, name=profile_name):
            result = await self.db.execute(
                delete(self.model).where(self._profile_clause(profile_name, tenant_id))
            )

        if result.rowcount == 0:
            return False

        logger.info(
            "assoc.delete_for_profile.success",
            extra={"model": self.model.__name__, "profile_name": profile_name, "removed": result.rowcount},
        )
        await self._publish("delete_for_profile", f"{self.label} deleted", profile_name, tenant_id)
        return True
