"""
Base repository class implementing the configuration CRUD contract.

Every named configuration table (proxy, CIRA, domain, wireless, 802.1x, AMT
profile) shares the same addressing key, `(name, tenant_id)`, and the same
semantics, so the algorithm lives here once and each concrete repository only
declares its model, name column and the tables that may reference it.

Each call runs its statements through the injected `Database`, one transaction
per statement. Multi-step operations (delete's reference check, update's
re-read) are therefore not atomic; conflicts are reported, not prevented.
"""
import logging
import time
from typing import Any, Generic, Sequence, Type, TypeVar

from sqlalchemy import delete, func, insert, inspect, literal, select, update

from amtconfig.database.base import Base
from amtconfig.database.gateway import Database
from amtconfig.events import ConfigEvent, EventPublisher, LoggingEventPublisher, publish_safely
from amtconfig.exceptions.base import ConcurrencyConflictError, ReferentialConstraintError
from amtconfig.exceptions.mapper import db_error_handler

# Type variable for the model class
ModelType = TypeVar("ModelType", bound=Base)

DEFAULT_TOP = 25
DEFAULT_SKIP = 0

# server-assigned, never written by insert/update
_SERVER_COLUMNS = {"creation_date"}

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    """
    Generic repository for one tenant-scoped configuration table.

    Type Parameters:
        ModelType: The SQLAlchemy model class this repository manages.
    """

    def __init__(
        self,
        model: Type[ModelType],
        name_attr: str,
        db: Database,
        *,
        label: str,
        referenced_by: Sequence[tuple[Type[Base], str]] = (),
        publisher: EventPublisher | None = None,
    ):
        """
        Args:
            model: the mapped class, e.g. ProxyConfig (the class, not an instance)
            name_attr: attribute holding the entity name, e.g. "proxy_config_name"
            db: the shared connection gateway
            label: human name used in messages and events, e.g. "Proxy config"
            referenced_by: (model, attribute) pairs that store this entity's name;
                delete is refused while any of them matches
            publisher: event sink; defaults to logging the events
        """
        self.model = model
        self.name_attr = name_attr
        self.db = db
        self.label = label
        self.referenced_by = tuple(referenced_by)
        self.publisher = publisher or LoggingEventPublisher()

    # -----------------------
    # helpers
    # -----------------------

    @property
    def _name_column(self):
        return getattr(self.model, self.name_attr)

    def _key_clause(self, name: str, tenant_id: str):
        return (self._name_column == name) & (self.model.tenant_id == tenant_id)

    def _column_keys(self, *, mutable_only: bool) -> list[str]:
        keys = []
        for attr in inspect(self.model).column_attrs:
            if attr.key in _SERVER_COLUMNS:
                continue
            if mutable_only and any(col.primary_key for col in attr.columns):
                continue
            keys.append(attr.key)
        return keys

    def _insert_values(self, entity: ModelType) -> dict[str, Any]:
        # unset attributes are left out so column defaults apply
        values = {}
        for key in self._column_keys(mutable_only=False):
            value = getattr(entity, key)
            if value is not None:
                values[key] = value
        return values

    def _update_values(self, entity: ModelType) -> dict[str, Any]:
        """
        Values for every mutable column. An unset NOT NULL column takes its
        column default, the same value insert would have stored.

        Raises:
            ValueError: a NOT NULL column without a default is unset; raised
                before any statement is issued.
        """
        values = {}
        for key in self._column_keys(mutable_only=True):
            value = getattr(entity, key)
            column = inspect(self.model).column_attrs[key].columns[0]
            if value is None and not column.nullable:
                default = column.default
                if default is None:
                    raise ValueError(f"{self.label} {key} is required")
                value = default.arg(None) if default.is_callable else default.arg
            values[key] = value
        return values

    async def _publish(self, operation: str, verb: str, name: str, tenant_id: str) -> None:
        await publish_safely(
            self.publisher,
            ConfigEvent(
                operation=operation,
                resource=self.label,
                name=name,
                tenant_id=tenant_id,
                message=f"{self.label} {verb}",
            ),
        )

    # -----------------------
    # reads
    # -----------------------

    async def count(self, tenant_id: str) -> int:
        """Number of rows owned by the tenant; 0 when there are none."""
        stmt = (
            select(func.count())
            .select_from(self.model)
            .where(self.model.tenant_id == tenant_id)
        )
        async with db_error_handler("count", self.label):
            result = await self.db.execute(stmt)

        if not result.rows:
            return 0
        return int(result.rows[0][0] or 0)

    async def get_by_name(self, name: str, tenant_id: str) -> ModelType | None:
        """
        Get an entity by its name.

        Returns:
            The entity if found, otherwise None. Absence is not an error.
        """
        stmt = select(self.model).where(self._key_clause(name, tenant_id))
        async with db_error_handler("get", self.label, name=name):
            result = await self.db.execute(stmt, scalars=True)

        entity = result.rows[0] if result.rows else None
        logger.debug(
            "repo.get_by_name",
            extra={"model": self.model.__name__, "entity_name": name, "found": entity is not None},
        )
        return entity

    async def exists(self, name: str, tenant_id: str) -> bool:
        """Presence check that never loads the row (`SELECT 1 ... LIMIT 1`)."""
        stmt = (
            select(literal(1))
            .select_from(self.model)
            .where(self._key_clause(name, tenant_id))
            .limit(1)
        )
        async with db_error_handler("exists", self.label, name=name):
            result = await self.db.execute(stmt)
        return bool(result.rows)

    # -----------------------
    # writes
    # -----------------------

    async def insert(self, entity: ModelType) -> ModelType:
        """
        Insert `entity` and return the stored row, re-read from the database.

        Raises:
            DuplicateKeyError: (name, tenant) or another unique key already exists.
            ConcurrencyConflictError: the new row was gone when re-read.
            UnexpectedPersistenceError: any other failure.
        """
        name = getattr(entity, self.name_attr)
        tenant_id = entity.tenant_id
        logger.debug(
            "repo.insert.start",
            extra={"model": self.model.__name__, "entity_name": name, "tenant_id": tenant_id},
        )
        start = time.perf_counter()

        stmt = insert(self.model).values(**self._insert_values(entity))
        async with db_error_handler("insert", self.label, name=name):
            await self.db.execute(stmt)

        created = await self.get_by_name(name, tenant_id)
        if created is None:
            # removed between the insert and the re-read
            logger.warning("repo.insert.vanished", extra={"model": self.model.__name__, "entity_name": name})
            raise ConcurrencyConflictError(
                f"{self.label} {name} was removed by another request right after it was created.",
                latest=None,
            )

        logger.info(
            "repo.insert.success",
            extra={
                "model": self.model.__name__,
                "entity_name": name,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        await self._publish("insert", "created", name, tenant_id)
        return created

    async def update(self, entity: ModelType) -> ModelType:
        """
        Replace every mutable column of the row keyed by the entity's
        (name, tenant_id) and return the row as re-read afterwards.

        The re-read always happens. An update that matched no row is reported
        as a concurrency conflict: callers are expected to have checked the row
        exists, so zero affected rows means it changed or vanished in between.

        Raises:
            ConcurrencyConflictError: no row matched; `.latest` holds the re-read row (or None).
            DuplicateKeyError: the new values collide with another row's unique key.
            UnexpectedPersistenceError: any other failure.
            ValueError: a required column is unset (no statement is issued).
        """
        name = getattr(entity, self.name_attr)
        tenant_id = entity.tenant_id
        start = time.perf_counter()

        stmt = (
            update(self.model)
            .where(self._key_clause(name, tenant_id))
            .values(**self._update_values(entity))
            .execution_options(synchronize_session=False)
        )
        async with db_error_handler("update", self.label, name=name):
            result = await self.db.execute(stmt)

        latest = await self.get_by_name(name, tenant_id)

        if result.rowcount == 0:
            logger.warning(
                "repo.update.conflict",
                extra={"model": self.model.__name__, "entity_name": name, "still_exists": latest is not None},
            )
            raise ConcurrencyConflictError(
                f"{self.label} {name} was changed or removed by another request. Refresh and try again.",
                latest=latest,
            )

        logger.info(
            "repo.update.success",
            extra={
                "model": self.model.__name__,
                "entity_name": name,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        await self._publish("update", "updated", name, tenant_id)
        return latest

    async def _is_referenced(self, name: str, tenant_id: str) -> bool:
        for ref_model, ref_attr in self.referenced_by:
            stmt = (
                select(literal(1))
                .select_from(ref_model)
                .where(getattr(ref_model, ref_attr) == name)
                .where(ref_model.tenant_id == tenant_id)
                .limit(1)
            )
            result = await self.db.execute(stmt)
            if result.rows:
                return True
        return False

    async def delete(self, name: str, tenant_id: str) -> bool:
        """
        Delete an entity by its name.

        Returns:
            True if a row was removed, False if there was nothing to delete.

        Raises:
            ReferentialConstraintError: another row still references this one,
                either found by the pre-check or reported by the database.
            UnexpectedPersistenceError: any other failure.
        """
        still_referenced = f"{self.label} {name} still referenced"

        async with db_error_handler("delete", self.label, name=name, foreign_key_message=still_referenced):
            if await self._is_referenced(name, tenant_id):
                logger.info(
                    "repo.delete.referenced",
                    extra={"model": self.model.__name__, "entity_name": name},
                )
                raise ReferentialConstraintError(still_referenced)

            result = await self.db.execute(
                delete(self.model).where(self._key_clause(name, tenant_id))
            )

        if result.rowcount == 0:
            logger.info(
                "repo.delete.not_found",
                extra={"model": self.model.__name__, "entity_name": name},
            )
            return False

        logger.info("repo.delete.success", extra={"model": self.model.__name__, "entity_name": name})
        await self._publish("delete", "deleted", name, tenant_id)
        return True

    async def list(self, tenant_id: str, top: int = DEFAULT_TOP, skip: int = DEFAULT_SKIP) -> list[ModelType]:
        """
        Page through the tenant's rows ordered by name.

        Args:
            tenant_id: owning tenant ("" is a tenant like any other)
            top: page size (LIMIT)
            skip: rows to skip (OFFSET)

        Returns:
            A list of model instances (empty if none found).
        """
        stmt = (
            select(self.model)
            .where(self.model.tenant_id == tenant_id)
            .order_by(self._name_column)
            .limit(top)
            .offset(skip)
        )
        async with db_error_handler("list", self.label):
            result = await self.db.execute(stmt, scalars=True)

        logger.debug(
            "repo.list",
            extra={"model": self.model.__name__, "returned": len(result.rows), "top": top, "skip": skip},
        )
        return result.rows
