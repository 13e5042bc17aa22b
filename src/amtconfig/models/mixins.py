from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func


class TenantScopedMixin:
    """
    Adds the `tenant_id` column shared by every table.

    tenant_id is part of each table's primary key, so two tenants can own rows
    with the same name. The empty string is an ordinary tenant value, never an
    implicit default: callers always set it.
    """

    tenant_id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        nullable=False,
    )


class CreationDateMixin:
    """Server-assigned creation timestamp for named configuration rows."""

    creation_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )
