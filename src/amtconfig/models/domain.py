from datetime import datetime

from sqlalchemy import DateTime, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from amtconfig.database.base import Base
from .mixins import CreationDateMixin, TenantScopedMixin


class Domain(TenantScopedMixin, CreationDateMixin, Base):
    """
    SQLAlchemy model for an ACM activation domain.

    Holds the DNS suffix a device must be on to be admin-control activated and
    (optionally) the provisioning certificate used for it. Certificate material
    normally lives in the secret store under the domain name.
    """
    __tablename__ = "domains"
    __table_args__ = (
        UniqueConstraint("domain_suffix", "tenant_id"),
    )

    name: Mapped[str] = mapped_column(String(40), primary_key=True)

    domain_suffix: Mapped[str] = mapped_column(String(256), nullable=False)

    provisioning_cert: Mapped[str | None] = mapped_column(Text, nullable=True)
    provisioning_cert_storage_format: Mapped[str] = mapped_column(String(40), nullable=False, default="string")
    provisioning_cert_password: Mapped[str | None] = mapped_column(String(64), nullable=True)

    expiration_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return f"<Domain(name={self.name!r}, suffix={self.domain_suffix!r}, tenant_id={self.tenant_id!r})>"
