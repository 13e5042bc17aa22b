from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from amtconfig.database.base import Base
from .mixins import CreationDateMixin, TenantScopedMixin


class CiraConfig(TenantScopedMixin, CreationDateMixin, Base):
    """
    SQLAlchemy model for a CIRA (Client Initiated Remote Access) configuration.

    Describes how a provisioned device reaches its Management Presence Server.
    The MPS password is normally held by the secret store; the column is only
    a fallback for deployments without one.
    """
    __tablename__ = "ciraconfigs"

    cira_config_name: Mapped[str] = mapped_column(String(40), primary_key=True)

    mps_server_address: Mapped[str] = mapped_column(String(256), nullable=False)
    mps_port: Mapped[int] = mapped_column(Integer, nullable=False)
    user_name: Mapped[str] = mapped_column(String(40), nullable=False)
    password: Mapped[str | None] = mapped_column(String(63), nullable=True)
    common_name: Mapped[str] = mapped_column(String(256), nullable=False, default="")

    # same encoding as proxy info_format (3/4/201)
    server_address_format: Mapped[int] = mapped_column(Integer, nullable=False)

    auth_method: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    mps_root_certificate: Mapped[str] = mapped_column(Text, nullable=False, default="")
    proxy_details: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return (
            f"<CiraConfig(name={self.cira_config_name!r}, mps={self.mps_server_address!r}:{self.mps_port!r}, "
            f"tenant_id={self.tenant_id!r})>"
        )
