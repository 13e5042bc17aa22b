from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, validates

from amtconfig.database.base import Base
from amtconfig.validators.proxy_validators import (
    parse_info_format,
    validate_access_info,
    validate_port,
)
from .mixins import CreationDateMixin, TenantScopedMixin


class ProxyConfig(TenantScopedMixin, CreationDateMixin, Base):
    """
    SQLAlchemy model for a network proxy configuration.

    A proxy is addressed by `access_info` (IPv4/IPv6 literal or FQDN) whose
    syntax must agree with `info_format`. The pair is validated whenever either
    attribute is assigned, so an invalid combination never reaches the database.
    """
    __tablename__ = "proxyconfigs"
    __table_args__ = (
        CheckConstraint("port >= 0 AND port <= 65535", name="port_range"),
    )

    proxy_config_name: Mapped[str] = mapped_column(
        String(40),
        primary_key=True
    )

    access_info: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )

    # 3 = IPv4, 4 = IPv6, 201 = FQDN
    info_format: Mapped[int] = mapped_column(
        Integer,
        nullable=False
    )

    port: Mapped[int] = mapped_column(
        Integer,
        nullable=False
    )

    network_dns_suffix: Mapped[str] = mapped_column(
        String(192),
        nullable=False
    )

    @validates("info_format")
    def _validate_info_format(self, key: str, value: int) -> int:
        fmt = parse_info_format(value)
        # access_info may be assigned first or second during construction
        if self.access_info is not None:
            validate_access_info(self.access_info, fmt)
        return int(fmt)

    @validates("access_info")
    def _validate_access_info(self, key: str, value: str) -> str:
        if self.info_format is not None:
            validate_access_info(value, self.info_format)
        elif not value:
            raise ValueError("Server address is required")
        return value

    @validates("port")
    def _validate_port(self, key: str, value: int) -> int:
        return validate_port(value)

    def __repr__(self) -> str:
        return (
            f"<ProxyConfig(name={self.proxy_config_name!r}, access_info={self.access_info!r}, "
            f"port={self.port!r}, tenant_id={self.tenant_id!r})>"
        )
