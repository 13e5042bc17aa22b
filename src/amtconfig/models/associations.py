from sqlalchemy import ForeignKeyConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from amtconfig.database.base import Base
from .mixins import TenantScopedMixin


class ProfileWirelessConfig(TenantScopedMixin, Base):
    """Ordered link between an AMT profile and a wireless profile."""
    __tablename__ = "profiles_wirelessconfigs"
    __table_args__ = (
        ForeignKeyConstraint(
            ["wireless_profile_name", "tenant_id"],
            ["wirelessconfigs.wireless_profile_name", "wirelessconfigs.tenant_id"],
        ),
        ForeignKeyConstraint(
            ["profile_name", "tenant_id"],
            ["profiles.profile_name", "profiles.tenant_id"],
            ondelete="CASCADE",
        ),
    )

    profile_name: Mapped[str] = mapped_column(String(40), primary_key=True)
    priority: Mapped[int] = mapped_column(Integer, primary_key=True)

    wireless_profile_name: Mapped[str] = mapped_column(String(32), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<ProfileWirelessConfig(profile={self.profile_name!r}, wifi={self.wireless_profile_name!r}, "
            f"priority={self.priority!r})>"
        )


class ProfileProxyConfig(TenantScopedMixin, Base):
    """Ordered link between an AMT profile and a proxy configuration."""
    __tablename__ = "profiles_proxyconfigs"
    __table_args__ = (
        ForeignKeyConstraint(
            ["proxy_config_name", "tenant_id"],
            ["proxyconfigs.proxy_config_name", "proxyconfigs.tenant_id"],
        ),
        ForeignKeyConstraint(
            ["profile_name", "tenant_id"],
            ["profiles.profile_name", "profiles.tenant_id"],
            ondelete="CASCADE",
        ),
    )

    profile_name: Mapped[str] = mapped_column(String(40), primary_key=True)
    priority: Mapped[int] = mapped_column(Integer, primary_key=True)

    proxy_config_name: Mapped[str] = mapped_column(String(40), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<ProfileProxyConfig(profile={self.profile_name!r}, proxy={self.proxy_config_name!r}, "
            f"priority={self.priority!r})>"
        )
