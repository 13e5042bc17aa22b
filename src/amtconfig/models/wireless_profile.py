from sqlalchemy import ForeignKeyConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from amtconfig.database.base import Base
from .mixins import CreationDateMixin, TenantScopedMixin


class WirelessProfile(TenantScopedMixin, CreationDateMixin, Base):
    """
    SQLAlchemy model for a wireless network profile.

    Enterprise networks link to an 802.1x profile of the same tenant; personal
    (PSK) networks carry the passphrase, normally mirrored in the secret store.
    """
    __tablename__ = "wirelessconfigs"
    __table_args__ = (
        ForeignKeyConstraint(
            ["ieee8021x_profile_name", "tenant_id"],
            ["ieee8021xconfigs.profile_name", "ieee8021xconfigs.tenant_id"],
        ),
    )

    wireless_profile_name: Mapped[str] = mapped_column(String(32), primary_key=True)

    authentication_method: Mapped[int] = mapped_column(Integer, nullable=False)
    encryption_method: Mapped[int] = mapped_column(Integer, nullable=False)
    ssid: Mapped[str] = mapped_column(String(32), nullable=False)
    psk_value: Mapped[int | None] = mapped_column(Integer, nullable=True)
    psk_passphrase: Mapped[str | None] = mapped_column(String(63), nullable=True)

    ieee8021x_profile_name: Mapped[str | None] = mapped_column(String(32), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<WirelessProfile(name={self.wireless_profile_name!r}, ssid={self.ssid!r}, "
            f"tenant_id={self.tenant_id!r})>"
        )
