from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from amtconfig.database.base import Base
from .mixins import CreationDateMixin, TenantScopedMixin


class Ieee8021xProfile(TenantScopedMixin, CreationDateMixin, Base):
    """
    SQLAlchemy model for an IEEE 802.1x authentication profile.

    Referenced by AMT profiles (wired) and by wireless profiles.
    """
    __tablename__ = "ieee8021xconfigs"

    profile_name: Mapped[str] = mapped_column(String(32), primary_key=True)

    # EAP method number (e.g. 0 = EAP-TLS, 2 = PEAPv0/EAP-MSCHAPv2)
    auth_protocol: Mapped[int] = mapped_column(Integer, nullable=False)

    server_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    domain: Mapped[str | None] = mapped_column(String(255), nullable=True)
    username: Mapped[str | None] = mapped_column(String(128), nullable=True)
    password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    roaming_identity: Mapped[str | None] = mapped_column(String(255), nullable=True)
    active_in_s0: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    pxe_timeout: Mapped[int | None] = mapped_column(Integer, nullable=True)
    wired_interface: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return (
            f"<Ieee8021xProfile(name={self.profile_name!r}, protocol={self.auth_protocol!r}, "
            f"wired={self.wired_interface!r}, tenant_id={self.tenant_id!r})>"
        )
