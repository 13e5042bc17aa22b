from sqlalchemy import JSON, Boolean, CheckConstraint, ForeignKeyConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from amtconfig.database.base import Base
from .mixins import CreationDateMixin, TenantScopedMixin


ACTIVATION_MODES = ("ccmactivate", "acmactivate")


class Profile(TenantScopedMixin, CreationDateMixin, Base):
    """
    SQLAlchemy model for an AMT profile, the aggregate an export is built from.

    A profile references (but does not own) a CIRA configuration and an 802.1x
    profile. Ordered wireless and proxy lists are stored in the association
    tables; those rows are removed together with the profile.
    """
    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint(
            "activation IN ('ccmactivate', 'acmactivate')",
            name="activation_mode",
        ),
        ForeignKeyConstraint(
            ["cira_config_name", "tenant_id"],
            ["ciraconfigs.cira_config_name", "ciraconfigs.tenant_id"],
        ),
        ForeignKeyConstraint(
            ["ieee8021x_profile_name", "tenant_id"],
            ["ieee8021xconfigs.profile_name", "ieee8021xconfigs.tenant_id"],
        ),
    )

    profile_name: Mapped[str] = mapped_column(String(40), primary_key=True)

    activation: Mapped[str] = mapped_column(String(20), nullable=False)

    amt_password: Mapped[str | None] = mapped_column(String(40), nullable=True)
    mebx_password: Mapped[str | None] = mapped_column(String(40), nullable=True)
    generate_random_password: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    generate_random_mebx_password: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    cira_config_name: Mapped[str | None] = mapped_column(String(40), nullable=True)
    ieee8021x_profile_name: Mapped[str | None] = mapped_column(String(32), nullable=True)

    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    dhcp_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    ip_sync_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    local_wifi_sync_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # 1-4 when TLS is used instead of CIRA
    tls_mode: Mapped[int | None] = mapped_column(Integer, nullable=True)
    tls_signing_authority: Mapped[str | None] = mapped_column(String(40), nullable=True)

    user_consent: Mapped[str] = mapped_column(String(7), nullable=False, default="All")
    ider_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    kvm_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    sol_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return (
            f"<Profile(name={self.profile_name!r}, activation={self.activation!r}, "
            f"cira={self.cira_config_name!r}, tenant_id={self.tenant_id!r})>"
        )
