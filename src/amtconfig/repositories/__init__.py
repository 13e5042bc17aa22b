"""
Repository layer initialization module.

Usage:
    from amtconfig.repositories import ProxyConfigRepository, ProfileProxyConfigRepository
"""

from .base_repository import DEFAULT_SKIP, DEFAULT_TOP, BaseRepository
from .association_repository import AssociationEntry, AssociationRepository
from .proxy_config_repository import ProxyConfigRepository
from .cira_config_repository import CiraConfigRepository
from .domain_repository import DomainRepository
from .wireless_profile_repository import WirelessProfileRepository
from .ieee8021x_profile_repository import Ieee8021xProfileRepository
from .profile_repository import (
    ProfileProxyConfigRepository,
    ProfileRepository,
    ProfileWirelessConfigRepository,
)

__all__ = [
    "BaseRepository",
    "DEFAULT_TOP",
    "DEFAULT_SKIP",
    "AssociationEntry",
    "AssociationRepository",
    "ProxyConfigRepository",
    "CiraConfigRepository",
    "DomainRepository",
    "WirelessProfileRepository",
    "Ieee8021xProfileRepository",
    "ProfileRepository",
    "ProfileProxyConfigRepository",
    "ProfileWirelessConfigRepository",
]
