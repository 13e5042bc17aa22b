r"""
Centralized access to all configuration models.

Importing this package registers every table on `Base.metadata`, which is what
`create_all` and the composite foreign keys between tables rely on.

Example:

from amtconfig.models import Profile, ProxyConfig, ProfileProxyConfig
"""

from .proxy_config import ProxyConfig
from .cira_config import CiraConfig
from .domain import Domain
from .ieee8021x_profile import Ieee8021xProfile
from .wireless_profile import WirelessProfile
from .profile import ACTIVATION_MODES, Profile
from .associations import ProfileProxyConfig, ProfileWirelessConfig

__all__ = [
    "ProxyConfig",
    "CiraConfig",
    "Domain",
    "Ieee8021xProfile",
    "WirelessProfile",
    "Profile",
    "ACTIVATION_MODES",
    "ProfileProxyConfig",
    "ProfileWirelessConfig",
]
