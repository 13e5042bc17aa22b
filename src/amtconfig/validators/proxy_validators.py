"""
Syntax checks for proxy access information.

A proxy is addressed either by an IP literal or by a fully-qualified domain
name, and `info_format` declares which one. The two must agree; these helpers
are used by the ProxyConfig model so a mismatching entity can never be built.
"""
import ipaddress
import re
from enum import IntEnum


class InfoFormat(IntEnum):
    """Address formats understood by AMT for proxy access info."""
    IPV4 = 3
    IPV6 = 4
    FQDN = 201


# lowercase labels, optional punycode prefix, TLD of 2-63 letters, 254 chars max
_FQDN_RE = re.compile(
    r"^(?=.{1,254}$)((?=[a-z0-9-]{1,63}\.)(xn--+)?[a-z0-9]+(-[a-z0-9]+)*\.)+[a-z]{2,63}$"
)

MIN_PORT = 0
MAX_PORT = 65535


def _is_ipv4(value: str) -> bool:
    try:
        return isinstance(ipaddress.ip_address(value), ipaddress.IPv4Address)
    except ValueError:
        return False


def _is_ipv6(value: str) -> bool:
    try:
        return isinstance(ipaddress.ip_address(value), ipaddress.IPv6Address)
    except ValueError:
        return False


def _is_fqdn(value: str) -> bool:
    return _FQDN_RE.match(value) is not None


_FORMAT_CHECKS = {
    InfoFormat.IPV4: (_is_ipv4, "IPV4"),
    InfoFormat.IPV6: (_is_ipv6, "IPV6"),
    InfoFormat.FQDN: (_is_fqdn, "FQDN"),
}


def parse_info_format(value: int | InfoFormat) -> InfoFormat:
    """
    Return `value` as an InfoFormat.

    Raises:
        ValueError: if the value is not one of 3 (IPv4), 4 (IPv6) or 201 (FQDN).
    """
    try:
        return InfoFormat(int(value))
    except (TypeError, ValueError):
        raise ValueError(
            f"Server address format should be either 3(IPV4), 4(IPV6) or 201(FQDN), got {value!r}"
        ) from None


def validate_access_info(access_info: str, info_format: int | InfoFormat) -> str:
    """
    Check that `access_info` is syntactically valid for `info_format`.

    Returns:
        The access info unchanged, so the helper can be used inline in validators.

    Raises:
        ValueError: if the address is empty or does not match the declared format.
    """
    if not access_info:
        raise ValueError("Server address is required")

    fmt = parse_info_format(info_format)
    check, label = _FORMAT_CHECKS[fmt]
    if not check(access_info):
        raise ValueError(f"infoFormat {int(fmt)} requires {label} server address")
    return access_info


def validate_port(port: int) -> int:
    if port is None or not (MIN_PORT <= int(port) <= MAX_PORT):
        raise ValueError(f"Port value should range between {MIN_PORT} and {MAX_PORT}")
    return int(port)
