"""
Profile export: resolve an AMT profile and everything it references into one
YAML document, then encrypt it with a one-time key.

Resolution order matters only where a later step needs an earlier result; the
wireless and proxy lists are resolved concurrently and reassembled in priority
order. Secrets come from the secret store when available and fall back to the
values stored on the rows, so a secret-store outage degrades an export instead
of failing it.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

import yaml

from amtconfig.exceptions.base import NotFoundError
from amtconfig.models import CiraConfig, Domain, Ieee8021xProfile, Profile
from amtconfig.repositories import AssociationEntry
from amtconfig.secrets import SecretLookup, SecretResolver
from amtconfig.store import ConfigStore
from .cipher import encrypt_with_random_key

logger = logging.getLogger(__name__)

ACM_ACTIVATION = "acmactivate"


@dataclass(frozen=True)
class ExportBundle:
    filename: str
    content: str  # base64(nonce || tag || ciphertext)
    key: str      # base64 one-time key

    def to_payload(self) -> dict[str, str]:
        return {"filename": self.filename, "content": self.content, "key": self.key}


def _first(*values: Any, default: Any = "") -> Any:
    for value in values:
        if value is not None and value != "":
            return value
    return default


class ProfileExporter:
    """
    Builds encrypted export bundles for AMT profiles.

    Args:
        store: repositories sharing one connection gateway
        secrets: secret resolver; None disables secret lookups entirely
    """

    def __init__(self, store: ConfigStore, secrets: SecretResolver | None = None):
        self.store = store
        self.secrets = SecretLookup(secrets)

    async def export(self, profile_name: str, tenant_id: str, domain_name: str | None = None) -> ExportBundle:
        """
        Raises:
            NotFoundError: the profile, its CIRA config, one of its wireless or
                proxy entries, or its 802.1x profile does not exist.
            RepositoryError: any persistence failure while reading.
        """
        start = time.perf_counter()
        logger.info("export.start", extra={"profile_name": profile_name, "tenant_id": tenant_id})

        document = await self.build_document(profile_name, tenant_id, domain_name)
        plaintext = yaml.safe_dump(document, sort_keys=True, default_flow_style=False)
        encrypted = encrypt_with_random_key(plaintext)

        logger.info(
            "export.success",
            extra={
                "profile_name": profile_name,
                "duration_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return ExportBundle(
            filename=f"{profile_name}.yaml",
            content=encrypted.ciphertext,
            key=encrypted.key,
        )

    async def build_document(self, profile_name: str, tenant_id: str, domain_name: str | None = None) -> dict:
        """Resolve every reference of the profile into the plain export document."""
        profile = await self.store.profiles.get_by_name(profile_name, tenant_id)
        if profile is None:
            raise NotFoundError("AMT", profile_name)

        cira = None
        if profile.cira_config_name:
            cira = await self.store.cira_configs.get_by_name(profile.cira_config_name, tenant_id)
            if cira is None:
                raise NotFoundError("CIRA", profile.cira_config_name)

        domain = None
        if profile.activation == ACM_ACTIVATION:
            domain = await self._resolve_domain(domain_name, tenant_id)

        wifi_entries = await self.store.profile_wireless_configs.list_for_profile(profile_name, tenant_id)
        wireless = await self._resolve_wireless(wifi_entries, tenant_id)

        proxy_entries = await self.store.profile_proxy_configs.list_for_profile(profile_name, tenant_id)
        proxies = await self._resolve_proxies(proxy_entries, tenant_id)

        ieee8021x = None
        if profile.ieee8021x_profile_name:
            ieee8021x = await self.store.ieee8021x_profiles.get_by_name(profile.ieee8021x_profile_name, tenant_id)
            if ieee8021x is None:
                raise NotFoundError("802.1x", profile.ieee8021x_profile_name)

        profile_secrets = await self.secrets.at_path(f"profiles/{profile_name}") or {}
        cira_block = await self._cira_block(cira)
        certs = await self._domain_certificates(domain)

        return {
            "configuration": {
                "name": profile.profile_name,
                "tenantId": profile.tenant_id,
                "generalSettings": {
                    "sharedFQDN": False,
                    "networkInterfaceEnabled": 0,
                    "pingResponseEnabled": False,
                    "tags": list(profile.tags or []),
                },
                "network": {
                    "wired": {
                        "dhcpEnabled": profile.dhcp_enabled,
                        "ipSyncEnabled": profile.ip_sync_enabled,
                        "sharedStaticIP": not profile.dhcp_enabled,
                        "ieee8021xProfileName": profile.ieee8021x_profile_name or "",
                    },
                    "wireless": {
                        "wifiSyncEnabled": profile.local_wifi_sync_enabled,
                        "profiles": wireless,
                    },
                    "proxies": proxies,
                },
                "ieee8021xConfigs": [await self._ieee8021x_block(ieee8021x)] if ieee8021x else [],
                "tls": {
                    "enabled": profile.tls_mode is not None,
                    "mode": profile.tls_mode or 0,
                    "signingAuthority": profile.tls_signing_authority or "",
                    "mutualAuthentication": False,
                    "allowNonTLS": False,
                },
                "redirection": {
                    "enabled": profile.kvm_enabled or profile.sol_enabled or profile.ider_enabled,
                    "services": {
                        "kvm": profile.kvm_enabled,
                        "sol": profile.sol_enabled,
                        "ider": profile.ider_enabled,
                    },
                    "userConsent": profile.user_consent,
                },
                "cira": cira_block,
                "amtSpecific": {
                    "controlMode": profile.activation,
                    "adminPassword": _first(profile_secrets.get("AMT_PASSWORD"), profile.amt_password),
                    "mebxPassword": _first(profile_secrets.get("MEBX_PASSWORD"), profile.mebx_password),
                    "mpsPassword": _first(
                        profile_secrets.get("MPS_PASSWORD"),
                        cira_block["password"] if cira_block else None,
                    ),
                    "domainSuffix": domain.domain_suffix if domain else "",
                    "provisioningCert": certs[0],
                    "provisioningCertPwd": certs[1],
                },
            }
        }

    # -----------------------
    # reference resolution
    # -----------------------

    async def _resolve_domain(self, domain_name: str | None, tenant_id: str) -> Domain | None:
        if not domain_name:
            logger.warning("export.domain_not_supplied", extra={"tenant_id": tenant_id})
            return None
        domain = await self.store.domains.get_by_name(domain_name, tenant_id)
        if domain is None:
            # certificates are best-effort enrichment; the export still goes ahead
            logger.warning("export.domain_missing", extra={"domain_name": domain_name, "tenant_id": tenant_id})
        return domain

    async def _resolve_wireless(self, entries: list[AssociationEntry], tenant_id: str) -> list[dict]:
        rows = await asyncio.gather(
            *(self.store.wireless_profiles.get_by_name(entry.name, tenant_id) for entry in entries)
        )
        for entry, row in zip(entries, rows):
            if row is None:
                raise NotFoundError("Wireless", entry.name)

        passphrases = await asyncio.gather(
            *(self.secrets.from_key(f"Wireless/{row.wireless_profile_name}", "PSK_PASSPHRASE") for row in rows)
        )
        return [
            {
                "profileName": row.wireless_profile_name,
                "ssid": row.ssid,
                "priority": entry.priority,
                "authenticationMethod": row.authentication_method,
                "encryptionMethod": row.encryption_method,
                "pskPassphrase": _first(passphrase, row.psk_passphrase),
                "ieee8021xProfileName": row.ieee8021x_profile_name or "",
            }
            for entry, row, passphrase in zip(entries, rows, passphrases)
        ]

    async def _resolve_proxies(self, entries: list[AssociationEntry], tenant_id: str) -> list[dict]:
        rows = await asyncio.gather(
            *(self.store.proxy_configs.get_by_name(entry.name, tenant_id) for entry in entries)
        )
        proxies = []
        for entry, row in zip(entries, rows):
            if row is None:
                raise NotFoundError("Proxy", entry.name)
            proxies.append({
                "name": row.proxy_config_name,
                "priority": entry.priority,
                "accessInfo": row.access_info,
                "infoFormat": row.info_format,
                "port": row.port,
                "networkDnsSuffix": row.network_dns_suffix,
            })
        return proxies

    # -----------------------
    # secret-backed blocks
    # -----------------------

    async def _cira_block(self, cira: CiraConfig | None) -> dict | None:
        if cira is None:
            return None
        password = await self.secrets.from_key(f"CIRAConfigs/{cira.cira_config_name}", "MPS_PASSWORD")
        return {
            "name": cira.cira_config_name,
            "mpsServerAddress": cira.mps_server_address,
            "mpsPort": cira.mps_port,
            "serverAddressFormat": cira.server_address_format,
            "username": cira.user_name,
            "password": _first(password, cira.password),
            "commonName": cira.common_name,
            "authMethod": cira.auth_method,
            "mpsRootCertificate": cira.mps_root_certificate,
            "proxyDetails": cira.proxy_details,
        }

    async def _ieee8021x_block(self, profile: Ieee8021xProfile) -> dict:
        password = await self.secrets.from_key(f"8021xConfigs/{profile.profile_name}", "PASSWORD")
        return {
            "profileName": profile.profile_name,
            "authenticationProtocol": profile.auth_protocol,
            "username": profile.username or "",
            "password": _first(password, profile.password),
            "serverName": profile.server_name or "",
            "domain": profile.domain or "",
            "roamingIdentity": profile.roaming_identity or "",
            "activeInS0": profile.active_in_s0,
            "pxeTimeout": profile.pxe_timeout or 0,
            "wiredInterface": profile.wired_interface,
        }

    async def _domain_certificates(self, domain: Domain | None) -> tuple[str, str]:
        if domain is None:
            return "", ""
        certs = await self.secrets.at_path(f"certs/{domain.name}")
        if certs is None:
            logger.warning("export.certificates_unavailable", extra={"domain_name": domain.name})
            certs = {}
        return (
            _first(certs.get("CERT"), domain.provisioning_cert),
            _first(certs.get("CERT_PASSWORD"), domain.provisioning_cert_password),
        )
