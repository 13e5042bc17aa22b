import pytest

from amtconfig.exceptions import ConcurrencyConflictError, DuplicateKeyError, ReferentialConstraintError
from amtconfig.models import Domain, Profile

TENANT = ""


@pytest.mark.asyncio
class TestReferenceGuards:
    """Rows referenced by a profile or a wireless profile cannot be deleted."""

    async def test_cira_referenced_by_profile(self, store, create_cira, create_profile):
        await create_cira()
        await create_profile(cira_config_name="cira1")

        with pytest.raises(ReferentialConstraintError, match="CIRA config cira1 still referenced"):
            await store.cira_configs.delete("cira1", TENANT)

        assert await store.cira_configs.exists("cira1", TENANT)

    async def test_cira_free_after_profile_deleted(self, store, create_cira, create_profile):
        await create_cira()
        await create_profile(cira_config_name="cira1")
        await store.profiles.delete("profile1", TENANT)

        assert await store.cira_configs.delete("cira1", TENANT) is True

    async def test_8021x_referenced_by_wireless_profile(self, store, create_ieee8021x, create_wireless):
        await create_ieee8021x(wired_interface=False)
        await create_wireless("wifi-ent", ieee8021x_profile_name="dot1x", authentication_method=5)

        with pytest.raises(ReferentialConstraintError, match="802.1x profile dot1x still referenced"):
            await store.ieee8021x_profiles.delete("dot1x", TENANT)

    async def test_profile_with_missing_cira_is_rejected(self, store, create_profile):
        with pytest.raises(ReferentialConstraintError):
            await create_profile(cira_config_name="ghost")


@pytest.mark.asyncio
class TestDomainRepository:

    def _domain(self, name: str, suffix: str) -> Domain:
        return Domain(name=name, domain_suffix=suffix, provisioning_cert_storage_format="string", tenant_id=TENANT)

    async def test_domain_suffix_is_unique_per_tenant(self, store):
        await store.domains.insert(self._domain("corp", "corp.example.com"))

        with pytest.raises(DuplicateKeyError):
            await store.domains.insert(self._domain("corp2", "corp.example.com"))

    async def test_domain_has_no_referrers(self, store):
        await store.domains.insert(self._domain("corp", "corp.example.com"))

        assert await store.domains.delete("corp", TENANT) is True


@pytest.mark.asyncio
class TestProfileRepository:

    async def test_profile_round_trip_keeps_tags_and_flags(self, store, create_profile):
        created = await create_profile(tags=["lab", "floor-2"], kvm_enabled=False, tls_mode=2)

        fetched = await store.profiles.get_by_name("profile1", TENANT)

        assert fetched.tags == ["lab", "floor-2"]
        assert fetched.kvm_enabled is False
        assert fetched.tls_mode == 2
        assert fetched.dhcp_enabled is True  # column default
        assert fetched.creation_date == created.creation_date

    async def test_update_profile(self, store, create_profile):
        profile = await create_profile()
        profile.activation = "acmactivate"
        profile.tags = []

        updated = await store.profiles.update(profile)

        assert updated.activation == "acmactivate"
        assert updated.tags == []

    async def test_update_with_unset_fields_stores_column_defaults(self, store, create_profile):
        """
        Behavior:
                - Update an existing profile with an entity that only sets the
                  name, activation and tenant (the shape insert accepts).
                - Unset NOT NULL columns take their column defaults; unset
                  nullable columns become NULL.

        Importance:
                - An entity valid for insert must also be valid for update,
                  instead of failing on NOT NULL constraints.
        """
        await create_profile(generate_random_password=True, tags=["lab"], user_consent="None", kvm_enabled=False)

        updated = await store.profiles.update(Profile(profile_name="profile1", activation="acmactivate", tenant_id=TENANT))

        assert updated.activation == "acmactivate"
        assert updated.generate_random_password is False
        assert updated.tags == []
        assert updated.user_consent == "All"
        assert updated.kvm_enabled is True
        assert updated.amt_password is None

    async def test_update_missing_required_column_is_rejected_before_writing(self, store):
        await store.domains.insert(Domain(
            name="corp", domain_suffix="corp.example.com", provisioning_cert_storage_format="string", tenant_id=TENANT,
        ))

        with pytest.raises(ValueError, match="Domain domain_suffix is required"):
            await store.domains.update(Domain(name="corp", tenant_id=TENANT))

        stored = await store.domains.get_by_name("corp", TENANT)
        assert stored.domain_suffix == "corp.example.com"

    async def test_insert_whose_row_vanishes_is_a_conflict(self, store, publisher, monkeypatch):
        """
        Behavior:
                - The row is removed between the insert and its re-read.
                - Expect ConcurrencyConflictError and no "created" event.
        """
        async def vanished(name, tenant_id):
            return None

        monkeypatch.setattr(store.profiles, "get_by_name", vanished)

        with pytest.raises(ConcurrencyConflictError) as exc_info:
            await store.profiles.insert(Profile(profile_name="profile1", activation="ccmactivate", tenant_id=TENANT))

        assert exc_info.value.latest is None
        assert publisher.events == []
