import pytest

from ovaldict.drivers.debian import Debian
from ovaldict.drivers.redhat import RedHat
from ovaldict.drivers.suse import SUSE
from ovaldict.drivers.ubuntu import Ubuntu
from ovaldict.exceptions import UnknownFamilyError, UnknownVariantError
from ovaldict.families import SUSE_VARIANTS, Family, parse_family
from ovaldict.registry import resolve


@pytest.mark.parametrize("family", [f.value for f in Family])
def test_every_family_queries_an_empty_store(db, family):
    driver = resolve(family, db)
    assert driver.family == family
    assert driver.get_by_pack_name("7.3", "openssl") == []
    assert driver.get_by_cve_id("7.3", "CVE-2017-3731") == []


def test_top_level_families_map_to_their_drivers():
    assert isinstance(resolve("redhat"), RedHat)
    assert isinstance(resolve("debian"), Debian)
    assert isinstance(resolve(" Ubuntu "), Ubuntu)
    assert resolve("oracle").family == "oracle"


@pytest.mark.parametrize("family", ["centos", "windows", "", "amazon"])
def test_unknown_family(family):
    with pytest.raises(UnknownFamilyError) as ei:
        resolve(family)
    assert not isinstance(ei.value, UnknownVariantError)


def test_suse_variant_allow_list():
    driver = resolve("suse.linux.enterprise.desktop")
    assert isinstance(driver, SUSE)
    assert driver.family == "suse.linux.enterprise.desktop"

    assert resolve("suse-enterprise-desktop").family == Family.SUSE_ENTERPRISE_DESKTOP.value
    assert parse_family("opensuse.leap") is Family.OPENSUSE_LEAP


def test_unknown_suse_variant_lists_valid_ones():
    with pytest.raises(UnknownVariantError) as ei:
        resolve("suse-unknown-flavor")
    assert ei.value.variants == [f.value for f in SUSE_VARIANTS]
    assert "suse.openstack.cloud" in str(ei.value)


def test_suse_driver_rejects_non_variant():
    with pytest.raises(ValueError):
        SUSE("redhat")


def test_driver_without_db_fails_with_storage_error():
    from ovaldict.exceptions import StorageError

    with pytest.raises(StorageError):
        resolve("redhat").get_by_pack_name("7", "openssl")
