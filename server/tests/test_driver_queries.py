import pytest

from ovaldict.drivers.base import major, major_minor
from ovaldict.exceptions import QueryError, StorageError
from ovaldict.registry import get_by_cve_id, get_by_pack_name, resolve


def test_round_trip_by_package(db, make_root, make_meta):
    driver = resolve("redhat", db)
    driver.insert_oval(make_root("7"), make_meta())

    defs = driver.get_by_pack_name("7.3", "openssl")
    assert len(defs) == 1
    d = defs[0]
    assert d.definition_id == "oval:com.redhat.rhsa:def:20170286"
    assert [p.name for p in d.affected_packs] == ["openssl"]
    assert d.advisory.severity == "Moderate"
    assert [c.cve_id for c in d.advisory.cves] == ["CVE-2017-3731"]
    assert d.advisory.bugzillas[0].bugzilla_id == "1416852"
    assert d.advisory.affected_cpe_list[0].cpe == "cpe:/o:redhat:enterprise_linux:7"

    assert driver.get_by_pack_name("7.3", "bash") == []
    assert driver.get_by_pack_name("6.9", "openssl") == []


def test_families_do_not_see_each_other(db, make_root, make_meta):
    resolve("redhat", db).insert_oval(make_root("7"), make_meta())
    assert resolve("oracle", db).get_by_pack_name("7", "openssl") == []
    assert resolve("debian", db).get_by_pack_name("7", "openssl") == []


@pytest.mark.parametrize(
    "family, stored, queried",
    [
        ("redhat", "7", "7.4"),
        ("oracle", "6", "6.9"),
        ("debian", "9", "9.1"),
        ("ubuntu", "16.04", "16.04"),
        ("opensuse.leap", "42.2", "42.2"),
        ("suse.linux.enterprise.server", "12", "12"),
    ],
)
def test_cve_lookup_per_family(db, make_root, make_meta, family, stored, queried):
    driver = resolve(family, db)
    driver.insert_oval(make_root(stored, cve="CVE-2016-5195", pack="kernel"), make_meta(f"{family}.xml"))

    defs = driver.get_by_cve_id(queried, "CVE-2016-5195")
    assert len(defs) == 1
    assert defs[0].affected_packs[0].name == "kernel"
    assert driver.get_by_cve_id(queried, "CVE-2000-0001") == []


def test_ubuntu_keys_on_major_minor(db, make_root, make_meta):
    driver = resolve("ubuntu", db)
    driver.insert_oval(make_root("16.04"), make_meta())
    assert len(driver.get_by_pack_name("16.04", "openssl")) == 1
    assert driver.get_by_pack_name("16.10", "openssl") == []


def test_debian_cve_lookup_uses_debian_table(db, make_root, make_meta):
    root = make_root("8", cve="CVE-2014-0160")
    root.definitions[0].references = []
    root.definitions[0].advisory = None
    driver = resolve("debian", db)
    driver.insert_oval(root, make_meta())

    defs = driver.get_by_cve_id("8", "CVE-2014-0160")
    assert len(defs) == 1
    assert defs[0].debian.cve_id == "CVE-2014-0160"
    assert defs[0].advisory is None


def test_reinsert_replaces_previous_root(db, make_root, make_meta):
    from datetime import timedelta

    driver = resolve("redhat", db)
    first = make_meta()
    driver.insert_oval(make_root("7", pack="openssl"), first)
    driver.insert_oval(make_root("7", pack="bash"), make_meta(ts=first.timestamp + timedelta(hours=1)))

    assert driver.count_definitions("7") == 1
    assert driver.get_by_pack_name("7", "openssl") == []
    assert len(driver.get_by_pack_name("7", "bash")) == 1
    assert len(driver.list_fetch_meta()) == 1


def test_insert_oval_is_atomic(db, make_root, make_meta):
    driver = resolve("redhat", db)
    with pytest.raises(StorageError):
        driver.insert_oval(make_root("7"), make_meta(file_name=""))
    assert driver.count_definitions("7") == 0
    assert driver.list_fetch_meta() == []


def test_facade_with_open_db(db, make_root, make_meta):
    resolve("redhat", db).insert_oval(make_root("7"), make_meta())
    assert len(get_by_pack_name("redhat", "7", "openssl", db=db)) == 1
    assert len(get_by_cve_id("redhat", "7", "CVE-2017-3731", db=db)) == 1


def test_facade_opens_from_settings(tmp_path, monkeypatch, make_root, make_meta):
    from ovaldict import config
    from ovaldict.db import open_database

    path = str(tmp_path / "facade.sqlite3")
    monkeypatch.setattr(config.settings, "db_type", "sqlite3")
    monkeypatch.setattr(config.settings, "db_path", path)
    monkeypatch.setattr(config.settings, "db_auto_create_tables", True)

    with open_database("sqlite3", path) as d:
        resolve("ubuntu", d).insert_oval(make_root("18.04", pack="curl"), make_meta())

    defs = get_by_pack_name("ubuntu", "18.04", "curl")
    assert [p.name for p in defs[0].affected_packs] == ["curl"]


def test_version_helpers():
    assert major("7.3") == "7"
    assert major("16") == "16"
    assert major_minor("16.04.3") == "16.04"


def test_engine_failure_during_lookup_is_query_error(db, make_root, make_meta):
    from sqlalchemy import text

    driver = resolve("redhat", db)
    driver.insert_oval(make_root("7"), make_meta())
    with db.engine.begin() as conn:
        conn.execute(text("DROP TABLE packages"))

    with pytest.raises(QueryError) as ei:
        driver.get_by_pack_name("7", "openssl")
    assert "redhat" in str(ei.value)
    with pytest.raises(QueryError):
        driver.get_by_cve_id("7", "CVE-2017-3731")

    with db.engine.begin() as conn:
        conn.execute(text("DROP TABLE definitions"))
    with pytest.raises(QueryError):
        driver.count_definitions("7")
