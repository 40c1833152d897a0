import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure the server/ directory is on sys.path so `import ovaldict.*` works in all runners.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Test-suite guardrails: never pick up a developer's real database settings.
os.environ["DB_TYPE"] = "sqlite3"
os.environ["DB_AUTO_CREATE_TABLES"] = "true"
os.environ["DB_REQUIRE_MIGRATIONS_UP_TO_DATE"] = "false"


@pytest.fixture(autouse=True)
def _fresh_global_schema_state():
    from ovaldict.db import schema_state as global_state

    global_state.reset()
    yield
    global_state.reset()


@pytest.fixture
def schema_state():
    from ovaldict.db import SchemaState

    return SchemaState()


@pytest.fixture
def db(tmp_path, schema_state):
    from ovaldict.db import open_database

    database = open_database("sqlite3", str(tmp_path / "oval.sqlite3"), state=schema_state)
    try:
        yield database
    finally:
        database.close()


@pytest.fixture
def make_root():
    from ovaldict.models import Advisory, Bugzilla, Cpe, Cve, Debian, Definition, Package, Reference, Root

    def _make(os_version="7", pack="openssl", cve="CVE-2017-3731", def_id="oval:com.redhat.rhsa:def:20170286"):
        d = Definition(
            definition_id=def_id,
            title=f"{pack} security update",
            description=f"{pack}: truncated packet could crash via OOB read",
            affected_packs=[Package(name=pack, version="1:1.0.2k-1.el7")],
            references=[
                Reference(source="CVE", ref_id=cve, ref_url=f"https://access.redhat.com/security/cve/{cve}"),
            ],
            advisory=Advisory(
                severity="Moderate",
                cves=[Cve(cve_id=cve, cvss3="5.3/CVSS:3.0/AV:N/AC:L/PR:N/UI:N/S:U/C:N/I:N/A:L", cwe="CWE-125")],
                bugzillas=[Bugzilla(bugzilla_id="1416852", url="https://bugzilla.redhat.com/1416852", title=cve)],
                affected_cpe_list=[Cpe(cpe="cpe:/o:redhat:enterprise_linux:7")],
            ),
            debian=Debian(cve_id=cve, more_info="", date=datetime(2017, 1, 26, tzinfo=timezone.utc)),
        )
        return Root(os_version=os_version, definitions=[d])

    return _make


@pytest.fixture
def make_meta():
    from ovaldict.models import FetchMeta

    def _make(file_name="com.redhat.rhsa-RHEL7.xml.bz2", ts=datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)):
        return FetchMeta(file_name=file_name, timestamp=ts)

    return _make
