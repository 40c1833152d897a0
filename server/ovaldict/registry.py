from __future__ import annotations

from . import config
from .db import Database
from .drivers.base import Driver
from .drivers.debian import Debian
from .drivers.oracle import Oracle
from .drivers.redhat import RedHat
from .drivers.suse import SUSE
from .drivers.ubuntu import Ubuntu
from .families import Family, SUSE_VARIANTS, is_suse, parse_family
from .schemas import DefinitionOut

_DRIVERS: dict[Family, type[Driver]] = {
    Family.DEBIAN: Debian,
    Family.UBUNTU: Ubuntu,
    Family.REDHAT: RedHat,
    Family.ORACLE: Oracle,
}
_DRIVERS.update({f: SUSE for f in SUSE_VARIANTS})


def resolve(family: str | Family, db: Database | None = None) -> Driver:
    """Return an unopened driver for `family`, attached to `db` when given.

    Raises UnknownFamilyError, or UnknownVariantError for unlisted SUSE flavors.
    """
    fam = family if isinstance(family, Family) else parse_family(family)
    cls = _DRIVERS[fam]
    driver = cls(fam.value) if is_suse(fam) else cls()
    if db is not None:
        driver.attach(db)
    return driver


def _open(driver: Driver) -> None:
    settings = config.settings
    settings.validate_storage()
    driver.open_db(
        settings.db_type,
        settings.db_path,
        settings.debug_sql,
        auto_migrate=settings.db_auto_create_tables,
        require_up_to_date=settings.db_require_migrations_up_to_date,
    )


def get_by_pack_name(family: str, os_version: str, pack_name: str, db: Database | None = None) -> list[DefinitionOut]:
    """Definitions for `pack_name` on `family` `os_version`.

    Without `db`, a connection is opened from settings and closed afterwards.
    """
    driver = resolve(family, db)
    if db is not None:
        return driver.get_by_pack_name(os_version, pack_name)
    _open(driver)
    with driver:
        return driver.get_by_pack_name(os_version, pack_name)


def get_by_cve_id(family: str, os_version: str, cve_id: str, db: Database | None = None) -> list[DefinitionOut]:
    driver = resolve(family, db)
    if db is not None:
        return driver.get_by_cve_id(os_version, cve_id)
    _open(driver)
    with driver:
        return driver.get_by_cve_id(os_version, cve_id)
