from __future__ import annotations

from enum import Enum

from .exceptions import UnknownFamilyError, UnknownVariantError


class Family(str, Enum):
    DEBIAN = "debian"
    UBUNTU = "ubuntu"
    REDHAT = "redhat"
    ORACLE = "oracle"
    OPENSUSE = "opensuse"
    OPENSUSE_LEAP = "opensuse.leap"
    SUSE_ENTERPRISE_SERVER = "suse.linux.enterprise.server"
    SUSE_ENTERPRISE_DESKTOP = "suse.linux.enterprise.desktop"
    SUSE_OPENSTACK_CLOUD = "suse.openstack.cloud"


TOP_LEVEL_FAMILIES = (Family.DEBIAN, Family.UBUNTU, Family.REDHAT, Family.ORACLE)

SUSE_VARIANTS = (
    Family.OPENSUSE,
    Family.OPENSUSE_LEAP,
    Family.SUSE_ENTERPRISE_SERVER,
    Family.SUSE_ENTERPRISE_DESKTOP,
    Family.SUSE_OPENSTACK_CLOUD,
)

# Short hyphenated spellings accepted at the HTTP/CLI boundary.
SUSE_ALIASES = {
    "opensuse-leap": Family.OPENSUSE_LEAP,
    "suse-enterprise-server": Family.SUSE_ENTERPRISE_SERVER,
    "suse-enterprise-desktop": Family.SUSE_ENTERPRISE_DESKTOP,
    "suse-openstack-cloud": Family.SUSE_OPENSTACK_CLOUD,
}

# Identifiers containing this marker are checked against SUSE_VARIANTS.
SUSE_MARKER = "suse"


def parse_family(raw: str) -> Family:
    """Turn a raw family string into a Family, rejecting anything unknown."""
    family = (raw or "").strip().lower()
    for f in TOP_LEVEL_FAMILIES:
        if family == f.value:
            return f
    if SUSE_MARKER in family:
        for f in SUSE_VARIANTS:
            if family == f.value:
                return f
        if family in SUSE_ALIASES:
            return SUSE_ALIASES[family]
        raise UnknownVariantError(raw, [f.value for f in SUSE_VARIANTS])
    raise UnknownFamilyError(raw)


def is_suse(family: Family) -> bool:
    return family in SUSE_VARIANTS
