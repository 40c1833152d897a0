from sqlalchemy.sql import Select

from ..families import SUSE_VARIANTS
from .base import Driver
from .ubuntu import cve_reference_ids


class SUSE(Driver):
    """One driver class for every SUSE variant; the variant name is the family."""

    def __init__(self, family: str, db=None):
        if family not in {f.value for f in SUSE_VARIANTS}:
            raise ValueError(f"not a SUSE variant: {family}")
        super().__init__(family, db)

    def os_version_key(self, os_version: str) -> str:
        # "12.1", "42.2" and "11-SP4" style releases are kept whole.
        return (os_version or "").strip()

    def cve_definition_ids(self, cve_id: str) -> Select:
        return cve_reference_ids(cve_id)
