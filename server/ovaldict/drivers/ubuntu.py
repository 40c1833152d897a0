from sqlalchemy import select
from sqlalchemy.sql import Select

from ..families import Family
from ..models import Reference
from .base import Driver, major_minor


def cve_reference_ids(cve_id: str) -> Select:
    return select(Reference.definition_id).where(Reference.source == "CVE", Reference.ref_id == cve_id)


class Ubuntu(Driver):
    """Ubuntu OVAL. Releases are keyed by major.minor ("16.04") and CVEs come from references."""

    family = Family.UBUNTU.value

    def os_version_key(self, os_version: str) -> str:
        return major_minor(os_version)

    def cve_definition_ids(self, cve_id: str) -> Select:
        return cve_reference_ids(cve_id)
