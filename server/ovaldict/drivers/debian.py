from sqlalchemy import select
from sqlalchemy.sql import Select

from ..families import Family
from ..models import Debian as DebianInfo
from .base import Driver


class Debian(Driver):
    """Debian OVAL. One definition per CVE, recorded in the debians table."""

    family = Family.DEBIAN.value

    def cve_definition_ids(self, cve_id: str) -> Select:
        return select(DebianInfo.definition_id).where(DebianInfo.cve_id == cve_id)
