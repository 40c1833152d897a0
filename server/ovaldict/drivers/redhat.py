from ..families import Family
from .base import Driver


class RedHat(Driver):
    """RHSA-based OVAL. CVEs hang off each definition's advisory."""

    family = Family.REDHAT.value
