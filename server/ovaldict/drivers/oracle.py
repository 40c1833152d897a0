from ..families import Family
from .base import Driver


class Oracle(Driver):
    """ELSA-based OVAL; same advisory layout as Red Hat."""

    family = Family.ORACLE.value
