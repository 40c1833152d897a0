"""
Error taxonomy for the OVAL dictionary storage layer.
"""

from __future__ import annotations


class OvalDictError(Exception):
    """Base exception for all ovaldict errors."""


class ConfigurationError(OvalDictError):
    """Invalid dialect or connection target. Detected before any I/O."""


class UnknownFamilyError(OvalDictError):
    """Family identifier does not name a supported OS family."""

    def __init__(self, family: str, message: str | None = None):
        self.family = family
        super().__init__(message or f"Unknown OS Type: {family}")


class UnknownVariantError(UnknownFamilyError):
    """SUSE-like identifier that is not one of the allow-listed variants."""

    def __init__(self, family: str, variants: list[str]):
        self.variants = list(variants)
        super().__init__(family, f"Unknown SUSE. Specify from {self.variants}: {family}")


class StorageError(OvalDictError):
    """Connection, migration or write failure."""

    def __init__(self, message: str, *, dialect: str | None = None, target: str | None = None):
        self.dialect = dialect
        self.target = target
        super().__init__(message)


class QueryError(OvalDictError):
    """Underlying engine failure during a lookup."""
