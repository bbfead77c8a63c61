"""Exceptions raised by pkgurl."""


class PackageURLError(Exception):
    """Base class for all pkgurl errors."""


class MissingComponentError(PackageURLError, TypeError):
    """Raised when a required component (type or name) is missing on construction."""


class InvalidPackageURL(PackageURLError, ValueError):
    """Raised when a package URL string or record is not valid.

    Attributes:
        reason: A human-readable description of the rule that failed.
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
