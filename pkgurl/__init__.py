"""pkgurl: parse, validate and render package URLs (purls)."""

import logging
from typing import Dict, Optional

from .config import PKGURL_CONFIG
from .decoder import decode
from .encoder import encode
from .errors import InvalidPackageURL, MissingComponentError, PackageURLError
from .purl import PackageURL, QualifierValue
from .rules import DEFAULT_TYPE_RULES, TypeRuleRegistry

logging.getLogger(__name__).setLevel(PKGURL_CONFIG["logging_level_int"])


def construct(
    type: str,
    name: str,
    namespace: Optional[str] = None,
    version: Optional[str] = None,
    qualifiers: Optional[Dict[str, QualifierValue]] = None,
    subpath: Optional[str] = None,
) -> PackageURL:
    """Builds a PackageURL from its components without validating it.

    Raises:
        MissingComponentError: If `type` or `name` is missing or empty.
    """
    return PackageURL(
        type=type,
        namespace=namespace,
        name=name,
        version=version,
        qualifiers=qualifiers,
        subpath=subpath,
    )


def validate(purl: PackageURL, registry: Optional[TypeRuleRegistry] = None) -> PackageURL:
    """Runs the structural checks and the type rule. See `PackageURL.validated`."""
    return purl.validated(registry)


__all__ = [
    "construct",
    "decode",
    "DEFAULT_TYPE_RULES",
    "encode",
    "InvalidPackageURL",
    "MissingComponentError",
    "PackageURL",
    "PackageURLError",
    "TypeRuleRegistry",
    "validate",
]
