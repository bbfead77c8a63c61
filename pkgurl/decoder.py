"""Parsing of purl strings into validated PackageURL records.

The string is consumed in a fixed order: subpath ('#', from the right),
qualifiers ('?', from the right), scheme (':', from the left), type ('/',
from the left), version ('@', from the right), then name and namespace
('/', from the right).
"""

from __future__ import annotations
import logging
from typing import TYPE_CHECKING, Dict, Optional

from .codec import decode_component
from .config import PKGURL_CONFIG
from .errors import InvalidPackageURL, MissingComponentError
from .purl import CHECKSUMS, SCHEME, PackageURL, QualifierValue
from .strings import LEFT, RIGHT, segment_present, split_once

if TYPE_CHECKING:
    from .rules import TypeRuleRegistry

logger = logging.getLogger(__name__)


def decode(
    string: str,
    allow_scheme_slashes: Optional[bool] = None,
    registry: Optional[TypeRuleRegistry] = None,
) -> PackageURL:
    """Decodes and validates a purl string.

    Args:
        string: The purl string, e.g. 'pkg:npm/foobar@12.3.1'.
        allow_scheme_slashes: Accept and ignore '//' right after 'pkg:'.
            Defaults to the `allow_scheme_slashes` configuration value.
        registry: The type rules to apply. Defaults to `DEFAULT_TYPE_RULES`.

    Returns:
        The validated, type-normalized PackageURL.

    Raises:
        InvalidPackageURL: If the string is not a valid package URL.
    """
    if allow_scheme_slashes is None:
        allow_scheme_slashes = PKGURL_CONFIG["allow_scheme_slashes"]

    try:
        purl = _decode(string, allow_scheme_slashes).validated(registry)
    except InvalidPackageURL as e:
        logger.debug(f"Rejected purl '{string}': {e.reason}")
        raise
    except MissingComponentError as e:
        logger.debug(f"Rejected purl '{string}': {e}")
        raise InvalidPackageURL(str(e)) from e
    except UnicodeDecodeError as e:
        logger.debug(f"Rejected purl '{string}': {e}")
        raise InvalidPackageURL("percent-encoded text is not valid UTF-8") from e

    logger.debug(f"Decoded purl '{string}' as type '{purl.type}', name '{purl.name}'")
    return purl


def _decode(string: str, allow_scheme_slashes: bool) -> PackageURL:
    remainder = string

    subpath = None
    split = split_once(remainder, "#", RIGHT)
    if split is not None:
        raw_subpath, remainder = split
        subpath = _decode_subpath(raw_subpath)

    qualifiers = None
    split = split_once(remainder, "?", RIGHT)
    if split is not None:
        raw_qualifiers, remainder = split
        qualifiers = _decode_qualifiers(raw_qualifiers)

    split = split_once(remainder, ":", LEFT)
    if split is None or split[0] != SCHEME:
        raise InvalidPackageURL(f'invalid or missing "{SCHEME}:" URL scheme')
    remainder = split[1]
    if allow_scheme_slashes:
        remainder = remainder.removeprefix("//")

    split = split_once(remainder.removesuffix("/"), "/", LEFT)
    if split is None or not split[0]:
        raise InvalidPackageURL("invalid or missing package type")
    type_, remainder = split

    version = None
    split = split_once(remainder, "@", RIGHT)
    if split is not None:
        raw_version, remainder = split
        version = decode_component(raw_version) or None

    namespace = None
    split = split_once(remainder, "/", RIGHT)
    if split is not None:
        raw_name, raw_namespace = split
        namespace = _decode_namespace(raw_namespace)
    else:
        raw_name = remainder
    name = decode_component(raw_name)

    return PackageURL(
        type=type_,
        namespace=namespace,
        name=name,
        version=version,
        qualifiers=qualifiers,
        subpath=subpath,
    )


def _decode_subpath(raw_subpath: str) -> Optional[str]:
    """Drops empty, '.' and '..' segments and decodes the rest."""
    subpath = "/".join(
        decode_component(segment) for segment in raw_subpath.split("/") if segment_present(segment)
    )
    return subpath or None


def _decode_qualifiers(raw_qualifiers: str) -> Optional[Dict[str, QualifierValue]]:
    """Parses 'k=v&k2=v2'.

    Pairs without '=' and pairs with an empty value are dropped. A repeated
    key keeps its last value.
    """
    qualifiers: Dict[str, QualifierValue] = {}
    for pair in raw_qualifiers.split("&"):
        split = split_once(pair, "=", LEFT)
        if split is None:
            continue
        key, raw_value = split
        key = key.lower()
        value = decode_component(raw_value)
        if not value:
            continue
        qualifiers[key] = value.split(",") if key == CHECKSUMS else value
    return qualifiers or None


def _decode_namespace(raw_namespace: str) -> Optional[str]:
    """Drops empty segments and decodes the rest. '.' and '..' are kept."""
    namespace = "/".join(decode_component(segment) for segment in raw_namespace.split("/") if segment)
    return namespace or None
