"""Rendering of PackageURL records into canonical purl strings."""

from __future__ import annotations
from typing import TYPE_CHECKING, List, Mapping, Optional

from .codec import encode_component
from .purl import CHECKSUMS
from .strings import segment_present, segments, strip

if TYPE_CHECKING:
    from .purl import PackageURL, QualifierValue


def encode(purl: PackageURL) -> str:
    """Builds the canonical string form of a package URL.

    The result is only well defined for a package URL that passed
    `validated()`.

    Args:
        purl: The package URL to render.

    Returns:
        A string such as 'pkg:rpm/fedora/curl@7.50.3-1.fc25?arch=i386'.
    """
    result = f"{purl.scheme}:{purl.type}/"

    namespace = _encode_namespace(purl.namespace)
    if namespace:
        result += f"{namespace}/{encode_component(strip(purl.name, '/'))}"
    else:
        result += encode_component(purl.name)

    if purl.version:
        result += f"@{encode_component(purl.version)}"

    qualifiers = _encode_qualifiers(purl.qualifiers)
    if qualifiers:
        result += f"?{qualifiers}"

    subpath = _encode_subpath(purl.subpath)
    if subpath:
        result += f"#{subpath}"

    return result


def _encode_namespace(namespace: Optional[str]) -> str:
    if namespace is None:
        return ""
    return "/".join(encode_component(s) for s in segments(namespace) if s)


def _encode_qualifiers(qualifiers: Optional[Mapping[str, QualifierValue]]) -> str:
    """Renders non-empty qualifiers as sorted 'key=value' pairs joined by '&'."""
    if not qualifiers:
        return ""

    pairs: List[str] = []
    for key, value in qualifiers.items():
        if not value:
            continue
        if key == CHECKSUMS and isinstance(value, (list, tuple)):
            pairs.append(f"{key.lower()}={','.join(value)}")
        else:
            pairs.append(f"{key.lower()}={encode_component(value)}")
    return "&".join(sorted(pairs))


def _encode_subpath(subpath: Optional[str]) -> str:
    if subpath is None:
        return ""
    return "/".join(encode_component(s) for s in segments(subpath) if segment_present(s))
