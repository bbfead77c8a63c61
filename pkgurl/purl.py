"""PURL model and helpers."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator, model_validator

from .codec import has_percent_escape
from .errors import InvalidPackageURL, MissingComponentError
from .rules import DEFAULT_TYPE_RULES
from .strings import segment_present, segments

if TYPE_CHECKING:
    from .rules import TypeRuleRegistry

SCHEME = "pkg"

TYPE_PATTERN = re.compile(r"[a-z][a-z0-9.+-]*")
QUALIFIER_KEY_PATTERN = re.compile(r"[a-z0-9][a-z0-9._-]*")
CHECKSUMS = "checksums"

QualifierValue = Union[str, List[str]]


class PackageURL(BaseModel):
    """Represents a Package URL (purl).

    A purl is a URI that represents a software package in a mostly
    unambiguous way.
    See: https://github.com/package-url/purl-spec

    Instances are immutable. Constructing one only checks that `type` and
    `name` are given and lowercases `type`; call `validated()` to run the
    structural and type-specific checks.

    Attributes:
        type: The package "type" or package management system.
        namespace: Some name prefix such as a Maven groupid, a Docker image owner, etc.
        name: The name of the package.
        version: The version of the package.
        qualifiers: Extra qualifying data for a package such as an OS, architecture, etc.
            Stored as a read-only mapping; the `checksums` qualifier holds a
            tuple of strings.
        subpath: Extra subpath within a package, relative to the package root.
    """

    model_config = ConfigDict(frozen=True)

    __match_args__ = (
        "type", "namespace", "name", "version", "qualifiers", "subpath",
    )

    type: str
    namespace: Optional[str] = None
    name: str
    version: Optional[str] = None
    qualifiers: Optional[Dict[str, QualifierValue]] = None
    subpath: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def require_type_and_name(cls, data: Any) -> Any:
        """Raises MissingComponentError when `type` or `name` is missing or empty."""
        if isinstance(data, dict):
            for component in ("type", "name"):
                if not data.get(component):
                    raise MissingComponentError(f"{component} is required")
        return data

    @field_validator("type")
    @classmethod
    def lowercase_type(cls, value: str) -> str:
        return value.lower()

    @field_validator("qualifiers")
    @classmethod
    def freeze_qualifiers(cls, value: Optional[Dict[str, QualifierValue]]) -> Optional[Mapping[str, Any]]:
        """Stores qualifiers as a read-only mapping with tuple values for lists."""
        if value is None:
            return None
        return MappingProxyType({
            key: tuple(item) if isinstance(item, list) else item for key, item in value.items()
        })

    @field_serializer("qualifiers")
    def serialize_qualifiers(self, value: Optional[Mapping[str, Any]]) -> Optional[Dict[str, QualifierValue]]:
        return _thaw_qualifiers(value)

    @property
    def scheme(self) -> str:
        """The URL scheme, always 'pkg'."""
        return SCHEME

    @classmethod
    def parse(cls, string: str) -> PackageURL:
        """Decodes and validates a package URL string.

        Raises:
            InvalidPackageURL: If the string is not a valid package URL.
        """
        from .decoder import decode
        return decode(string)

    def check_components(self) -> PackageURL:
        """Runs the type-agnostic structural checks.

        Returns:
            This instance, unchanged.

        Raises:
            InvalidPackageURL: Naming the first check that failed.
        """
        if not TYPE_PATTERN.fullmatch(self.type):
            raise InvalidPackageURL(
                f"type '{self.type}' must start with a letter and contain only "
                "letters, digits, '.', '+' and '-'"
            )

        if self.namespace is not None and not all(segments(self.namespace)):
            raise InvalidPackageURL(f"namespace '{self.namespace}' contains an empty segment")

        if has_percent_escape(self.name):
            raise InvalidPackageURL(f"name '{self.name}' must not contain percent-encoded characters")

        if self.version is not None and has_percent_escape(self.version):
            raise InvalidPackageURL(f"version '{self.version}' must not contain percent-encoded characters")

        for key, value in (self.qualifiers or {}).items():
            # The key pattern excludes '%' and whitespace.
            if not QUALIFIER_KEY_PATTERN.fullmatch(key):
                raise InvalidPackageURL(f"qualifier key '{key}' is invalid")
            if isinstance(value, tuple) and key != CHECKSUMS:
                raise InvalidPackageURL(f"qualifier '{key}' must be a string")

        if self.subpath is not None and not all(segment_present(s) for s in segments(self.subpath)):
            raise InvalidPackageURL(f"subpath '{self.subpath}' contains an empty, '.' or '..' segment")

        return self

    def validated(self, registry: Optional[TypeRuleRegistry] = None) -> PackageURL:
        """Checks the components, then applies the rule for this type.

        Args:
            registry: The type rules to use. Defaults to `DEFAULT_TYPE_RULES`.

        Returns:
            The normalized package URL, which may be a new instance.

        Raises:
            InvalidPackageURL: If a structural or type-specific check fails.
        """
        registry = registry if registry is not None else DEFAULT_TYPE_RULES
        return registry.apply(self.check_components())

    def to_string(self) -> str:
        """Encodes the PackageURL into its canonical string form."""
        from .encoder import encode
        return encode(self)

    def to_dict(self) -> Dict[str, Any]:
        """Returns the scheme and the six components as a plain dict."""
        return {
            "scheme": self.scheme,
            "type": self.type,
            "namespace": self.namespace,
            "name": self.name,
            "version": self.version,
            "qualifiers": _thaw_qualifiers(self.qualifiers),
            "subpath": self.subpath,
        }

    def to_tuple(self) -> Tuple[Any, ...]:
        """Returns (scheme, type, namespace, name, version, qualifiers, subpath)."""
        return tuple(self.to_dict().values())

    def __str__(self) -> str:
        return self.to_string()

    def __hash__(self) -> int:
        qualifiers = frozenset(self.qualifiers.items()) if self.qualifiers is not None else None
        return hash((self.type, self.namespace, self.name, self.version, qualifiers, self.subpath))


def _thaw_qualifiers(qualifiers: Optional[Mapping[str, Any]]) -> Optional[Dict[str, QualifierValue]]:
    """Returns a fresh, mutable copy of stored qualifiers."""
    if qualifiers is None:
        return None
    return {key: list(value) if isinstance(value, tuple) else value for key, value in qualifiers.items()}
