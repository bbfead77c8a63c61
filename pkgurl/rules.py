"""Type-specific normalization and validation rules.

Each package type maps to a rule object in a `TypeRuleRegistry`. A rule takes
a `PackageURL` and returns it unchanged, returns a normalized copy, or raises
`InvalidPackageURL`. Rules are small composable strategies rather than
per-type subclasses, so the table below reads as data:

    DEFAULT_TYPE_RULES.get("pypi")
    # CompositeRule(LowercaseRule('name'), ReplaceRule('name', '_', '-'))
"""

from __future__ import annotations
import logging
import re
from typing import TYPE_CHECKING, Dict, Iterable, Iterator, Optional

from .errors import InvalidPackageURL

if TYPE_CHECKING:
    from .purl import PackageURL

logger = logging.getLogger(__name__)


class TypeRule:
    """Base rule. Returns the package URL unchanged."""

    def apply(self, purl: PackageURL) -> PackageURL:
        return purl

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class NoopRule(TypeRule):
    pass


class LowercaseRule(TypeRule):
    """Lowercases the given components (namespace and/or name) when set."""

    def __init__(self, *fields: str):
        self.fields = fields

    def apply(self, purl: PackageURL) -> PackageURL:
        update = {}
        for field in self.fields:
            value = getattr(purl, field)
            if value is not None and value != value.lower():
                update[field] = value.lower()
        if not update:
            return purl
        logger.debug(f"[{purl.type}] Lowercasing {', '.join(update)}")
        return purl.model_copy(update=update)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({', '.join(repr(f) for f in self.fields)})"


class ReplaceRule(TypeRule):
    """Replaces every `old` with `new` in a component."""

    def __init__(self, field: str, old: str, new: str):
        self.field = field
        self.old = old
        self.new = new

    def apply(self, purl: PackageURL) -> PackageURL:
        value = getattr(purl, self.field)
        if value is None or self.old not in value:
            return purl
        logger.debug(f"[{purl.type}] Replacing '{self.old}' with '{self.new}' in {self.field}")
        return purl.model_copy(update={self.field: value.replace(self.old, self.new)})

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.field!r}, {self.old!r}, {self.new!r})"


class RequireRule(TypeRule):
    """Rejects package URLs where the component is missing or empty."""

    def __init__(self, field: str):
        self.field = field

    def apply(self, purl: PackageURL) -> PackageURL:
        if not getattr(purl, self.field):
            raise InvalidPackageURL(f"{self.field} is required")
        return purl

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.field!r})"


class ForbidRule(TypeRule):
    """Rejects package URLs where the component is present."""

    def __init__(self, field: str):
        self.field = field

    def apply(self, purl: PackageURL) -> PackageURL:
        if getattr(purl, self.field):
            raise InvalidPackageURL(f"{self.field} is not allowed")
        return purl

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.field!r})"


class NamePatternRule(TypeRule):
    """Checks the name against a regular expression.

    With `reject=False` the name must fully match `pattern`; with
    `reject=True` the name is rejected if `pattern` is found anywhere in it.
    """

    def __init__(self, pattern: str, message: str, reject: bool = False):
        self.pattern = re.compile(pattern)
        self.message = message
        self.reject = reject

    def apply(self, purl: PackageURL) -> PackageURL:
        if self.reject:
            failed = self.pattern.search(purl.name) is not None
        else:
            failed = self.pattern.fullmatch(purl.name) is None
        if failed:
            raise InvalidPackageURL(f"name '{purl.name}' {self.message}")
        return purl

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.pattern.pattern!r}, reject={self.reject})"


class QualifierPairRule(TypeRule):
    """Requires a component and a qualifier to be both present or both absent."""

    def __init__(self, field: str, qualifier: str):
        self.field = field
        self.qualifier = qualifier

    def apply(self, purl: PackageURL) -> PackageURL:
        has_field = bool(getattr(purl, self.field))
        has_qualifier = bool((purl.qualifiers or {}).get(self.qualifier))
        if has_field and not has_qualifier:
            raise InvalidPackageURL(f"qualifier '{self.qualifier}' is required when {self.field} is present")
        if has_qualifier and not has_field:
            raise InvalidPackageURL(f"{self.field} is required when qualifier '{self.qualifier}' is present")
        return purl

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.field!r}, {self.qualifier!r})"


class MaxSegmentsRule(TypeRule):
    """Rejects a '/'-separated component with more than `limit` segments."""

    def __init__(self, field: str, limit: int):
        self.field = field
        self.limit = limit

    def apply(self, purl: PackageURL) -> PackageURL:
        value = getattr(purl, self.field)
        if value and len(value.split("/")) > self.limit:
            raise InvalidPackageURL(f"{self.field} must have at most {self.limit} segments")
        return purl

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.field!r}, {self.limit})"


class CompositeRule(TypeRule):
    """Applies rules in order, feeding each the result of the previous one."""

    def __init__(self, *rules: TypeRule):
        self.rules = rules

    def apply(self, purl: PackageURL) -> PackageURL:
        for rule in self.rules:
            purl = rule.apply(purl)
        return purl

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({', '.join(repr(r) for r in self.rules)})"


class TypeRuleRegistry:
    """Maps lowercase package types to their rules.

    Types without a registered rule pass through unchanged. Register rules
    while building a registry; the registry is only read once in use.
    """

    def __init__(self, rules: Optional[Dict[str, TypeRule]] = None):
        self._rules: Dict[str, TypeRule] = {}
        for type_, rule in (rules or {}).items():
            self.register(type_, rule)

    def register(self, type_: str, rule: TypeRule) -> None:
        self._rules[type_.lower()] = rule

    def get(self, type_: str) -> Optional[TypeRule]:
        return self._rules.get(type_.lower())

    def apply(self, purl: PackageURL) -> PackageURL:
        """Applies the rule registered for `purl.type`, if any.

        Raises:
            InvalidPackageURL: If the rule rejects the package URL.
        """
        rule = self.get(purl.type)
        if rule is None:
            return purl
        try:
            return rule.apply(purl)
        except InvalidPackageURL as e:
            logger.debug(f"[{purl.type}] Rejected by {rule!r}: {e.reason}")
            raise

    def types(self) -> Iterable[str]:
        return sorted(self._rules)

    def __contains__(self, type_: object) -> bool:
        return isinstance(type_, str) and type_.lower() in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(self.types())

    def __len__(self) -> int:
        return len(self._rules)


_LOWERCASE_NAMESPACE_AND_NAME = LowercaseRule("namespace", "name")

DEFAULT_TYPE_RULES = TypeRuleRegistry({
    "alpm": _LOWERCASE_NAMESPACE_AND_NAME,
    "bitbucket": _LOWERCASE_NAMESPACE_AND_NAME,
    "deb": _LOWERCASE_NAMESPACE_AND_NAME,
    "github": _LOWERCASE_NAMESPACE_AND_NAME,
    "golang": _LOWERCASE_NAMESPACE_AND_NAME,
    "hex": _LOWERCASE_NAMESPACE_AND_NAME,
    "rpm": LowercaseRule("namespace"),
    "npm": LowercaseRule("name"),
    "pypi": CompositeRule(LowercaseRule("name"), ReplaceRule("name", "_", "-")),
    "oci": CompositeRule(ForbidRule("namespace"), LowercaseRule("name")),
    "nuget": ForbidRule("namespace"),
    "cocoapods": NamePatternRule(
        r"\s|\+|^\.",
        "must not contain whitespace or '+', or start with '.'",
        reject=True,
    ),
    "conan": QualifierPairRule("namespace", "channel"),
    "cran": RequireRule("version"),
    "hackage": NamePatternRule(
        r"[A-Za-z0-9]+(?:-[A-Za-z0-9]+)*",
        "must be alphanumeric words separated by single hyphens",
    ),
    "pub": CompositeRule(
        LowercaseRule("name"),
        NamePatternRule(r"[a-z0-9_]+", "must contain only [a-z0-9_]"),
    ),
    "swid": MaxSegmentsRule("namespace", 2),
    "swift": CompositeRule(RequireRule("namespace"), RequireRule("version")),
    "cargo": NoopRule(),
    "composer": NoopRule(),
    "conda": NoopRule(),
    "docker": NoopRule(),
    "gem": NoopRule(),
    "generic": NoopRule(),
    "maven": NoopRule(),
})
