"""Tests for type-specific rules."""
import logging

import pytest

from pkgurl import DEFAULT_TYPE_RULES, InvalidPackageURL, PackageURL, TypeRuleRegistry, decode
from pkgurl.rules import (
    CompositeRule,
    ForbidRule,
    LowercaseRule,
    MaxSegmentsRule,
    NamePatternRule,
    NoopRule,
    QualifierPairRule,
    ReplaceRule,
    RequireRule,
)


def purl(**components) -> PackageURL:
    components.setdefault("name", "name")
    return PackageURL(**components)


@pytest.mark.parametrize("type_", ["alpm", "bitbucket", "deb", "github", "golang", "hex"])
def test_lowercase_namespace_and_name(type_: str) -> None:
    """Test that these types lowercase namespace and name."""
    result = DEFAULT_TYPE_RULES.apply(purl(type=type_, namespace="Some/Owner", name="Repo"))
    assert (result.namespace, result.name) == ("some/owner", "repo")


def test_rpm_lowercases_namespace_only() -> None:
    """Test that rpm lowercases only the namespace."""
    result = DEFAULT_TYPE_RULES.apply(purl(type="rpm", namespace="Fedora", name="Curl"))
    assert (result.namespace, result.name) == ("fedora", "Curl")


def test_npm_lowercases_name_only() -> None:
    """Test that npm lowercases only the name."""
    result = DEFAULT_TYPE_RULES.apply(purl(type="npm", namespace="@Angular", name="Core"))
    assert (result.namespace, result.name) == ("@Angular", "core")


def test_pypi_normalizes_name() -> None:
    """Test that pypi lowercases the name and replaces '_' with '-'."""
    assert DEFAULT_TYPE_RULES.apply(purl(type="pypi", name="Typing_Extensions")).name == "typing-extensions"


def test_oci() -> None:
    """Test that oci lowercases the name and rejects a namespace."""
    assert DEFAULT_TYPE_RULES.apply(purl(type="oci", name="Debian")).name == "debian"
    with pytest.raises(InvalidPackageURL, match="namespace is not allowed"):
        DEFAULT_TYPE_RULES.apply(purl(type="oci", namespace="library", name="debian"))


def test_nuget_rejects_namespace() -> None:
    """Test that nuget keeps name case and rejects a namespace."""
    assert DEFAULT_TYPE_RULES.apply(purl(type="nuget", name="Newtonsoft.Json")).name == "Newtonsoft.Json"
    with pytest.raises(InvalidPackageURL, match="namespace is not allowed"):
        DEFAULT_TYPE_RULES.apply(purl(type="nuget", namespace="ns", name="Newtonsoft.Json"))


@pytest.mark.parametrize("name", ["Alamofire foo", "Alamo+fire", ".Alamofire", "Alamo\tfire"])
def test_cocoapods_rejects_names(name: str) -> None:
    """Test that cocoapods rejects whitespace, '+' and a leading '.'."""
    with pytest.raises(InvalidPackageURL, match="name"):
        DEFAULT_TYPE_RULES.apply(purl(type="cocoapods", name=name))


def test_cocoapods_accepts_names() -> None:
    """Test that a regular cocoapods name passes."""
    assert DEFAULT_TYPE_RULES.apply(purl(type="cocoapods", name="GoogleUtilities.Env")).name == "GoogleUtilities.Env"


def test_conan_namespace_and_channel_go_together() -> None:
    """Test that conan needs namespace and channel together or not at all."""
    DEFAULT_TYPE_RULES.apply(purl(type="conan", name="openssl"))
    DEFAULT_TYPE_RULES.apply(
        purl(type="conan", namespace="bincrafters", name="openssl", qualifiers={"channel": "stable"})
    )
    with pytest.raises(InvalidPackageURL, match="channel"):
        DEFAULT_TYPE_RULES.apply(purl(type="conan", namespace="bincrafters", name="openssl"))
    with pytest.raises(InvalidPackageURL, match="namespace is required"):
        DEFAULT_TYPE_RULES.apply(purl(type="conan", name="openssl", qualifiers={"channel": "stable"}))


def test_cran_requires_version() -> None:
    """Test that cran requires a version."""
    DEFAULT_TYPE_RULES.apply(purl(type="cran", name="A3", version="1.0.0"))
    with pytest.raises(InvalidPackageURL, match="version is required"):
        DEFAULT_TYPE_RULES.apply(purl(type="cran", name="A3"))


@pytest.mark.parametrize("name, valid", [
    ("AC-HalfInteger", True),
    ("a1", True),
    ("bad_name", False),
    ("-leading", False),
    ("double--hyphen", False),
])
def test_hackage_names(name: str, valid: bool) -> None:
    """Test that hackage names are words joined by single hyphens."""
    if valid:
        DEFAULT_TYPE_RULES.apply(purl(type="hackage", name=name))
    else:
        with pytest.raises(InvalidPackageURL, match="name"):
            DEFAULT_TYPE_RULES.apply(purl(type="hackage", name=name))


def test_pub() -> None:
    """Test that pub lowercases the name and limits it to [a-z0-9_]."""
    assert DEFAULT_TYPE_RULES.apply(purl(type="pub", name="Characters")).name == "characters"
    with pytest.raises(InvalidPackageURL, match=r"\[a-z0-9_\]"):
        DEFAULT_TYPE_RULES.apply(purl(type="pub", name="flutter-test"))


def test_swid_namespace_segments() -> None:
    """Test that swid allows at most two namespace segments."""
    DEFAULT_TYPE_RULES.apply(purl(type="swid", namespace="Acme/Corp", name="Fabrikam"))
    with pytest.raises(InvalidPackageURL, match="at most 2 segments"):
        DEFAULT_TYPE_RULES.apply(purl(type="swid", namespace="a/b/c", name="Fabrikam"))


def test_swift_requires_namespace_and_version() -> None:
    """Test that swift requires namespace and version."""
    DEFAULT_TYPE_RULES.apply(purl(type="swift", namespace="github.com/Alamofire", name="Alamofire", version="5.4.3"))
    with pytest.raises(InvalidPackageURL, match="namespace is required"):
        DEFAULT_TYPE_RULES.apply(purl(type="swift", name="Alamofire", version="5.4.3"))
    with pytest.raises(InvalidPackageURL, match="version is required"):
        DEFAULT_TYPE_RULES.apply(purl(type="swift", namespace="github.com/Alamofire", name="Alamofire"))


@pytest.mark.parametrize("type_", ["cargo", "composer", "conda", "docker", "gem", "generic", "maven"])
def test_noop_types(type_: str) -> None:
    """Test that no-op types return the record untouched."""
    original = purl(type=type_, namespace="Some.Group", name="Some_Name")
    assert DEFAULT_TYPE_RULES.apply(original) is original
    assert isinstance(DEFAULT_TYPE_RULES.get(type_), NoopRule)


def test_unknown_type_passes_through() -> None:
    """Test that types without a rule pass through."""
    original = purl(type="unknown", namespace="A", name="B")
    assert "unknown" not in DEFAULT_TYPE_RULES
    assert DEFAULT_TYPE_RULES.apply(original) is original


def test_unchanged_record_is_returned_as_is() -> None:
    """Test that a rule that changes nothing returns the same instance."""
    original = purl(type="github", namespace="package-url", name="purl-spec")
    assert DEFAULT_TYPE_RULES.apply(original) is original


def test_rules_return_new_records() -> None:
    """Test that normalizing leaves the original record untouched."""
    original = purl(type="npm", name="FooBar")
    normalized = DEFAULT_TYPE_RULES.apply(original)
    assert original.name == "FooBar"
    assert normalized.name == "foobar"


def test_default_registry_covers_known_types() -> None:
    """Test that the default registry lists every known type."""
    assert list(DEFAULT_TYPE_RULES) == sorted([
        "alpm", "bitbucket", "cargo", "cocoapods", "composer", "conan", "conda", "cran",
        "deb", "docker", "gem", "generic", "github", "golang", "hackage", "hex", "maven",
        "npm", "nuget", "oci", "pub", "pypi", "rpm", "swid", "swift",
    ])
    assert len(DEFAULT_TYPE_RULES) == 25


class TestRuleStrategies:
    """Rule strategies used on their own."""

    def test_composite_applies_in_order(self) -> None:
        """Test that composite rules run in order."""
        rule = CompositeRule(ReplaceRule("name", "_", "-"), LowercaseRule("name"))
        assert rule.apply(purl(type="x", name="A_B")).name == "a-b"

    def test_lowercase_skips_missing_components(self) -> None:
        """Test that lowercasing skips unset components."""
        original = purl(type="x", name="abc")
        assert LowercaseRule("namespace", "name").apply(original) is original

    def test_require_and_forbid(self) -> None:
        """Test that require and forbid rules name the component."""
        with pytest.raises(InvalidPackageURL, match="subpath is required"):
            RequireRule("subpath").apply(purl(type="x"))
        with pytest.raises(InvalidPackageURL, match="version is not allowed"):
            ForbidRule("version").apply(purl(type="x", version="1"))

    def test_name_pattern_match_and_reject(self) -> None:
        """Test both name pattern modes."""
        NamePatternRule(r"[a-z]+", "must be letters").apply(purl(type="x", name="abc"))
        with pytest.raises(InvalidPackageURL, match="name 'ab1' must be letters"):
            NamePatternRule(r"[a-z]+", "must be letters").apply(purl(type="x", name="ab1"))
        with pytest.raises(InvalidPackageURL, match="no digits"):
            NamePatternRule(r"\d", "no digits", reject=True).apply(purl(type="x", name="ab1"))

    def test_qualifier_pair_ignores_empty_qualifier(self) -> None:
        """Test that an empty qualifier value counts as absent."""
        rule = QualifierPairRule("namespace", "channel")
        rule.apply(purl(type="x", qualifiers={"channel": ""}))

    def test_max_segments(self) -> None:
        """Test that segment limits are enforced."""
        MaxSegmentsRule("namespace", 1).apply(purl(type="x", namespace="a"))
        with pytest.raises(InvalidPackageURL):
            MaxSegmentsRule("namespace", 1).apply(purl(type="x", namespace="a/b"))

    def test_repr(self) -> None:
        """Test that rules describe themselves."""
        assert repr(DEFAULT_TYPE_RULES.get("pypi")) == (
            "CompositeRule(LowercaseRule('name'), ReplaceRule('name', '_', '-'))"
        )


class TestCustomRegistry:
    """Registries other than the default one."""

    def test_register_and_decode(self) -> None:
        """Test that decode uses a custom registry."""
        registry = TypeRuleRegistry({"Acme": RequireRule("namespace")})
        assert "acme" in registry
        with pytest.raises(InvalidPackageURL, match="namespace is required"):
            decode("pkg:acme/widget", registry=registry)
        assert decode("pkg:acme/tools/widget", registry=registry).namespace == "tools"

    def test_empty_registry_skips_type_rules(self) -> None:
        """Test that an empty registry applies no type rules."""
        purl_ = decode("pkg:nuget/ns/Newtonsoft.Json", registry=TypeRuleRegistry())
        assert purl_.namespace == "ns"

    def test_validated_uses_given_registry(self) -> None:
        """Test that validated() uses the given registry."""
        registry = TypeRuleRegistry()
        registry.register("npm", ForbidRule("version"))
        with pytest.raises(InvalidPackageURL):
            purl(type="npm", version="1.0").validated(registry)

    def test_rejection_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a rejection writes a debug line."""
        with caplog.at_level(logging.DEBUG, logger="pkgurl"):
            with pytest.raises(InvalidPackageURL):
                DEFAULT_TYPE_RULES.apply(purl(type="cran", name="A3"))
        assert "[cran] Rejected by RequireRule('version')" in caplog.text

    def test_normalization_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that rules which change a record write a debug line."""
        with caplog.at_level(logging.DEBUG, logger="pkgurl"):
            DEFAULT_TYPE_RULES.apply(purl(type="npm", name="FooBar"))
            DEFAULT_TYPE_RULES.apply(purl(type="pypi", name="typing_extensions"))
        assert "[npm] Lowercasing name" in caplog.text
        assert "[pypi] Replacing '_' with '-' in name" in caplog.text
