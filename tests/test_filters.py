from __future__ import annotations

import pytest

from classnames_cli.classfile import TypeKind
from classnames_cli.config import Config
from classnames_cli.filters import FilterRules, classify, is_included
from fakes import FakeIntrospector, FakeType

SERIAL = "java.io.Serializable"
FUTURE = "org.acme.lang.AcmeFuture"
INTERNAL_FUTURE = "org.acme.internal.InternalFuture"

RULES = FilterRules(
    packages=("org.acme", "org.backport"),
    serializable=SERIAL,
    excluded=(FUTURE, INTERNAL_FUTURE, "org.acme.client.ClientFuture"),
)


def test_is_included_is_a_prefix_match() -> None:
    assert is_included("org.acme.Foo", RULES.packages)
    assert is_included("org.backport.Map", RULES.packages)
    # Plain string prefixes, as configured.
    assert is_included("org.acmewidgets.Foo", RULES.packages)
    assert not is_included("com.other.Foo", RULES.packages)


def test_excluded_namespace_is_never_introspected() -> None:
    provider = FakeIntrospector({})

    verdict = classify("com.other.Foo", RULES, provider)

    assert not verdict.included
    assert not verdict.manifest
    assert provider.queried == []


def test_concrete_serializable_class() -> None:
    provider = FakeIntrospector({"org.acme.Foo": FakeType(simple_name="Foo", capabilities=(SERIAL,))})

    verdict = classify("org.acme.Foo", RULES, provider)

    assert (verdict.included, verdict.manifest, verdict.contract) == (True, True, True)


def test_not_serializable() -> None:
    provider = FakeIntrospector({"org.acme.Plain": FakeType(simple_name="Plain")})

    verdict = classify("org.acme.Plain", RULES, provider)

    assert verdict.included
    assert not verdict.manifest
    assert not verdict.contract


@pytest.mark.parametrize("future", [FUTURE, INTERNAL_FUTURE, "org.acme.client.ClientFuture"])
def test_future_types_are_dropped(future: str) -> None:
    provider = FakeIntrospector(
        {"org.acme.Baz": FakeType(simple_name="Baz", capabilities=(SERIAL, future))}
    )

    verdict = classify("org.acme.Baz", RULES, provider)

    assert verdict.included
    assert not verdict.manifest
    assert not verdict.contract


@pytest.mark.parametrize(
    "fake",
    [
        FakeType(kind=TypeKind.INTERFACE, abstract=True, simple_name="Api", capabilities=(SERIAL,)),
        FakeType(abstract=True, simple_name="Base", capabilities=(SERIAL,)),
        FakeType(kind=TypeKind.ENUM, simple_name="Color", capabilities=(SERIAL,)),
        FakeType(simple_name="", capabilities=(SERIAL,)),
    ],
    ids=["interface", "abstract", "enum", "anonymous"],
)
def test_manifest_only_shapes(fake: FakeType) -> None:
    provider = FakeIntrospector({"org.acme.X": fake})

    verdict = classify("org.acme.X", RULES, provider)

    assert verdict.manifest
    assert not verdict.contract


def test_secondary_namespace_is_exempt_from_contract() -> None:
    provider = FakeIntrospector(
        {"org.backport.Map": FakeType(simple_name="Map", capabilities=(SERIAL,))}
    )

    verdict = classify("org.backport.Map", RULES, provider)

    assert verdict.manifest
    assert not verdict.contract


def test_rules_from_config() -> None:
    cfg = Config()
    cfg.data["packages"] = ["org.acme", "org.other"]
    cfg.data["capabilities"] = {"serializable": "org.acme.Wire", "excluded": ["org.acme.F"]}

    rules = FilterRules.from_config(cfg)

    assert rules.packages == ("org.acme", "org.other")
    assert rules.product_namespace == "org.acme"
    assert rules.serializable == "org.acme.Wire"
    assert rules.excluded == ("org.acme.F",)


def test_rules_from_default_config() -> None:
    rules = FilterRules.from_config(Config())

    assert rules.product_namespace == "org.apache.ignite"
    assert rules.serializable == SERIAL
    assert "org.apache.ignite.lang.IgniteFuture" in rules.excluded
    assert len(rules.excluded) == 3
