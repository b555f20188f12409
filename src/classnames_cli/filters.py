from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from .classfile import TypeKind
from .config import Config
from .introspect import TypeIntrospector

SERIALIZABLE = "java.io.Serializable"


@dataclass(frozen=True)
class FilterRules:
    packages: Tuple[str, ...]
    serializable: str = SERIALIZABLE
    excluded: Tuple[str, ...] = ()

    @property
    def product_namespace(self) -> Optional[str]:
        return self.packages[0] if self.packages else None

    @classmethod
    def from_config(cls, cfg: Config) -> "FilterRules":
        caps = cfg.data.get("capabilities") or {}
        return cls(
            packages=tuple(cfg.packages),
            serializable=caps.get("serializable", SERIALIZABLE),
            excluded=tuple(caps.get("excluded") or ()),
        )


@dataclass(frozen=True)
class Eligibility:
    included: bool = False
    manifest: bool = False
    contract: bool = False


def is_included(name: str, packages: Tuple[str, ...]) -> bool:
    return any(name.startswith(pkg) for pkg in packages)


def is_manifest_eligible(name: str, rules: FilterRules, provider: TypeIntrospector) -> bool:
    if not provider.implements(name, rules.serializable):
        return False
    return not any(provider.implements(name, cap) for cap in rules.excluded)


def is_contract_checkable(name: str, rules: FilterRules, provider: TypeIntrospector) -> bool:
    """Concrete, named, non-enum classes of the product namespace."""
    ns = rules.product_namespace
    if ns is None or not name.startswith(ns):
        return False
    if provider.kind_of(name) != TypeKind.CLASS:
        return False
    if provider.is_abstract(name):
        return False
    return bool(provider.simple_name(name))


def classify(name: str, rules: FilterRules, provider: TypeIntrospector) -> Eligibility:
    if not is_included(name, rules.packages):
        return Eligibility()
    if not is_manifest_eligible(name, rules, provider):
        return Eligibility(included=True)
    return Eligibility(
        included=True, manifest=True, contract=is_contract_checkable(name, rules, provider),
    )
