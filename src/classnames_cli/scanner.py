from __future__ import annotations
import logging
from contextlib import closing
from typing import List, Optional, Set

from .config import Config
from .filters import FilterRules, classify
from .introspect import ClasspathIntrospector, TypeIntrospector
from .signals import ContractViolation, ScanResult, ScanState
from .validator import VERSION_FIELD, VERSION_TYPE, check_version_field
from .walker import exclude_spec, walk

FILE_NAME = "classnames.properties"

_LOG = logging.getLogger(__name__)


class GenerationError(Exception):
    """Raised at the end of a scan that found contract violations."""

    def __init__(self, violations: List[ContractViolation]):
        self.violations = list(violations)
        super().__init__(format_report(self.violations))


def format_report(violations: List[ContractViolation]) -> str:
    lines = [f"Failed to generate {FILE_NAME} due to errors:"]
    lines.extend(f"    {v.message}" for v in violations)
    return "\n".join(lines)


class ScanAggregator:
    """Owns one scan: walks the roots, filters, validates and collects.

    Single use. A second ``run()`` raises ``RuntimeError``; build a fresh
    aggregator to scan again.
    """

    def __init__(
        self,
        roots: List[str],
        cfg: Config,
        provider: Optional[TypeIntrospector] = None,
        verbose: bool = True,
    ):
        self.roots = list(roots)
        self.cfg = cfg
        self.rules = FilterRules.from_config(cfg)
        contract = cfg.data.get("contract") or {}
        self.field_name = contract.get("field", VERSION_FIELD)
        self.field_type = contract.get("type", VERSION_TYPE)
        self.provider = provider
        self.verbose = verbose
        self.state = ScanState.IDLE
        self.classes: Set[str] = set()
        self.violations: List[ContractViolation] = []

    def run(self) -> ScanResult:
        if self.state != ScanState.IDLE:
            raise RuntimeError(f"Scan already {self.state.value}; create a new aggregator")
        self.state = ScanState.SCANNING
        try:
            if self.provider is not None:
                self._scan_roots(self.provider)
            else:
                with ClasspathIntrospector(
                    self.roots, self.cfg.platform_hierarchy, self.cfg.exclude,
                ) as provider:
                    self._scan_roots(provider)
        except Exception:
            self.state = ScanState.FAILED
            raise
        if self.violations:
            self.state = ScanState.FAILED
            raise GenerationError(self.violations)
        self.state = ScanState.SUCCEEDED
        return self.result()

    def result(self) -> ScanResult:
        return ScanResult(classes=sorted(self.classes), violations=list(self.violations))

    def _scan_roots(self, provider: TypeIntrospector) -> None:
        spec = exclude_spec(self.cfg.exclude)
        for root in self.roots:
            if self.verbose:
                print(f"    Processing classpath entry: {root}")
            with closing(walk(root, spec)) as candidates:
                for cand in candidates:
                    self.process(cand.name, provider)

    def process(self, name: str, provider: TypeIntrospector) -> None:
        verdict = classify(name, self.rules, provider)
        if not verdict.manifest:
            if verdict.included:
                _LOG.debug("Skipped %s: not serializable or a future type", name)
            return
        if verdict.contract:
            self.violations.extend(
                check_version_field(name, provider, self.field_name, self.field_type)
            )
        self.classes.add(name)


def scan_classpath(
    roots: List[str],
    cfg: Config,
    provider: Optional[TypeIntrospector] = None,
    verbose: bool = True,
) -> ScanResult:
    if verbose:
        print(f"Generating {FILE_NAME}...")
    return ScanAggregator(roots, cfg, provider=provider, verbose=verbose).run()
