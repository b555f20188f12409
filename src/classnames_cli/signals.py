from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List


class ViolationKind(str, Enum):
    MISSING_FIELD = "missing_field"
    WRONG_FIELD_TYPE = "wrong_field_type"
    NON_STATIC_FIELD = "non_static_field"
    NON_FINAL_FIELD = "non_final_field"


class ScanState(str, Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class ContractViolation:
    subject: str  # fully-qualified type name
    kind: ViolationKind
    message: str


@dataclass
class ScanResult:
    classes: List[str] = field(default_factory=list)  # sorted, unique
    violations: List[ContractViolation] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations
