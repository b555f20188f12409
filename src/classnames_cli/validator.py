from __future__ import annotations
from typing import List

from .introspect import TypeIntrospector
from .signals import ContractViolation, ViolationKind

VERSION_FIELD = "serialVersionUID"
VERSION_TYPE = "long"


def check_version_field(
    name: str,
    provider: TypeIntrospector,
    field_name: str = VERSION_FIELD,
    required_type: str = VERSION_TYPE,
) -> List[ContractViolation]:
    """Check that ``name`` declares ``static final <required_type> <field_name>``.

    A missing field yields a single violation. Otherwise the type, static
    and final checks are independent and each may report.
    """
    info = provider.field_info(name, field_name)
    if info is None:
        return [
            ContractViolation(name, ViolationKind.MISSING_FIELD, f"No {field_name} field in class: {name}")
        ]
    out: List[ContractViolation] = []
    if info.declared_type != required_type:
        out.append(ContractViolation(
            name, ViolationKind.WRONG_FIELD_TYPE, f"{field_name} field is not {required_type} in class: {name}",
        ))
    if not info.is_static:
        out.append(ContractViolation(
            name, ViolationKind.NON_STATIC_FIELD, f"{field_name} field is not static in class: {name}",
        ))
    if not info.is_final:
        out.append(ContractViolation(
            name, ViolationKind.NON_FINAL_FIELD, f"{field_name} field is not final in class: {name}",
        ))
    return out
