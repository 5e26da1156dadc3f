"""Build container descriptions from partitions.

Each partition becomes one :class:`ContainerSpec` holding one constant per
record and the registry insertions for those constants. The base and facade
descriptions are built here too; :mod:`cefact_codegen.linker` later decides
which class each container inherits.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from .config import DuplicateCodePolicy
from .errors import DuplicateSymbolError
from .logging import get_logger
from .model import (
    ConstantSpec,
    ContainerKind,
    ContainerSpec,
    Partition,
    Registration,
    UnitRecord,
)

logger = get_logger(__name__)

FIELD_PREFIX = "CODE_"

_INVALID_IDENTIFIER_CHARS = re.compile(r"[^0-9A-Za-z_]")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


def snake_case(class_name: str) -> str:
    """``CefactEngineeringUnits`` -> ``cefact_engineering_units``."""
    return _CAMEL_BOUNDARY.sub("_", class_name).lower()


def partition_class_name(base_name: str, index: int) -> str:
    return f"{base_name}{index}"


def partition_module_name(base_name: str, index: int) -> str:
    return f"{snake_case(base_name)}_{index}"


def base_class_name(base_name: str) -> str:
    return f"{base_name}Base"


def base_module_name(base_name: str) -> str:
    return f"{snake_case(base_name)}_base"


def facade_module_name(base_name: str) -> str:
    return snake_case(base_name)


def field_name_for(symbolic_code: str) -> str:
    """Constant name for a symbolic code: prefixed, trimmed, identifier-safe."""
    return _INVALID_IDENTIFIER_CHARS.sub("_", f"{FIELD_PREFIX}{symbolic_code.strip()}")


def clean_text(value: str) -> str:
    """Strip one enclosing pair of double quotes, then surrounding whitespace."""
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return value.strip()


# ---------------------------------------------------------------------------
# Containers
# ---------------------------------------------------------------------------


def emit_partition(
    partition: Partition,
    base_name: str,
    *,
    duplicate_codes: DuplicateCodePolicy = DuplicateCodePolicy.ERROR,
    seen_fields: dict[str, UnitRecord] | None = None,
) -> ContainerSpec:
    """Build the container description for one partition.

    Registrations follow record order and hold one entry per unit id; when
    a unit id repeats inside the partition the last record wins while the
    statement keeps the position of the first occurrence.

    Args:
        partition: Records to emit
        base_name: Prefix of every generated class name
        duplicate_codes: Policy for records that map to the same constant
        seen_fields: Constant names claimed by earlier partitions; updated
            in place so collisions across partitions are detected

    Raises:
        DuplicateSymbolError: Two records map to the same constant name and
            the policy is ``error``.
    """
    if seen_fields is None:
        seen_fields = {}

    kept = _resolve_duplicate_fields(partition, duplicate_codes, seen_fields)

    constants: list[ConstantSpec] = []
    by_unit_id: dict[int, Registration] = {}

    for position, record in enumerate(partition.records):
        constant = ConstantSpec(
            field_name=field_name_for(record.symbolic_code),
            unit_id=record.unit_id,
            display_name=clean_text(record.display_name),
            description=clean_text(record.description),
        )
        if position in kept:
            constants.append(constant)
            registration = Registration(unit_id=record.unit_id, field_name=constant.field_name)
        else:
            registration = Registration(unit_id=record.unit_id, inline=constant)

        if record.unit_id in by_unit_id:
            logger.debug(
                "duplicate_unit_id",
                unit_id=record.unit_id,
                partition=partition.index,
                row=record.row_number,
            )
        by_unit_id[record.unit_id] = registration

    spec = ContainerSpec(
        kind=ContainerKind.PARTITION,
        class_name=partition_class_name(base_name, partition.index),
        module_name=partition_module_name(base_name, partition.index),
        index=partition.index,
        constants=tuple(constants),
        registrations=tuple(by_unit_id.values()),
    )
    logger.debug(
        "container_emitted",
        container=spec.class_name,
        constants=len(spec.constants),
        registrations=len(spec.registrations),
    )
    return spec


def emit_partitions(
    partitions: Iterable[Partition],
    base_name: str,
    *,
    duplicate_codes: DuplicateCodePolicy = DuplicateCodePolicy.ERROR,
) -> list[ContainerSpec]:
    """Emit every partition, checking constant names across the whole input."""
    seen_fields: dict[str, UnitRecord] = {}
    return [
        emit_partition(
            partition,
            base_name,
            duplicate_codes=duplicate_codes,
            seen_fields=seen_fields,
        )
        for partition in partitions
    ]


def emit_base(base_name: str) -> ContainerSpec:
    """Description of the base container: namespace constant and registry."""
    return ContainerSpec(
        kind=ContainerKind.BASE,
        class_name=base_class_name(base_name),
        module_name=base_module_name(base_name),
    )


def emit_facade(base_name: str) -> ContainerSpec:
    """Description of the public facade; its superclass is set by the linker."""
    return ContainerSpec(
        kind=ContainerKind.FACADE,
        class_name=base_name,
        module_name=facade_module_name(base_name),
    )


def _resolve_duplicate_fields(
    partition: Partition,
    policy: DuplicateCodePolicy,
    seen_fields: dict[str, UnitRecord],
) -> set[int]:
    """Positions of the records that keep a class constant.

    Records left out still register their descriptor under their unit id.
    """
    if policy is DuplicateCodePolicy.ERROR:
        for record in partition.records:
            field_name = field_name_for(record.symbolic_code)
            previous = seen_fields.get(field_name)
            if previous is not None:
                raise DuplicateSymbolError(
                    f"Constant {field_name} is generated by rows "
                    f"{previous.row_number} and {record.row_number}",
                    field=field_name,
                    value=record.symbolic_code,
                ).with_context(
                    row_number=record.row_number,
                    partition_index=partition.index,
                    first_row=previous.row_number,
                )
            seen_fields[field_name] = record
        return set(range(len(partition.records)))

    # last_wins: inside one class only the last record for a name keeps the
    # constant; across partitions the lower-indexed class shadows through
    # inheritance.
    last_position = {
        field_name_for(record.symbolic_code): position
        for position, record in enumerate(partition.records)
    }
    for field_name, position in last_position.items():
        seen_fields[field_name] = partition.records[position]
    return set(last_position.values())
