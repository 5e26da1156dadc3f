"""Data models for the unit-constant generator.

Frozen dataclasses describing the input records, the partitions they are
split into, and the abstract container descriptions handed to the
renderer. Nothing here knows about templates or the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class ContainerKind(Enum):
    """Role of a generated container in the chain."""

    BASE = "base"
    PARTITION = "partition"
    FACADE = "facade"


@dataclass(frozen=True)
class UnitRecord:
    """One row of the unit table.

    ``display_name`` and ``description`` hold the raw text as parsed,
    enclosing quotes included; the emitter cleans them.
    """

    symbolic_code: str
    unit_id: int
    display_name: str
    description: str
    row_number: int = 0


@dataclass(frozen=True)
class Partition:
    """A contiguous, order-preserving slice of records."""

    index: int
    records: tuple[UnitRecord, ...]

    def __len__(self) -> int:
        return len(self.records)


@dataclass(frozen=True)
class ConstantSpec:
    """One ``EUInformation`` constant declared in a container."""

    field_name: str
    unit_id: int
    display_name: str
    description: str


@dataclass(frozen=True)
class Registration:
    """One ``registry[unit_id] = value`` statement.

    ``value`` is the class constant ``field_name`` when the record kept its
    constant, or an inline descriptor built from ``inline`` when the
    constant was taken over by a later record with the same name.
    """

    unit_id: int
    field_name: str | None = None
    inline: ConstantSpec | None = None


@dataclass(frozen=True)
class ContainerSpec:
    """Abstract description of one generated module.

    Attributes:
        kind: Base, partition or facade
        class_name: Generated class name (``CefactEngineeringUnits3``)
        module_name: Generated module name (``cefact_engineering_units_3``)
        superclass: Class the container inherits, None for the base
        superclass_module: Module defining ``superclass``
        index: Partition index, None for base and facade
        constants: Constant declarations in record order
        registrations: Registry insertions, one per distinct unit id
    """

    kind: ContainerKind
    class_name: str
    module_name: str
    superclass: str | None = None
    superclass_module: str | None = None
    index: int | None = None
    constants: tuple[ConstantSpec, ...] = ()
    registrations: tuple[Registration, ...] = ()

    @property
    def file_name(self) -> str:
        return f"{self.module_name}.py"


@dataclass(frozen=True)
class GeneratedModule:
    """Rendered source for one container, ready to be written."""

    spec: ContainerSpec | None
    file_name: str
    source: str


@dataclass
class GenerationResult:
    """Outcome of one generator run."""

    package_dir: Path
    modules: list[GeneratedModule] = field(default_factory=list)
    written: dict[str, Path] = field(default_factory=dict)
    record_count: int = 0
    partition_count: int = 0
    distinct_unit_ids: int = 0
