"""Link partition containers into a single inheritance chain.

The chain ``Container0 -> Container1 -> ... -> ContainerMax -> Base`` gives
the facade every constant as a class attribute. Registry population does not
depend on it: :func:`population_order` states explicitly which partition
registers last and therefore wins a shared unit id.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from .config import Precedence
from .model import ContainerKind, ContainerSpec


@dataclass(frozen=True)
class LinkedChain:
    """Containers with their superclasses resolved.

    Attributes:
        base: Base container (namespace constant and registry)
        partitions: Partition containers in index order
        facade: Public facade, inheriting the lowest-indexed partition
        population_order: Partition indices in the order their population
            functions run; the last one wins any conflict
    """

    base: ContainerSpec
    partitions: tuple[ContainerSpec, ...]
    facade: ContainerSpec
    population_order: tuple[int, ...]

    @property
    def containers(self) -> tuple[ContainerSpec, ...]:
        """Every container, base first and facade last."""
        return (self.base, *self.partitions, self.facade)


def link_chain(
    base: ContainerSpec,
    partitions: list[ContainerSpec],
    facade: ContainerSpec,
    *,
    precedence: Precedence = Precedence.LOWEST_INDEX,
) -> LinkedChain:
    """Assign each container its single superclass.

    Partition ``i`` inherits partition ``i + 1``; the highest-indexed
    partition inherits the base. The facade inherits partition 0, or the
    base directly when there are no partitions.
    """
    ordered = sorted(partitions, key=lambda spec: spec.index)
    if any(spec.kind is not ContainerKind.PARTITION for spec in ordered):
        raise ValueError("link_chain expects partition containers only")

    linked: list[ContainerSpec] = []
    for position, spec in enumerate(ordered):
        parent = ordered[position + 1] if position + 1 < len(ordered) else base
        linked.append(
            replace(spec, superclass=parent.class_name, superclass_module=parent.module_name)
        )

    top = linked[0] if linked else base
    linked_facade = replace(
        facade, superclass=top.class_name, superclass_module=top.module_name
    )

    return LinkedChain(
        base=base,
        partitions=tuple(linked),
        facade=linked_facade,
        population_order=population_order(
            [spec.index for spec in linked], precedence
        ),
    )


def population_order(indices: list[int], precedence: Precedence) -> tuple[int, ...]:
    """Order in which partitions insert into the registry.

    With ``lowest_index`` precedence the highest index populates first and
    index 0 last, matching the order in which a superclass chain rooted at
    partition 0 would initialize.
    """
    if precedence is Precedence.LOWEST_INDEX:
        return tuple(sorted(indices, reverse=True))
    return tuple(sorted(indices))
