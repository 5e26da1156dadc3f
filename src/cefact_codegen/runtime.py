"""Runtime types imported by the generated unit modules.

Generated code declares ``EUInformation`` constants and hands its population
functions to a :class:`UnitRegistry`; this module is the only dependency a
generated package has.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Mapping, MutableMapping
from dataclasses import dataclass
from types import MappingProxyType

Populator = Callable[[MutableMapping[int, "EUInformation"]], None]


@dataclass(frozen=True)
class LocalizedText:
    """Text with its locale."""

    locale: str
    text: str

    @classmethod
    def english(cls, text: str) -> LocalizedText:
        return cls(locale="en", text=text)


@dataclass(frozen=True)
class EUInformation:
    """Engineering-unit descriptor."""

    namespace_uri: str
    unit_id: int
    display_name: LocalizedText
    description: LocalizedText


class UnitRegistry:
    """Mapping of unit id to descriptor, built once on first read.

    Populators run in the order given, each inserting into one shared dict,
    so a later populator overwrites an earlier one on a shared unit id. The
    finished dict is published as a read-only mapping; reads after that take
    no lock.

    Example:
        >>> registry = UnitRegistry([populate_2, populate_1, populate_0])
        >>> registry.get(5067858)
        EUInformation(namespace_uri=..., unit_id=5067858, ...)
    """

    def __init__(self, populators: Iterable[Populator] = ()):
        self._populators: tuple[Populator, ...] = tuple(populators)
        self._lock = threading.Lock()
        self._by_unit_id: Mapping[int, EUInformation] | None = None

    def set_populators(self, populators: Iterable[Populator]) -> None:
        """Install the population functions; only allowed before the first read."""
        with self._lock:
            if self._by_unit_id is not None:
                raise RuntimeError("UnitRegistry is already populated")
            self._populators = tuple(populators)

    @property
    def populated(self) -> bool:
        return self._by_unit_id is not None

    def mapping(self) -> Mapping[int, EUInformation]:
        """The fully populated, read-only mapping."""
        by_unit_id = self._by_unit_id
        if by_unit_id is None:
            with self._lock:
                if self._by_unit_id is None:
                    staging: dict[int, EUInformation] = {}
                    for populate in self._populators:
                        populate(staging)
                    self._by_unit_id = MappingProxyType(staging)
                by_unit_id = self._by_unit_id
        return by_unit_id

    def get(self, unit_id: int) -> EUInformation | None:
        return self.mapping().get(unit_id)

    def values(self) -> tuple[EUInformation, ...]:
        return tuple(self.mapping().values())

    def __len__(self) -> int:
        return len(self.mapping())

    def __contains__(self, unit_id: object) -> bool:
        return unit_id in self.mapping()
