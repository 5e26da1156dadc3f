"""Split the ordered record sequence into fixed-size windows."""

from __future__ import annotations

from collections.abc import Iterable

from .config import DEFAULT_PARTITION_SIZE
from .errors import InvalidConfigError
from .model import Partition, UnitRecord


def partition_records(
    records: Iterable[UnitRecord],
    size: int = DEFAULT_PARTITION_SIZE,
) -> list[Partition]:
    """Split ``records`` into partitions of at most ``size`` records.

    Partition ``i`` holds records ``[i * size, min((i + 1) * size, total))``.
    The last partition may be short; an empty input yields no partitions.

    Raises:
        InvalidConfigError: ``size`` is smaller than 1.
    """
    if size < 1:
        raise InvalidConfigError("partition_size", size, "Partition size must be at least 1")

    ordered = tuple(records)
    return [
        Partition(index=index, records=ordered[start:start + size])
        for index, start in enumerate(range(0, len(ordered), size))
    ]
