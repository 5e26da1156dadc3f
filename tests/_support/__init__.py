"""
Test support utilities for cefact-codegen tests.

Helpers that are not fixtures but are shared by several test modules.
"""

from __future__ import annotations

from collections.abc import Sequence

Row = Sequence[str]


def synthetic_rows(count: int, *, start: int = 0, id_base: int = 100_000) -> list[Row]:
    """``count`` distinct rows: code ``U{n}``, id ``id_base + n``."""
    return [
        (f"U{n}", str(id_base + n), f"u{n}", f"unit number {n}")
        for n in range(start, start + count)
    ]
