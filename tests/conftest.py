"""Shared pytest fixtures for cefact-codegen tests.

Provides:
- settings cache and environment isolation
- CSV table writers with synthetic unit rows
- an importer for generated packages
"""

from __future__ import annotations

import csv
import importlib
import os
import sys
import uuid
from collections.abc import Callable, Iterable
from pathlib import Path
from types import ModuleType

import pytest

# Ensure the package is importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from cefact_codegen.config import CodegenSettings, clear_settings_cache, get_settings  # noqa: E402
from cefact_codegen.logging import configure_logging  # noqa: E402
from tests._support import Row  # noqa: E402


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark tests without an explicit marker as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(scope="session", autouse=True)
def _quiet_logging():
    """Route generator logs to stderr as JSON, warnings only."""
    configure_logging(level="WARNING", json_format=True)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Each test starts with no cached settings and no CEFACT_CODEGEN_* env."""
    for key in list(os.environ):
        if key.startswith("CEFACT_CODEGEN_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def write_table(tmp_path) -> Callable[[Iterable[Row]], Path]:
    """Write rows to a header-less CSV table and return its path."""

    def _write(rows: Iterable[Row], name: str = "units.csv") -> Path:
        path = tmp_path / name
        with path.open("w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f)
            for row in rows:
                writer.writerow(row)
        return path

    return _write


@pytest.fixture
def make_settings(tmp_path) -> Callable[..., CodegenSettings]:
    """Settings writing a uniquely named package under tmp_path/out."""

    def _make(input_path: Path | None = None, **overrides) -> CodegenSettings:
        overrides.setdefault("package_name", f"units_{uuid.uuid4().hex[:10]}")
        overrides.setdefault("output_dir", tmp_path / "out")
        overrides.setdefault("echo_stdout", False)
        return get_settings(input_path=input_path, **overrides)

    return _make


@pytest.fixture
def import_generated(monkeypatch) -> Callable[[Path], ModuleType]:
    """Import a generated package from its directory; unload it afterwards."""
    imported: list[str] = []

    def _import(package_dir: Path) -> ModuleType:
        monkeypatch.syspath_prepend(str(package_dir.parent))
        importlib.invalidate_caches()
        imported.append(package_dir.name)
        return importlib.import_module(package_dir.name)

    yield _import

    for name in imported:
        for module_name in [m for m in sys.modules if m == name or m.startswith(f"{name}.")]:
            del sys.modules[module_name]
