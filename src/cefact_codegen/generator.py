"""Generate the engineering-unit constant library from the unit table.

The main orchestrator: loads the table, partitions it, emits and links one
container per partition, renders every module and writes the package.

Architecture::

    ┌──────────────┐
    │  Unit table  │  UNECE_to_OPCUA.csv
    └──────┬───────┘
           ▼
    ┌──────────────────────────────────────────────────────────────┐
    │                       UnitsGenerator                          │
    │  load() → partition() → emit() → link() → render() → write()  │
    └───┬──────────────┬───────────────────┬──────────────┬────────┘
        ▼              ▼                   ▼              ▼
     {base}_base   {base}_0 … {base}_N   {base}       __init__

Every module is rendered in memory first, then written into a staging
directory next to the package and swapped into place in one rename. A failure
anywhere leaves the previous package (or no package) untouched, and a rerun
with fewer partitions leaves no stale modules behind.
"""

from __future__ import annotations

import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import TextIO

from .config import CodegenSettings, get_settings
from .emitter import emit_base, emit_facade, emit_partitions
from .errors import OutputWriteError
from .linker import LinkedChain, link_chain
from .loader import BUNDLED_TABLE, load_records
from .logging import get_logger, log_context
from .model import GeneratedModule, GenerationResult, Partition, UnitRecord
from .partition import partition_records
from .render import SourceRenderer

logger = get_logger(__name__)


class UnitsGenerator:
    """Orchestrates one generation run.

    Examples:
        >>> gen = UnitsGenerator(get_settings(output_dir=Path("build")))
        >>> result = gen.generate()
        >>> result.partition_count
        2
    """

    def __init__(
        self,
        settings: CodegenSettings | None = None,
        *,
        stdout: TextIO | None = None,
    ):
        self.settings = settings or get_settings()
        self.stdout = stdout

        # Populated during generate()
        self.records: list[UnitRecord] = []
        self.partitions: list[Partition] = []
        self.chain: LinkedChain | None = None
        self.modules: list[GeneratedModule] = []

    @property
    def package_dir(self) -> Path:
        return Path(self.settings.output_dir) / self.settings.package_name

    @property
    def source_name(self) -> str:
        if self.settings.input_path is None:
            return BUNDLED_TABLE
        return Path(self.settings.input_path).name

    def generate(self) -> GenerationResult:
        """Run the full pipeline and write the generated package."""
        with log_context(package_name=self.settings.package_name):
            return self._generate()

    def _generate(self) -> GenerationResult:
        self.build()
        written = self.write()

        if self.settings.echo_stdout:
            self.echo()

        result = GenerationResult(
            package_dir=self.package_dir,
            modules=list(self.modules),
            written=written,
            record_count=len(self.records),
            partition_count=len(self.partitions),
            distinct_unit_ids=len({record.unit_id for record in self.records}),
        )
        logger.info(
            "generation_complete",
            package=str(self.package_dir),
            modules=len(written),
            records=result.record_count,
            partitions=result.partition_count,
            distinct_unit_ids=result.distinct_unit_ids,
        )
        return result

    def build(self) -> list[GeneratedModule]:
        """Load, partition, emit, link and render, without touching disk."""
        settings = self.settings

        self.records = load_records(settings.input_path)
        self.partitions = partition_records(self.records, settings.partition_size)
        logger.info(
            "partitions_built",
            partitions=len(self.partitions),
            partition_size=settings.partition_size,
        )

        containers = emit_partitions(
            self.partitions,
            settings.base_name,
            duplicate_codes=settings.duplicate_codes,
        )
        self.chain = link_chain(
            emit_base(settings.base_name),
            containers,
            emit_facade(settings.base_name),
            precedence=settings.precedence,
        )

        renderer = SourceRenderer(
            runtime_module=settings.runtime_module,
            namespace_uri=settings.namespace_uri,
            source_name=self.source_name,
        )
        self.modules = renderer.render_all(self.chain)
        return self.modules

    def write(self) -> dict[str, Path]:
        """Write the rendered modules and swap them in as the package directory.

        Modules go to a staging directory beside ``package_dir``; the finished
        directory replaces the previous package in one rename.

        Raises:
            OutputWriteError: The directory or a file cannot be written.
        """
        package_dir = self.package_dir
        parent = package_dir.parent
        try:
            parent.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=f".{package_dir.name}-", dir=parent))
        except OSError as e:
            raise OutputWriteError(
                f"Cannot create output directory {parent}: {e}",
                cause=e,
            ).with_context(output_path=str(parent)) from e

        try:
            for module in self.modules:
                target = package_dir / module.file_name
                try:
                    (staging / module.file_name).write_text(module.source, encoding="utf-8")
                except OSError as e:
                    raise OutputWriteError(
                        f"Cannot write {target}: {e}",
                        cause=e,
                    ).with_context(output_path=str(target)) from e
                logger.debug("module_written", path=str(target), size=len(module.source))

            # mkdtemp creates the directory as 0700
            staging.chmod(0o755)
            _replace_dir(staging, package_dir)
        except Exception:
            shutil.rmtree(staging, ignore_errors=True)
            raise

        return {module.file_name: package_dir / module.file_name for module in self.modules}

    def echo(self) -> None:
        """Echo every generated module to standard output."""
        out = self.stdout or sys.stdout
        for module in self.modules:
            out.write(f"# ---- {self.settings.package_name}/{module.file_name} ----\n")
            out.write(module.source)
        out.flush()


def generate_units(settings: CodegenSettings | None = None) -> GenerationResult:
    """Generate the unit library with ``settings`` (environment defaults if None)."""
    return UnitsGenerator(settings).generate()


def _replace_dir(staging: Path, target: Path) -> None:
    """Move ``staging`` to ``target``, restoring the old ``target`` on failure."""
    backup: Path | None = None
    try:
        if target.exists():
            backup = target.with_name(f".{target.name}-previous-{os.getpid()}")
            shutil.rmtree(backup, ignore_errors=True)
            os.replace(target, backup)
        os.replace(staging, target)
    except OSError as e:
        if backup is not None and not target.exists():
            os.replace(backup, target)
        raise OutputWriteError(
            f"Cannot replace {target}: {e}",
            cause=e,
        ).with_context(output_path=str(target)) from e

    if backup is not None:
        shutil.rmtree(backup, ignore_errors=True)
