"""
CLI: ``cefact-codegen``: generate the engineering-unit constant library.

Usage::

    # Generate with defaults (bundled table, ./generated/cefact_units)
    cefact-codegen generate

    # Different table and output location, no stdout echo
    cefact-codegen generate --input units.csv --output-dir build --no-echo

    # Inspect the table without generating
    cefact-codegen stats --input units.csv
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import Precedence, get_settings
from .errors import CodegenError
from .generator import UnitsGenerator
from .loader import load_records
from .logging import configure_logging
from .partition import partition_records

app = typer.Typer(
    name="cefact-codegen",
    help="Generate typed engineering-unit constants from the UNECE/OPC UA table.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError, version as pkg_version

        try:
            v = pkg_version("cefact-codegen")
        except PackageNotFoundError:
            v = "0.1.0"
        typer.echo(f"cefact-codegen {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """cefact-codegen CLI: unit table to Python constants."""


@app.command("generate")
def generate(
    input_path: Path | None = typer.Option(None, "--input", "-i", help="Unit table (default: bundled table)"),
    output_dir: Path | None = typer.Option(None, "--output-dir", "-o", help="Directory receiving the package"),
    package_name: str | None = typer.Option(None, "--package", "-p", help="Generated package name"),
    precedence: Precedence | None = typer.Option(None, "--precedence", help="Partition winning a shared unit id"),
    echo: bool | None = typer.Option(None, "--echo/--no-echo", help="Echo generated source to stdout"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Generate the unit library."""
    try:
        settings = get_settings(
            input_path=input_path,
            output_dir=output_dir,
            package_name=package_name,
            precedence=precedence,
            echo_stdout=echo,
        )
        configure_logging(
            level="DEBUG" if verbose else settings.log_level,
            json_format=settings.log_format == "json",
        )
        result = UnitsGenerator(settings).generate()
    except CodegenError as e:
        err_console.print(f"[red]Generation failed:[/red] {e.message}")
        context = e.context.to_dict()
        if context:
            err_console.print(f"  {context}")
        raise typer.Exit(code=1) from e

    table = Table(title=f"Generated {result.package_dir}")
    table.add_column("Module", style="cyan")
    table.add_column("Size", justify="right")
    for name, path in result.written.items():
        table.add_row(name, f"{path.stat().st_size:,} bytes")
    err_console.print(table)
    err_console.print(
        f"[bold]{result.record_count}[/bold] records, "
        f"[bold]{result.partition_count}[/bold] partitions, "
        f"[bold]{result.distinct_unit_ids}[/bold] distinct unit ids"
    )


@app.command("stats")
def stats(
    input_path: Path | None = typer.Option(None, "--input", "-i", help="Unit table (default: bundled table)"),
) -> None:
    """Show record and partition counts without generating."""
    try:
        settings = get_settings(input_path=input_path)
        configure_logging(level="WARNING", json_format=settings.log_format == "json")
        records = load_records(settings.input_path)
        partitions = partition_records(records, settings.partition_size)
    except CodegenError as e:
        err_console.print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(code=1) from e

    id_counts = Counter(record.unit_id for record in records)
    duplicated = sorted(unit_id for unit_id, count in id_counts.items() if count > 1)

    table = Table(title="Unit table")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Records", str(len(records)))
    table.add_row("Partitions", str(len(partitions)))
    table.add_row("Partition size", str(settings.partition_size))
    table.add_row("Distinct unit ids", str(len(id_counts)))
    table.add_row("Duplicated unit ids", str(len(duplicated)))
    Console().print(table)

    if duplicated:
        preview = ", ".join(str(unit_id) for unit_id in duplicated[:10])
        more = f" ... and {len(duplicated) - 10} more" if len(duplicated) > 10 else ""
        Console().print(f"[yellow]Duplicated ids:[/yellow] {preview}{more}")
