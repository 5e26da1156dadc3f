"""Read the unit table into ordered :class:`UnitRecord` values.

The table is a header-less UTF-8 CSV with exactly four columns::

    symbolic_code, unit_id, display_name, description

When no path is given, the bundled ``data/UNECE_to_OPCUA.csv`` resource is
read. A leading byte-order mark is ignored. Any malformed row aborts the
whole load.
"""

from __future__ import annotations

import csv
import io
import re
from collections.abc import Iterable, Iterator
from importlib import resources
from pathlib import Path

from .errors import RecordParseError, SourceError, SourceNotFoundError
from .logging import get_logger
from .model import UnitRecord

logger = get_logger(__name__)

BUNDLED_TABLE = "UNECE_to_OPCUA.csv"
TEXT_ENCODING = "utf-8-sig"
COLUMN_COUNT = 4

# Optional sign followed by ASCII digits only
_INTEGER = re.compile(r"[+-]?[0-9]+")


def load_records(path: Path | str | None = None) -> list[UnitRecord]:
    """Load every record of the unit table, in file order.

    Args:
        path: Table to read. None reads the bundled table.

    Raises:
        SourceNotFoundError: The table does not exist.
        SourceError: The table cannot be read.
        RecordParseError: The table is not valid UTF-8 or CSV, or a row is
            malformed.
    """
    if path is None:
        source_name = f"cefact_codegen/data/{BUNDLED_TABLE}"
        table = resources.files("cefact_codegen") / "data" / BUNDLED_TABLE
    else:
        table = Path(path)
        source_name = str(table)

    if not table.is_file():
        raise SourceNotFoundError(
            f"Unit table not found: {source_name}",
        ).with_context(source_path=source_name)

    try:
        data = table.read_bytes()
    except OSError as e:
        raise SourceError(
            f"Cannot read unit table {source_name}: {e}",
            cause=e,
        ).with_context(source_path=source_name) from e

    text = decode_table(data, source_name)
    reader = csv.reader(io.StringIO(text, newline=""))
    try:
        records = list(parse_rows(reader, source_name))
    except csv.Error as e:
        raise RecordParseError(
            f"Malformed CSV in {source_name}: {e}",
            cause=e,
        ).with_context(source_path=source_name, row_number=reader.line_num) from e

    logger.info("records_loaded", source=source_name, count=len(records))
    return records


def decode_table(data: bytes, source_name: str = "<bytes>") -> str:
    """Decode the raw table, reporting the line of the first invalid byte."""
    try:
        return data.decode(TEXT_ENCODING)
    except UnicodeDecodeError as e:
        line = data.count(b"\n", 0, e.start) + 1
        raise RecordParseError(
            f"Unit table {source_name} is not valid UTF-8 at byte {e.start}",
            cause=e,
        ).with_context(source_path=source_name, row_number=line) from e


def parse_rows(rows: Iterable[list[str]], source_name: str = "<rows>") -> Iterator[UnitRecord]:
    """Convert parsed CSV rows into records.

    Blank rows are skipped; row numbers stay 1-based positions in the file.
    """
    for row_number, row in enumerate(rows, start=1):
        if not row or all(not cell.strip() for cell in row):
            continue
        yield parse_row(row, row_number, source_name)


def parse_row(row: list[str], row_number: int, source_name: str = "<rows>") -> UnitRecord:
    """Convert one parsed CSV row into a record.

    Raises:
        RecordParseError: Wrong column count, or a unit id that is not a
            non-negative base-10 integer of ASCII digits.
    """
    if len(row) != COLUMN_COUNT:
        raise RecordParseError(
            f"Expected {COLUMN_COUNT} columns, found {len(row)}",
        ).with_context(source_path=source_name, row_number=row_number)

    symbolic_code, raw_unit_id, display_name, description = row
    if not _INTEGER.fullmatch(raw_unit_id.strip()):
        raise RecordParseError(
            f"Unit id {raw_unit_id!r} is not an integer",
        ).with_context(source_path=source_name, row_number=row_number)

    unit_id = int(raw_unit_id.strip())
    if unit_id < 0:
        raise RecordParseError(
            f"Unit id {unit_id} is negative",
        ).with_context(source_path=source_name, row_number=row_number)

    return UnitRecord(
        symbolic_code=symbolic_code,
        unit_id=unit_id,
        display_name=display_name,
        description=description,
        row_number=row_number,
    )
