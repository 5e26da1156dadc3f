"""Engineering-unit constant generator.

Turns the UNECE common-code to OPC UA unit table into a package of typed
``EUInformation`` constants split across partition modules, linked into one
class chain, with a facade offering ``get_all()`` and ``get_by_unit_id()``.

Usage::

    from cefact_codegen import generate_units, get_settings

    # Bundled table into ./generated/cefact_units
    generate_units()

    # Custom table and location
    generate_units(get_settings(input_path=Path("units.csv"), output_dir=Path("build")))
"""

from __future__ import annotations

from .config import CodegenSettings, DuplicateCodePolicy, Precedence, get_settings
from .errors import CodegenError
from .generator import UnitsGenerator, generate_units
from .model import Partition, UnitRecord
from .runtime import EUInformation, LocalizedText, UnitRegistry

__version__ = "0.1.0"

__all__ = [
    "generate_units",
    "UnitsGenerator",
    "CodegenSettings",
    "DuplicateCodePolicy",
    "Precedence",
    "get_settings",
    "CodegenError",
    "Partition",
    "UnitRecord",
    "EUInformation",
    "LocalizedText",
    "UnitRegistry",
    "__version__",
]
