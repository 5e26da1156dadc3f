"""Tests for cefact_codegen.render: Jinja2 source emission."""

from __future__ import annotations

import ast

import pytest

from cefact_codegen.config import DuplicateCodePolicy
from cefact_codegen.emitter import emit_base, emit_facade, emit_partitions
from cefact_codegen.errors import RenderError
from cefact_codegen.linker import link_chain
from cefact_codegen.model import Partition, UnitRecord
from cefact_codegen.render import SourceRenderer, python_string_literal

BASE = "CefactEngineeringUnits"


def _chain(*partitions: Partition):
    return link_chain(
        emit_base(BASE),
        emit_partitions(list(partitions), BASE),
        emit_facade(BASE),
    )


def _partition(index: int, *records: UnitRecord) -> Partition:
    return Partition(index=index, records=records)


class TestStringLiteral:
    @pytest.mark.parametrize(
        "text",
        [
            "metre",
            '"',
            "'",
            "back\\slash",
            "line\nbreak\ttab",
            "m²",
            "µm",
            "\u0007bell",
            "",
        ],
    )
    def test_literal_parses_back(self, text):
        assert ast.literal_eval(python_string_literal(text)) == text

    def test_literal_is_double_quoted(self):
        literal = python_string_literal('say "hi"')
        assert literal == '"say \\"hi\\""'


class TestRenderAll:
    def test_module_files(self):
        chain = _chain(
            _partition(0, UnitRecord("MTR", 5067858, "m", "metre")),
            _partition(1, UnitRecord("KGM", 4933453, "kg", "kilogram")),
        )
        modules = SourceRenderer().render_all(chain)
        assert [m.file_name for m in modules] == [
            "cefact_engineering_units_base.py",
            "cefact_engineering_units_0.py",
            "cefact_engineering_units_1.py",
            "cefact_engineering_units.py",
            "__init__.py",
        ]

    def test_every_module_compiles(self):
        chain = _chain(
            _partition(0, UnitRecord("D62", 4470322, '""""', "second [unit of angle]")),
            _partition(1, UnitRecord("INH", 4804168, '"""in"""', "inch")),
        )
        for module in SourceRenderer(namespace_uri="urn:test").render_all(chain):
            compile(module.source, module.file_name, "exec")

    def test_empty_chain_compiles(self):
        for module in SourceRenderer().render_all(_chain()):
            compile(module.source, module.file_name, "exec")

    def test_partition_source(self):
        chain = _chain(_partition(0, UnitRecord("MTR", 5067858, '"m"', '"metre"')))
        source = SourceRenderer().render(chain.partitions[0], chain).source
        assert "class CefactEngineeringUnits0(CefactEngineeringUnitsBase):" in source
        assert (
            'CODE_MTR = EUInformation(CEFACT_NAMESPACE_URI, 5067858, '
            'LocalizedText.english("m"), LocalizedText.english("metre"))'
        ) in source
        assert "by_unit_id[5067858] = CefactEngineeringUnits0.CODE_MTR" in source

    def test_facade_lists_populators_in_order(self):
        chain = _chain(
            _partition(0, UnitRecord("A", 1, "", "")),
            _partition(1, UnitRecord("B", 2, "", "")),
            _partition(2, UnitRecord("C", 3, "", "")),
        )
        source = SourceRenderer().render(chain.facade, chain).source
        positions = [source.index(f"    _populate_{i},") for i in (2, 1, 0)]
        assert positions == sorted(positions)
        assert "class CefactEngineeringUnits(CefactEngineeringUnits0):" in source

    def test_runtime_module_is_configurable(self):
        chain = _chain(_partition(0, UnitRecord("A", 1, "", "")))
        modules = SourceRenderer(runtime_module="mylib.units").render_all(chain)
        assert "from mylib.units import UnitRegistry" in modules[0].source
        assert "from mylib.units import EUInformation, LocalizedText" in modules[1].source

    def test_header_names_source(self):
        chain = _chain()
        source = SourceRenderer(source_name="units.csv").render(chain.base, chain).source
        assert source.startswith("# Generated by cefact-codegen from units.csv. Do not edit.")

    def test_rendering_is_deterministic(self):
        chain = _chain(_partition(0, UnitRecord("A", 1, "a", "b"), UnitRecord("B", 2, "c", "d")))
        first = [m.source for m in SourceRenderer().render_all(chain)]
        second = [m.source for m in SourceRenderer().render_all(chain)]
        assert first == second

    def test_facade_imports_highest_partition_first(self):
        chain = _chain(*(_partition(i, UnitRecord(f"U{i}", i, "", "")) for i in range(3)))
        source = SourceRenderer().render(chain.facade, chain).source
        imports = [
            source.index(f"from .cefact_engineering_units_{i} import populate") for i in (2, 1, 0)
        ]
        assert imports == sorted(imports)
        assert source.index("import CefactEngineeringUnits0") > imports[-1]

    def test_dropped_constant_registered_inline(self):
        partition = _partition(
            0, UnitRecord("MTR", 1, "first", "a"), UnitRecord("MTR", 2, "second", "b")
        )
        chain = link_chain(
            emit_base(BASE),
            emit_partitions([partition], BASE, duplicate_codes=DuplicateCodePolicy.LAST_WINS),
            emit_facade(BASE),
        )
        source = SourceRenderer().render(chain.partitions[0], chain).source
        compile(source, "partition.py", "exec")
        assert (
            'by_unit_id[1] = EUInformation(CEFACT_NAMESPACE_URI, 1, '
            'LocalizedText.english("first"), LocalizedText.english("a"))'
        ) in source
        assert "by_unit_id[2] = CefactEngineeringUnits0.CODE_MTR" in source


class TestRenderErrors:
    def test_missing_template_raises_render_error(self, tmp_path):
        renderer = SourceRenderer(template_dir=tmp_path)
        with pytest.raises(RenderError) as exc_info:
            renderer.render_all(_chain())
        assert exc_info.value.context.metadata["template"] == "base.py.j2"

    def test_broken_template_raises_render_error(self, tmp_path):
        (tmp_path / "base.py.j2").write_text("{{ missing_variable }}\n", encoding="utf-8")
        renderer = SourceRenderer(template_dir=tmp_path)
        chain = _chain()
        with pytest.raises(RenderError):
            renderer.render(chain.base, chain)
