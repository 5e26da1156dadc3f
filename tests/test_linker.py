"""Tests for cefact_codegen.linker: superclass chain and population order."""

from __future__ import annotations

from cefact_codegen.config import Precedence
from cefact_codegen.emitter import emit_base, emit_facade, emit_partition
from cefact_codegen.linker import link_chain, population_order
from cefact_codegen.model import Partition, UnitRecord

BASE = "CefactEngineeringUnits"


def _specs(count: int):
    return [
        emit_partition(Partition(i, (UnitRecord(f"U{i}", i, "", ""),)), BASE)
        for i in range(count)
    ]


class TestLinkChain:
    def test_linear_chain(self):
        chain = link_chain(emit_base(BASE), _specs(3), emit_facade(BASE))
        parents = [(s.class_name, s.superclass) for s in chain.partitions]
        assert parents == [
            ("CefactEngineeringUnits0", "CefactEngineeringUnits1"),
            ("CefactEngineeringUnits1", "CefactEngineeringUnits2"),
            ("CefactEngineeringUnits2", "CefactEngineeringUnitsBase"),
        ]
        assert chain.partitions[2].superclass_module == "cefact_engineering_units_base"

    def test_facade_inherits_partition_zero(self):
        chain = link_chain(emit_base(BASE), _specs(2), emit_facade(BASE))
        assert chain.facade.superclass == "CefactEngineeringUnits0"
        assert chain.facade.superclass_module == "cefact_engineering_units_0"

    def test_single_partition_inherits_base(self):
        chain = link_chain(emit_base(BASE), _specs(1), emit_facade(BASE))
        assert chain.partitions[0].superclass == "CefactEngineeringUnitsBase"

    def test_no_partitions_facade_inherits_base(self):
        chain = link_chain(emit_base(BASE), [], emit_facade(BASE))
        assert chain.partitions == ()
        assert chain.facade.superclass == "CefactEngineeringUnitsBase"
        assert chain.population_order == ()

    def test_unsorted_input_is_ordered(self):
        specs = _specs(3)
        chain = link_chain(emit_base(BASE), [specs[2], specs[0], specs[1]], emit_facade(BASE))
        assert [s.index for s in chain.partitions] == [0, 1, 2]

    def test_containers_base_first_facade_last(self):
        chain = link_chain(emit_base(BASE), _specs(2), emit_facade(BASE))
        names = [s.class_name for s in chain.containers]
        assert names[0] == "CefactEngineeringUnitsBase"
        assert names[-1] == BASE

    def test_default_population_order_lowest_last(self):
        chain = link_chain(emit_base(BASE), _specs(4), emit_facade(BASE))
        assert chain.population_order == (3, 2, 1, 0)


class TestPopulationOrder:
    def test_lowest_index_wins(self):
        assert population_order([0, 1, 2], Precedence.LOWEST_INDEX) == (2, 1, 0)

    def test_highest_index_wins(self):
        assert population_order([2, 0, 1], Precedence.HIGHEST_INDEX) == (0, 1, 2)
