"""Tests for the legacy shelf packer."""

from __future__ import annotations

import pytest

from conftest import assert_grain_respected, assert_layout_valid, assert_quantities_conserved
from cutlist.domain.value_objects import (
    CutOrientation,
    FreeRect,
    GrainOrientation,
    PackingAlgorithm,
    PackOptions,
    PartSpec,
    Rotation,
    SortStrategy,
    StockSheetSpec,
    UnplacedReason,
)
from cutlist.infrastructure.part_expander import expand_parts
from cutlist.infrastructure.shelf_packer import ShelfPacker, pack_shelves
from cutlist.infrastructure.strategies import sort_units


def _pack(parts, sheets, **options):
    units = sort_units(expand_parts(parts), SortStrategy.AREA)
    return pack_shelves(units, sheets, PackOptions(algorithm=PackingAlgorithm.LEGACY, **options))


class TestShelfPacker:
    """Tests for shelf placement."""

    def test_single_part_is_upright(self, board: StockSheetSpec) -> None:
        result = _pack([PartSpec(id="p", length_mm=1000, width_mm=500)], [board])
        placement = result.sheets[0].placements[0]

        assert result.algorithm == PackingAlgorithm.LEGACY
        assert placement.rotation == Rotation.DEG_0
        assert (placement.x, placement.y, placement.w, placement.h) == (0, 0, 500, 1000)

    def test_units_fill_a_shelf_left_to_right(self, board: StockSheetSpec) -> None:
        part = PartSpec(id="p", length_mm=500, width_mm=300, qty=3, grain=GrainOrientation.LENGTH)
        result = _pack([part], [board])
        positions = [(p.x, p.y) for p in result.sheets[0].placements]
        assert positions == [(0, 0), (300, 0), (600, 0)]

    def test_kerf_between_units_on_a_shelf(self, kerfed_board: StockSheetSpec) -> None:
        part = PartSpec(id="p", length_mm=500, width_mm=300, qty=2, grain=GrainOrientation.LENGTH)
        result = _pack([part], [kerfed_board])
        assert [p.x for p in result.sheets[0].placements] == [0, 303]

    def test_new_shelf_below_previous_one(self) -> None:
        sheet = StockSheetSpec(id="narrow", length_mm=2000, width_mm=500, kerf_mm=3)
        part = PartSpec(id="p", length_mm=600, width_mm=400, qty=2, grain=GrainOrientation.LENGTH)
        result = _pack([part], [sheet])
        assert [p.y for p in result.sheets[0].placements] == [0, 603]

    def test_cuts_and_offcuts_derived_from_shelves(self, board: StockSheetSpec) -> None:
        result = _pack([PartSpec(id="p", length_mm=1000, width_mm=500)], [board])
        sheet = result.sheets[0]

        assert [c.orientation for c in sheet.cuts] == [
            CutOrientation.HORIZONTAL,
            CutOrientation.VERTICAL,
        ]
        assert result.stats.cut_length_mm == 1830 + 1000
        assert set(sheet.offcuts) == {
            FreeRect(500, 0, 1330, 1000),
            FreeRect(0, 1000, 1830, 1750),
        }

    def test_too_large(self, board: StockSheetSpec) -> None:
        result = _pack([PartSpec(id="huge", length_mm=3000, width_mm=2000)], [board])
        assert result.sheets == ()
        assert result.unplaced[0].reason == UnplacedReason.TOO_LARGE_FOR_SHEET

    def test_out_of_stock(self) -> None:
        sheet = StockSheetSpec(id="board", length_mm=2750, width_mm=1830, qty=1)
        result = _pack([PartSpec(id="p", length_mm=2000, width_mm=1500, qty=2)], [sheet])
        assert result.unplaced_count == 1
        assert result.unplaced[0].reason == UnplacedReason.INSUFFICIENT_SHEET_CAPACITY

    def test_empty_stock_raises(self) -> None:
        with pytest.raises(ValueError):
            ShelfPacker([]).pack(expand_parts([PartSpec(id="p", length_mm=1, width_mm=1)]))

    def test_mixed_job_invariants(
        self, kerfed_board: StockSheetSpec, cabinet_parts: list[PartSpec]
    ) -> None:
        result = _pack(cabinet_parts, [kerfed_board])

        assert result.is_complete
        assert_layout_valid(result)
        assert_quantities_conserved(result, cabinet_parts)
        assert_grain_respected(result, cabinet_parts)

    def test_offcuts_stay_on_the_sheet(
        self, kerfed_board: StockSheetSpec, cabinet_parts: list[PartSpec]
    ) -> None:
        result = _pack(cabinet_parts, [kerfed_board])
        for sheet in result.sheets:
            for rect in sheet.offcuts:
                assert rect.w > 0 and rect.h > 0
                assert rect.x + rect.w <= sheet.width
                assert rect.y + rect.h <= sheet.length
