"""Tests for sort strategies and the multi-strategy optimizer.

Tests cover:
- Sort keys and grain-locked-first ordering
- Single-strategy pack with both algorithms
- Candidate ranking
- best_ordering / pack_optimized selection and determinism
"""

from __future__ import annotations

import pytest

from conftest import assert_layout_valid, assert_quantities_conserved
from cutlist.domain.value_objects import (
    DEFAULT_STRATEGIES,
    GrainOrientation,
    LayoutResult,
    LayoutStats,
    PackingAlgorithm,
    PackOptions,
    PartSpec,
    SortStrategy,
    StockSheetSpec,
    UnplacedPart,
    UnplacedReason,
)
from cutlist.infrastructure.part_expander import expand_parts
from cutlist.infrastructure.strategies import (
    best_ordering,
    pack,
    pack_optimized,
    rank_key,
    reference_sheet_area,
    sort_units,
)


@pytest.fixture
def mixed_units():
    return expand_parts(
        [
            PartSpec(id="long", length_mm=1200, width_mm=100),
            PartSpec(id="wide", length_mm=300, width_mm=900),
            PartSpec(id="square", length_mm=500, width_mm=500),
            PartSpec(id="locked", length_mm=200, width_mm=200, grain=GrainOrientation.LENGTH),
        ]
    )


# =============================================================================
# Sort Tests
# =============================================================================


class TestSortUnits:
    """Tests for sort_units."""

    def test_grain_locked_first(self, mixed_units) -> None:
        for strategy in SortStrategy:
            assert sort_units(mixed_units, strategy)[0].part_id == "locked"

    @pytest.mark.parametrize(
        "strategy,expected",
        [
            (SortStrategy.AREA, ["locked", "wide", "square", "long"]),
            (SortStrategy.LENGTH, ["locked", "long", "square", "wide"]),
            (SortStrategy.WIDTH, ["locked", "wide", "square", "long"]),
            (SortStrategy.PERIMETER, ["locked", "long", "wide", "square"]),
            (SortStrategy.LONGEST_SIDE, ["locked", "long", "wide", "square"]),
        ],
    )
    def test_descending_by_key(self, mixed_units, strategy, expected) -> None:
        assert [u.part_id for u in sort_units(mixed_units, strategy)] == expected

    def test_ties_broken_by_part_id_then_unit(self) -> None:
        units = expand_parts(
            [
                PartSpec(id="b", length_mm=100, width_mm=100, qty=2),
                PartSpec(id="a", length_mm=100, width_mm=100, qty=2),
            ]
        )
        ordered = sort_units(units, SortStrategy.AREA)
        assert [u.uid for u in ordered] == ["a#1", "a#2", "b#1", "b#2"]

    def test_does_not_mutate_input(self, mixed_units) -> None:
        before = list(mixed_units)
        sort_units(mixed_units, SortStrategy.LENGTH)
        assert mixed_units == before


# =============================================================================
# Single Strategy Tests
# =============================================================================


class TestPack:
    """Tests for single-strategy pack."""

    def test_records_strategy(self, board: StockSheetSpec, cabinet_parts) -> None:
        result = pack(cabinet_parts, [board], PackOptions(strategy=SortStrategy.LENGTH))
        assert result.strategy_used == "length"
        assert result.algorithm == PackingAlgorithm.GUILLOTINE

    def test_legacy_algorithm(self, board: StockSheetSpec, cabinet_parts) -> None:
        result = pack(cabinet_parts, [board], PackOptions(algorithm=PackingAlgorithm.LEGACY))
        assert result.algorithm == PackingAlgorithm.LEGACY
        assert result.is_complete
        assert_layout_valid(result)

    def test_default_options(self, board: StockSheetSpec) -> None:
        result = pack([PartSpec(id="p", length_mm=100, width_mm=100)], [board])
        assert result.strategy_used == "area"


# =============================================================================
# Ranking Tests
# =============================================================================


def _result(unplaced: int = 0) -> LayoutResult:
    entries = ()
    if unplaced:
        part = PartSpec(id="p", length_mm=1, width_mm=1, qty=unplaced)
        entries = (UnplacedPart(part, unplaced, UnplacedReason.TOO_LARGE_FOR_SHEET),)
    return LayoutResult(sheets=(), stats=LayoutStats(), unplaced=entries)


class TestRanking:
    """Tests for rank_key and reference_sheet_area."""

    def test_unplaced_dominates(self, board: StockSheetSpec) -> None:
        fewer_sheets = pack([PartSpec(id="p", length_mm=100, width_mm=100)], [board])
        assert rank_key(fewer_sheets, board.area) < rank_key(_result(unplaced=1), board.area)

    def test_reference_area_without_sheets(self, board: StockSheetSpec) -> None:
        assert reference_sheet_area(_result(), [board]) == board.area

    def test_reference_area_is_mean_of_used_sheets(self) -> None:
        small = StockSheetSpec(id="small", length_mm=1000, width_mm=1000, qty=1)
        big = StockSheetSpec(id="big", length_mm=2000, width_mm=1000, qty=1)
        result = pack([PartSpec(id="p", length_mm=900, width_mm=900, qty=2)], [small, big])
        assert result.sheet_count == 2
        assert reference_sheet_area(result, [small, big]) == 1_500_000


# =============================================================================
# Multi-Strategy Tests
# =============================================================================


class TestBestOrdering:
    """Tests for best_ordering and pack_optimized."""

    def test_returns_winning_order(self, kerfed_board: StockSheetSpec, cabinet_parts) -> None:
        result, order = best_ordering(cabinet_parts, [kerfed_board])
        assert len(order) == sum(p.qty for p in cabinet_parts)
        assert result.strategy_used in {s.value for s in DEFAULT_STRATEGIES}
        assert {u.uid for u in order} == {u.uid for u in expand_parts(cabinet_parts)}

    def test_no_worse_than_any_single_strategy(
        self, kerfed_board: StockSheetSpec, cabinet_parts
    ) -> None:
        best = pack_optimized(cabinet_parts, [kerfed_board])
        best_key = rank_key(best, reference_sheet_area(best, [kerfed_board]))
        for strategy in DEFAULT_STRATEGIES:
            single = pack(cabinet_parts, [kerfed_board], PackOptions(strategy=strategy))
            assert best_key <= rank_key(single, reference_sheet_area(single, [kerfed_board]))

    def test_deterministic(self, kerfed_board: StockSheetSpec, cabinet_parts) -> None:
        first = pack_optimized(cabinet_parts, [kerfed_board])
        second = pack_optimized(cabinet_parts, [kerfed_board])
        assert first == second

    def test_ties_keep_first_strategy(self, board: StockSheetSpec) -> None:
        result = pack_optimized([PartSpec(id="p", length_mm=400, width_mm=400)], [board])
        assert result.strategy_used == "area"

    def test_custom_strategy_list(self, board: StockSheetSpec, cabinet_parts) -> None:
        result = pack_optimized(cabinet_parts, [board], strategies=[SortStrategy.HEIGHT])
        assert result.strategy_used == "height"

    def test_empty_strategy_list_raises(self, board: StockSheetSpec, cabinet_parts) -> None:
        with pytest.raises(ValueError, match="strategy"):
            best_ordering(cabinet_parts, [board], strategies=[])

    def test_invariants_hold(self, kerfed_board: StockSheetSpec, cabinet_parts) -> None:
        result = pack_optimized(cabinet_parts, [kerfed_board])
        assert_layout_valid(result)
        assert_quantities_conserved(result, cabinet_parts)
