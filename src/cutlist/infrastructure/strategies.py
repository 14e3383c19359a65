"""Single-strategy and multi-strategy packing entry points.

Each sort strategy is a pure key function over a unit. The multi-strategy
optimizer packs once per strategy and keeps the best candidate, ranked by
fewest unplaced units, then fewest sheets, then highest yield, then
highest score. Nothing here is random, so identical input always yields
identical output.
"""

from __future__ import annotations

import logging
from typing import Callable, Mapping, Sequence

from cutlist.domain.value_objects import (
    DEFAULT_STRATEGIES,
    ExpandedPart,
    GrainOrientation,
    LayoutResult,
    PackingAlgorithm,
    PackOptions,
    PartSpec,
    Rotation,
    SortStrategy,
    StockSheetSpec,
)
from cutlist.infrastructure.guillotine_packer import pack_guillotine
from cutlist.infrastructure.part_expander import expand_parts
from cutlist.infrastructure.scoring import score
from cutlist.infrastructure.shelf_packer import pack_shelves

logger = logging.getLogger(__name__)


def _placed_height(unit: ExpandedPart) -> float:
    if unit.grain == GrainOrientation.WIDTH:
        return unit.width_mm
    return unit.length_mm


_SORT_KEYS: dict[SortStrategy, Callable[[ExpandedPart], float]] = {
    SortStrategy.AREA: lambda u: u.area,
    SortStrategy.LENGTH: lambda u: u.length_mm,
    SortStrategy.WIDTH: lambda u: u.width_mm,
    SortStrategy.PERIMETER: lambda u: 2 * (u.length_mm + u.width_mm),
    SortStrategy.LONGEST_SIDE: lambda u: max(u.length_mm, u.width_mm),
    SortStrategy.HEIGHT: _placed_height,
}


def sort_units(units: Sequence[ExpandedPart], strategy: SortStrategy) -> list[ExpandedPart]:
    """Order units for packing.

    Grain-locked units come first since they have only one orientation.
    Within each group units sort descending by the strategy key, then by
    area, then by part id and unit number.

    Args:
        units: Units to order.
        strategy: Sort strategy.

    Returns:
        A new list in packing order.
    """
    key = _SORT_KEYS[strategy]
    return sorted(
        units,
        key=lambda u: (not u.spec.is_grain_locked, -key(u), -u.area, u.part_id, u.index),
    )


def run_packer(
    units: Sequence[ExpandedPart],
    sheets: Sequence[StockSheetSpec],
    options: PackOptions,
    preferences: Mapping[str, Rotation] | None = None,
    strategy_used: str | None = None,
) -> LayoutResult:
    """Dispatch to the packer selected by ``options.algorithm``.

    Rotation preferences only apply to the guillotine packer.
    """
    if options.algorithm == PackingAlgorithm.LEGACY:
        return pack_shelves(units, sheets, options, strategy_used=strategy_used)
    return pack_guillotine(
        units, sheets, options, preferences=preferences, strategy_used=strategy_used
    )


def reference_sheet_area(result: LayoutResult, sheets: Sequence[StockSheetSpec]) -> float:
    """Sheet area used to score a result: the mean area of the sheets it used."""
    if result.sheet_count:
        return result.total_sheet_area / result.sheet_count
    return sheets[0].area


def rank_key(result: LayoutResult, sheet_area: float) -> tuple[int, int, float, float]:
    """Sort key for candidate layouts; smaller is better."""
    return (
        result.unplaced_count,
        result.sheet_count,
        -result.yield_ratio,
        -score(result, sheet_area),
    )


def pack(
    parts: Sequence[PartSpec],
    sheets: Sequence[StockSheetSpec],
    options: PackOptions | None = None,
) -> LayoutResult:
    """Pack parts with a single sort strategy.

    Args:
        parts: Part specifications.
        sheets: Stock sheet types, opened in declared order.
        options: Packing options; ``options.strategy`` selects the order.

    Returns:
        The layout result.

    Raises:
        ValueError: If no stock is given or every stock type has zero quantity.
    """
    options = options or PackOptions()
    units = sort_units(expand_parts(parts), options.strategy)
    result = run_packer(units, sheets, options, strategy_used=options.strategy.value)
    logger.info(
        "Packed %d units with %s/%s: %d sheets, %.1f%% yield, %d unplaced",
        len(units),
        options.algorithm.value,
        options.strategy.value,
        result.sheet_count,
        result.yield_ratio * 100,
        result.unplaced_count,
    )
    return result


def best_ordering(
    parts: Sequence[PartSpec],
    sheets: Sequence[StockSheetSpec],
    options: PackOptions | None = None,
    strategies: Sequence[SortStrategy] = DEFAULT_STRATEGIES,
) -> tuple[LayoutResult, list[ExpandedPart]]:
    """Pack once per strategy and return the winner with its unit order.

    Ties keep the earlier strategy.

    Args:
        parts: Part specifications.
        sheets: Stock sheet types.
        options: Packing options; ``options.strategy`` is ignored.
        strategies: Strategies to try, in order.

    Returns:
        Tuple of (winning result, unit order that produced it).

    Raises:
        ValueError: If no strategies are given, no stock is given, or every
            stock type has zero quantity.
    """
    if not strategies:
        raise ValueError("At least one sort strategy is required")

    options = options or PackOptions()
    units = expand_parts(parts)

    best: tuple[LayoutResult, list[ExpandedPart]] | None = None
    best_key: tuple[int, int, float, float] | None = None
    for strategy in strategies:
        ordered = sort_units(units, strategy)
        result = run_packer(ordered, sheets, options, strategy_used=strategy.value)
        key = rank_key(result, reference_sheet_area(result, sheets))
        logger.debug(
            "Strategy %s: %d sheets, %.2f%% yield, %d unplaced",
            strategy.value,
            result.sheet_count,
            result.yield_ratio * 100,
            result.unplaced_count,
        )
        if best_key is None or key < best_key:
            best = (result, ordered)
            best_key = key

    if best is None:
        raise RuntimeError("No strategy produced a layout")
    return best


def pack_optimized(
    parts: Sequence[PartSpec],
    sheets: Sequence[StockSheetSpec],
    options: PackOptions | None = None,
    strategies: Sequence[SortStrategy] = DEFAULT_STRATEGIES,
) -> LayoutResult:
    """Pack parts under several sort strategies and keep the best layout.

    Args:
        parts: Part specifications.
        sheets: Stock sheet types.
        options: Packing options (rotation, algorithm).
        strategies: Strategies to try; defaults to area, length, width
            and perimeter.

    Returns:
        The best layout, with ``strategy_used`` naming the winning strategy.

    Raises:
        ValueError: If no strategies are given, no stock is given, or every
            stock type has zero quantity.
    """
    result, _ = best_ordering(parts, sheets, options, strategies)
    logger.info(
        "Best strategy %s: %d sheets, %.1f%% yield, %d unplaced",
        result.strategy_used,
        result.sheet_count,
        result.yield_ratio * 100,
        result.unplaced_count,
    )
    return result
