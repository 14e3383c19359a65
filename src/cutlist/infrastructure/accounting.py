"""Waste, cut and edge-banding accounting over finished layouts.

Everything here is a pure post-processing pass: the packers hand over
their finished sheets and this module derives the statistics that make up
a LayoutResult.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable, Mapping, Sequence

from cutlist.domain.value_objects import (
    EdgingRequirement,
    ExpandedPart,
    LaminationType,
    LayoutResult,
    LayoutStats,
    PackingAlgorithm,
    PartSpec,
    SheetLayout,
    UnplacedPart,
    UnplacedReason,
)

logger = logging.getLogger(__name__)


def compute_stats(
    sheets: Sequence[SheetLayout],
    parts: Mapping[str, PartSpec],
) -> LayoutStats:
    """Compute area, cut and edge-banding statistics for a set of sheets.

    Edge banding is the physical length of every banded edge of every
    placed unit. Parts without lamination count toward the 16mm class,
    all laminated parts toward the 32mm class. The per-thickness breakdown
    additionally follows the layer count of custom laminations.

    Args:
        sheets: Finished sheet layouts.
        parts: Originating part specs keyed by part id.

    Returns:
        Aggregate statistics.
    """
    used_area = sum(sheet.used_area for sheet in sheets)
    sheet_area = sum(sheet.area for sheet in sheets)

    cut_count = 0
    cut_length = 0.0
    for sheet in sheets:
        cut_count += len(sheet.cuts)
        cut_length += sum(cut.length for cut in sheet.cuts)

    band_16 = 0.0
    band_32 = 0.0
    by_thickness: dict[int, float] = defaultdict(float)
    for sheet in sheets:
        for placement in sheet.placements:
            spec = parts[placement.part_id]
            banded = spec.band_edges.banded_length(spec.length_mm, spec.width_mm)
            if banded == 0:
                continue
            if spec.lamination_type == LaminationType.NONE:
                band_16 += banded
            else:
                band_32 += banded
            by_thickness[spec.edge_thickness_mm] += banded

    edging = tuple(
        EdgingRequirement(thickness_mm=thickness, length_mm=length)
        for thickness, length in sorted(by_thickness.items())
    )

    return LayoutStats(
        used_area_mm2=used_area,
        waste_area_mm2=sheet_area - used_area,
        cuts=cut_count,
        cut_length_mm=cut_length,
        edgebanding_length_mm=band_16 + band_32,
        edgebanding_16mm_mm=band_16,
        edgebanding_32mm_mm=band_32,
        edging_by_thickness=edging,
    )


def group_unplaced(
    entries: Iterable[tuple[ExpandedPart, UnplacedReason]],
) -> tuple[UnplacedPart, ...]:
    """Collapse unplaced units into one entry per part spec and reason.

    Entries keep the order in which each (part, reason) pair first failed.
    """
    counts: dict[tuple[str, UnplacedReason], int] = {}
    specs: dict[str, PartSpec] = {}
    for unit, reason in entries:
        key = (unit.part_id, reason)
        counts[key] = counts.get(key, 0) + 1
        specs[unit.part_id] = unit.spec

    return tuple(
        UnplacedPart(part=specs[part_id], count=count, reason=reason)
        for (part_id, reason), count in counts.items()
    )


def build_result(
    sheets: Sequence[SheetLayout],
    units: Sequence[ExpandedPart],
    unplaced: Iterable[tuple[ExpandedPart, UnplacedReason]],
    algorithm: PackingAlgorithm,
    strategy_used: str | None = None,
) -> LayoutResult:
    """Assemble a LayoutResult from a packer's finished state.

    Args:
        sheets: Finished sheet layouts, in opening order.
        units: Every unit the packer was asked to place.
        unplaced: Units that failed, with their reasons.
        algorithm: Packer that produced the sheets.
        strategy_used: Sort strategy name, if known.

    Returns:
        The complete layout result.
    """
    specs = {unit.part_id: unit.spec for unit in units}
    stats = compute_stats(sheets, specs)
    grouped = group_unplaced(unplaced)

    result = LayoutResult(
        sheets=tuple(sheets),
        stats=stats,
        unplaced=grouped,
        algorithm=algorithm,
        strategy_used=strategy_used,
    )
    logger.debug(
        "Layout: %d sheets, %d placed, %d unplaced, %.1f%% yield",
        result.sheet_count,
        result.placed_count,
        result.unplaced_count,
        result.yield_ratio * 100,
    )
    return result
