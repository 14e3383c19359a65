"""Infrastructure layer: packing algorithms, optimizers and formatters."""

from cutlist.infrastructure.accounting import build_result, compute_stats
from cutlist.infrastructure.annealing import (
    AnnealingProgress,
    AnnealingSchedule,
    MoveOptions,
    pack_annealed,
)
from cutlist.infrastructure.formatters import (
    LayoutReportFormatter,
    layout_to_dict,
    layout_to_json,
)
from cutlist.infrastructure.guillotine_packer import GuillotinePacker, pack_guillotine
from cutlist.infrastructure.part_expander import expand_parts
from cutlist.infrastructure.scoring import score, score_v2
from cutlist.infrastructure.shelf_packer import ShelfPacker, pack_shelves
from cutlist.infrastructure.strategies import (
    best_ordering,
    pack,
    pack_optimized,
    sort_units,
)

__all__ = [
    "AnnealingProgress",
    "AnnealingSchedule",
    "GuillotinePacker",
    "LayoutReportFormatter",
    "MoveOptions",
    "ShelfPacker",
    "best_ordering",
    "build_result",
    "compute_stats",
    "expand_parts",
    "layout_to_dict",
    "layout_to_json",
    "pack",
    "pack_annealed",
    "pack_guillotine",
    "pack_optimized",
    "pack_shelves",
    "score",
    "score_v2",
    "sort_units",
]
