"""Two-dimensional cutting-stock optimization for sheet goods.

The public entry points pack rectangular parts onto stock sheets:

    - pack: single sort strategy, deterministic
    - pack_optimized: best of several sort strategies
    - pack_annealed: simulated annealing refinement on one sheet type
    - score, score_v2: layout quality scores

Example:
    >>> from cutlist import PartSpec, StockSheetSpec, pack_optimized
    >>> parts = [PartSpec(id="side", length_mm=720, width_mm=560, qty=2)]
    >>> sheets = [StockSheetSpec(id="board", length_mm=2750, width_mm=1830, kerf_mm=3)]
    >>> result = pack_optimized(parts, sheets)
    >>> result.sheet_count
    1
"""

from cutlist.domain import (
    BandEdges,
    CutLine,
    FreeRect,
    GrainOrientation,
    LaminationType,
    LayoutResult,
    LayoutStats,
    PackingAlgorithm,
    PackingConfig,
    PackOptions,
    PartSpec,
    Placement,
    Rotation,
    SheetLayout,
    SortStrategy,
    StockSheetSpec,
    UnplacedPart,
    UnplacedReason,
)
from cutlist.infrastructure import (
    AnnealingProgress,
    AnnealingSchedule,
    MoveOptions,
    compute_stats,
    expand_parts,
    pack,
    pack_annealed,
    pack_optimized,
    score,
    score_v2,
)

__version__ = "0.1.0"

__all__ = [
    "AnnealingProgress",
    "AnnealingSchedule",
    "BandEdges",
    "CutLine",
    "FreeRect",
    "GrainOrientation",
    "LaminationType",
    "LayoutResult",
    "LayoutStats",
    "MoveOptions",
    "PackOptions",
    "PackingAlgorithm",
    "PackingConfig",
    "PartSpec",
    "Placement",
    "Rotation",
    "SheetLayout",
    "SortStrategy",
    "StockSheetSpec",
    "UnplacedPart",
    "UnplacedReason",
    "compute_stats",
    "expand_parts",
    "pack",
    "pack_annealed",
    "pack_optimized",
    "score",
    "score_v2",
]
