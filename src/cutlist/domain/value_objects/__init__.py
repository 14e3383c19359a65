"""Value objects for the cutlist domain.

This module provides the immutable input and output types shared by the
packers and optimizers. All classes are re-exported from sub-modules for
convenience.
"""

from __future__ import annotations

# Parts and stock sheets
from ._parts import (
    BOARD_THICKNESS_MM,
    BandEdges,
    ExpandedPart,
    GrainOrientation,
    LaminationType,
    PartSpec,
    Rotation,
    StockSheetSpec,
)

# Options and strategies
from ._options import (
    DEFAULT_STRATEGIES,
    PackingAlgorithm,
    PackingConfig,
    PackOptions,
    SortStrategy,
)

# Layout results
from ._layout import (
    CutLine,
    CutOrientation,
    EdgingRequirement,
    FreeRect,
    LayoutResult,
    LayoutStats,
    Placement,
    SheetLayout,
    UnplacedPart,
    UnplacedReason,
)

__all__ = [
    "BOARD_THICKNESS_MM",
    "BandEdges",
    "CutLine",
    "CutOrientation",
    "DEFAULT_STRATEGIES",
    "EdgingRequirement",
    "ExpandedPart",
    "FreeRect",
    "GrainOrientation",
    "LaminationType",
    "LayoutResult",
    "LayoutStats",
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
]
