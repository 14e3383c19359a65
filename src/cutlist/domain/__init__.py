"""Domain layer - part, sheet and layout value objects."""

from .value_objects import (
    BandEdges,
    CutLine,
    CutOrientation,
    EdgingRequirement,
    ExpandedPart,
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

__all__ = [
    "BandEdges",
    "CutLine",
    "CutOrientation",
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
