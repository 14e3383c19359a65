"""Layout result value objects produced by the packers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ._options import PackingAlgorithm
from ._parts import PartSpec, Rotation


@dataclass(frozen=True)
class FreeRect:
    """Axis-aligned rectangle of unoccupied sheet area.

    Inside the guillotine packer free rectangles are kerf-inclusive; the
    offcuts reported on a SheetLayout are real extents.
    """

    x: float
    y: float
    w: float
    h: float

    @property
    def area(self) -> float:
        return self.w * self.h

    @property
    def short_side(self) -> float:
        return min(self.w, self.h)


class CutOrientation(str, Enum):
    """Direction of a straight saw cut."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


@dataclass(frozen=True)
class CutLine:
    """A single edge-to-edge guillotine cut.

    Attributes:
        orientation: HORIZONTAL cuts run along x at a fixed y; VERTICAL
            cuts run along y at a fixed x.
        position: Coordinate of the cut line on the fixed axis.
        start: Start coordinate along the cut.
        end: End coordinate along the cut.
    """

    orientation: CutOrientation
    position: float
    start: float
    end: float

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("Cut end must not precede its start")

    @property
    def length(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class Placement:
    """A part unit placed on a sheet.

    Attributes:
        part_id: Id of the originating PartSpec.
        label: Unit id, ``<part id>#<n>``.
        x: Offset from the sheet's left edge (width axis).
        y: Offset from the sheet's top edge (length axis).
        w: Placed extent along x, after rotation.
        h: Placed extent along y, after rotation.
        rotation: 0 or 90 degrees.
    """

    part_id: str
    x: float
    y: float
    w: float
    h: float
    rotation: Rotation = Rotation.DEG_0
    label: str | None = None

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError("Position coordinates must be non-negative")
        if self.w <= 0 or self.h <= 0:
            raise ValueError("Placed dimensions must be positive")

    @property
    def right_edge(self) -> float:
        return self.x + self.w

    @property
    def bottom_edge(self) -> float:
        return self.y + self.h

    @property
    def area(self) -> float:
        return self.w * self.h

    @property
    def is_rotated(self) -> bool:
        return self.rotation == Rotation.DEG_90


@dataclass(frozen=True)
class SheetLayout:
    """Placements on one opened sheet instance.

    Attributes:
        sheet_id: Instance id, ``<stock id>:<n>``.
        stock_id: Id of the StockSheetSpec this sheet was cut from.
        index: Zero-based position of this sheet in the result.
        length: Sheet length (y axis).
        width: Sheet width (x axis).
        kerf: Blade kerf used on this sheet.
        placements: Placed parts.
        offcuts: Leftover free rectangles (real extents).
        cuts: Guillotine cuts made on this sheet.
    """

    sheet_id: str
    stock_id: str
    index: int
    length: float
    width: float
    placements: tuple[Placement, ...]
    kerf: float = 0.0
    offcuts: tuple[FreeRect, ...] = ()
    cuts: tuple[CutLine, ...] = ()

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError("Sheet index must be non-negative")

    @property
    def area(self) -> float:
        return self.length * self.width

    @property
    def used_area(self) -> float:
        """Total area covered by placed parts."""
        return sum(p.area for p in self.placements)

    @property
    def waste_area(self) -> float:
        return self.area - self.used_area

    @property
    def piece_count(self) -> int:
        return len(self.placements)

    @property
    def bounding_area(self) -> float:
        """Area of the bounding box of all placements, anchored at the origin."""
        if not self.placements:
            return 0.0
        max_x = max(p.right_edge for p in self.placements)
        max_y = max(p.bottom_edge for p in self.placements)
        return max_x * max_y


@dataclass(frozen=True)
class EdgingRequirement:
    """Edge banding length needed for one edging thickness."""

    thickness_mm: int
    length_mm: float


@dataclass(frozen=True)
class LayoutStats:
    """Aggregate material statistics for a layout."""

    used_area_mm2: float = 0.0
    waste_area_mm2: float = 0.0
    cuts: int = 0
    cut_length_mm: float = 0.0
    edgebanding_length_mm: float = 0.0
    edgebanding_16mm_mm: float = 0.0
    edgebanding_32mm_mm: float = 0.0
    edging_by_thickness: tuple[EdgingRequirement, ...] = ()


class UnplacedReason(str, Enum):
    """Why part units could not be placed."""

    TOO_LARGE_FOR_SHEET = "too_large_for_sheet"
    INSUFFICIENT_SHEET_CAPACITY = "insufficient_sheet_capacity"


@dataclass(frozen=True)
class UnplacedPart:
    """Units of one part spec that were not placed."""

    part: PartSpec
    count: int
    reason: UnplacedReason

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError("Unplaced count must be at least 1")


@dataclass(frozen=True)
class LayoutResult:
    """Complete output of a packing run.

    Attributes:
        sheets: Opened sheets in the order they were opened.
        stats: Area, cut and edge-banding statistics.
        unplaced: Parts that could not be placed, grouped per spec.
        algorithm: Packer that produced the layout.
        strategy_used: Sort strategy (or annealing summary) that won.
    """

    sheets: tuple[SheetLayout, ...]
    stats: LayoutStats
    unplaced: tuple[UnplacedPart, ...] = ()
    algorithm: PackingAlgorithm = PackingAlgorithm.GUILLOTINE
    strategy_used: str | None = None

    @property
    def sheet_count(self) -> int:
        return len(self.sheets)

    @property
    def placed_count(self) -> int:
        return sum(sheet.piece_count for sheet in self.sheets)

    @property
    def unplaced_count(self) -> int:
        return sum(u.count for u in self.unplaced)

    @property
    def is_complete(self) -> bool:
        """True if every requested unit was placed."""
        return not self.unplaced

    @property
    def total_sheet_area(self) -> float:
        return sum(sheet.area for sheet in self.sheets)

    @property
    def yield_ratio(self) -> float:
        """Used area divided by the area of all sheets used."""
        total = self.total_sheet_area
        if total == 0:
            return 0.0
        return self.stats.used_area_mm2 / total

    @property
    def offcuts(self) -> tuple[FreeRect, ...]:
        return tuple(rect for sheet in self.sheets for rect in sheet.offcuts)

    @property
    def largest_offcut_area(self) -> float:
        return max((rect.area for rect in self.offcuts), default=0.0)

    @property
    def offcut_concentration(self) -> float:
        """Largest offcut area divided by total waste (1.0 when nothing is wasted)."""
        waste = self.stats.waste_area_mm2
        if waste <= 0:
            return 1.0
        return min(1.0, self.largest_offcut_area / waste)

    @property
    def fragment_count(self) -> int:
        return len(self.offcuts)

    def usable_offcuts(self, min_dimension: float, min_area: float) -> tuple[FreeRect, ...]:
        """Offcuts large enough to be worth keeping."""
        return tuple(
            rect
            for rect in self.offcuts
            if rect.short_side >= min_dimension and rect.area >= min_area
        )
