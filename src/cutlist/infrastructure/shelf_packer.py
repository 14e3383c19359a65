"""Legacy shelf packer.

The shelf algorithm creates horizontal bands (shelves) down the sheet.
Each shelf's height is set by the first unit placed on it and units are
placed left-to-right within a shelf. Every layout it produces is
guillotine-compatible: shelves are separated by full-width cuts and units
within a shelf by full-height cuts.

Kept next to the guillotine packer so both heuristics can be compared on
the same input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from cutlist.domain.value_objects import (
    CutLine,
    CutOrientation,
    ExpandedPart,
    FreeRect,
    LayoutResult,
    PackingAlgorithm,
    PackOptions,
    Placement,
    SheetLayout,
    StockSheetSpec,
    UnplacedReason,
)
from cutlist.infrastructure.accounting import build_result
from cutlist.infrastructure.sheet_pool import (
    Orientation,
    SheetPool,
    allowed_orientations,
)

logger = logging.getLogger(__name__)

# A shelf is skipped for a unit that would leave more than this share of
# its height empty, unless the shelf is already well filled.
_MAX_HEIGHT_WASTE_RATIO = 0.7
_MIN_WIDTH_USAGE = 0.3


@dataclass
class _Shelf:
    """Horizontal band on a sheet where units are placed left-to-right.

    Attributes:
        y: Top edge of the shelf.
        height: Height of the shelf (set by the first unit placed).
        remaining_width: Width remaining for more units.
        placements: Units placed on this shelf.
    """

    y: float
    height: float
    remaining_width: float
    placements: list[Placement] = field(default_factory=list)


@dataclass
class _SheetState:
    """State of one open sheet during shelf packing.

    Attributes:
        stock: Stock type the sheet was cut from.
        sheet_id: Instance id.
        index: Sheet index (0-based).
        shelves: Shelves on this sheet, top to bottom.
        current_y: Y position for the next new shelf.
    """

    stock: StockSheetSpec
    sheet_id: str
    index: int
    shelves: list[_Shelf] = field(default_factory=list)
    current_y: float = 0.0

    @property
    def available_height(self) -> float:
        """Remaining height for new shelves."""
        return self.stock.length_mm - self.current_y


class ShelfPacker:
    """Shelf-based packer with the same contract as the guillotine packer.

    Attributes:
        stock: Stock sheet types, in the order they are opened.
        options: Packing options.
    """

    def __init__(self, stock: Sequence[StockSheetSpec], options: PackOptions | None = None) -> None:
        self.stock = tuple(stock)
        self.options = options or PackOptions()

    def pack(
        self,
        units: Sequence[ExpandedPart],
        strategy_used: str | None = None,
    ) -> LayoutResult:
        """Pack units in the given order onto shelves.

        Tries every existing shelf on every open sheet before starting a new
        shelf, and every open sheet before opening a new one.

        Args:
            units: Units to place, already sorted by the caller.
            strategy_used: Label recorded on the result.

        Returns:
            LayoutResult with every unit either placed or reported unplaced.

        Raises:
            ValueError: If no stock is given or every stock type has zero quantity.
        """
        pool = SheetPool(self.stock, single_sheet_only=self.options.single_sheet_only)
        sheets: list[_SheetState] = []
        unplaced: list[tuple[ExpandedPart, UnplacedReason]] = []

        logger.debug("Shelf packing %d units", len(units))

        for unit in units:
            orientations = allowed_orientations(unit, self.options.allow_rotation)
            if not pool.fits_any_type(orientations):
                unplaced.append((unit, UnplacedReason.TOO_LARGE_FOR_SHEET))
                continue

            if self._place_on_existing_shelf(unit, orientations, sheets):
                continue
            if self._place_on_new_shelf(unit, orientations, sheets):
                continue

            opened = pool.open_for(orientations)
            if opened is None:
                unplaced.append((unit, pool.unplaced_reason(orientations)))
                continue
            stock, sheet_id = opened
            sheet = _SheetState(stock=stock, sheet_id=sheet_id, index=len(sheets))
            sheets.append(sheet)
            if not self._place_on_new_shelf(unit, orientations, [sheet]):
                raise RuntimeError(f"Unit '{unit.uid}' does not fit a fresh sheet {sheet_id}")

        layouts = [self._to_layout(sheet) for sheet in sheets]
        return build_result(
            layouts,
            units,
            unplaced,
            PackingAlgorithm.LEGACY,
            strategy_used=strategy_used,
        )

    def _place_on_existing_shelf(
        self,
        unit: ExpandedPart,
        orientations: Sequence[Orientation],
        sheets: Sequence[_SheetState],
    ) -> bool:
        """Place a unit on the existing shelf that wastes the least height."""
        best: tuple[_Shelf, Orientation, float, float] | None = None

        for sheet in sheets:
            kerf = sheet.stock.kerf_mm
            for shelf in sheet.shelves:
                orientation = self._fits_on_shelf(orientations, shelf, kerf)
                if orientation is None:
                    continue
                height_waste = shelf.height - orientation.h
                waste_ratio = height_waste / shelf.height if shelf.height > 0 else 0
                width_usage = 1 - (shelf.remaining_width / sheet.stock.width_mm)
                if waste_ratio >= _MAX_HEIGHT_WASTE_RATIO and width_usage <= _MIN_WIDTH_USAGE:
                    continue
                if best is None or height_waste < best[2]:
                    best = (shelf, orientation, height_waste, kerf)

        if best is None:
            return False

        shelf, orientation, _, kerf = best
        self._place_on_shelf(unit, shelf, orientation, kerf)
        return True

    def _place_on_new_shelf(
        self,
        unit: ExpandedPart,
        orientations: Sequence[Orientation],
        sheets: Sequence[_SheetState],
    ) -> bool:
        """Start a new shelf on the sheet with the most free height."""
        for sheet in sorted(sheets, key=lambda s: s.available_height, reverse=True):
            for orientation in orientations:
                if (
                    orientation.h <= sheet.available_height
                    and orientation.w <= sheet.stock.width_mm
                ):
                    kerf = sheet.stock.kerf_mm
                    shelf = _Shelf(
                        y=sheet.current_y,
                        height=orientation.h,
                        remaining_width=sheet.stock.width_mm,
                    )
                    sheet.shelves.append(shelf)
                    sheet.current_y += orientation.h + kerf
                    self._place_on_shelf(unit, shelf, orientation, kerf)
                    return True
        return False

    def _fits_on_shelf(
        self,
        orientations: Sequence[Orientation],
        shelf: _Shelf,
        kerf: float,
    ) -> Orientation | None:
        """Return the first orientation that fits on the shelf, if any."""
        gap = kerf if shelf.placements else 0.0
        for orientation in orientations:
            if orientation.h <= shelf.height and orientation.w + gap <= shelf.remaining_width:
                return orientation
        return None

    def _place_on_shelf(
        self,
        unit: ExpandedPart,
        shelf: _Shelf,
        orientation: Orientation,
        kerf: float,
    ) -> None:
        """Place a unit at the next free position on a shelf."""
        if shelf.placements:
            x = shelf.placements[-1].right_edge + kerf
            shelf.remaining_width -= orientation.w + kerf
        else:
            x = 0.0
            shelf.remaining_width -= orientation.w

        placement = Placement(
            part_id=unit.part_id,
            label=unit.uid,
            x=x,
            y=shelf.y,
            w=orientation.w,
            h=orientation.h,
            rotation=orientation.rotation,
        )
        shelf.placements.append(placement)

        if placement.is_rotated:
            logger.debug(
                "Unit '%s' placed rotated at (%s, %s), placed dimensions: %sx%s",
                unit.uid,
                x,
                shelf.y,
                placement.w,
                placement.h,
            )

    def _to_layout(self, sheet: _SheetState) -> SheetLayout:
        """Freeze a sheet, deriving cuts and offcuts from its shelves."""
        width = sheet.stock.width_mm
        length = sheet.stock.length_mm
        kerf = sheet.stock.kerf_mm
        placements: list[Placement] = []
        cuts: list[CutLine] = []
        offcuts: list[FreeRect] = []

        for shelf in sheet.shelves:
            placements.extend(shelf.placements)
            bottom = shelf.y + shelf.height
            if bottom < length:
                cuts.append(CutLine(CutOrientation.HORIZONTAL, bottom, 0.0, width))

            for placement in shelf.placements:
                if placement.right_edge < width:
                    cuts.append(
                        CutLine(CutOrientation.VERTICAL, placement.right_edge, shelf.y, bottom)
                    )
                gap = shelf.height - placement.h - kerf
                if placement.h < shelf.height:
                    cuts.append(
                        CutLine(
                            CutOrientation.HORIZONTAL,
                            placement.bottom_edge,
                            placement.x,
                            placement.right_edge,
                        )
                    )
                if gap > 0:
                    offcuts.append(
                        FreeRect(placement.x, placement.bottom_edge + kerf, placement.w, gap)
                    )

            last_right = shelf.placements[-1].right_edge
            strip = width - last_right - kerf
            if strip > 0:
                offcuts.append(FreeRect(last_right + kerf, shelf.y, strip, shelf.height))

        remaining = length - sheet.current_y
        if remaining > 0:
            offcuts.append(FreeRect(0.0, sheet.current_y, width, remaining))

        layout = SheetLayout(
            sheet_id=sheet.sheet_id,
            stock_id=sheet.stock.id,
            index=sheet.index,
            length=length,
            width=width,
            kerf=kerf,
            placements=tuple(placements),
            offcuts=tuple(offcuts),
            cuts=tuple(cuts),
        )
        logger.debug(
            "Sheet %s: %d pieces on %d shelves, %.1f%% waste",
            sheet.sheet_id,
            layout.piece_count,
            len(sheet.shelves),
            layout.waste_area / layout.area * 100,
        )
        return layout


def pack_shelves(
    units: Sequence[ExpandedPart],
    stock: Sequence[StockSheetSpec],
    options: PackOptions | None = None,
    strategy_used: str | None = None,
) -> LayoutResult:
    """Pack units in the given order with the legacy shelf packer."""
    return ShelfPacker(stock, options).pack(units, strategy_used=strategy_used)
