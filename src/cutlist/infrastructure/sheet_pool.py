"""Orientation rules and stock sheet inventory shared by the packers."""

from __future__ import annotations

import logging
from typing import NamedTuple, Sequence

from cutlist.domain.value_objects import (
    ExpandedPart,
    GrainOrientation,
    Rotation,
    StockSheetSpec,
    UnplacedReason,
)

logger = logging.getLogger(__name__)


class Orientation(NamedTuple):
    """A legal way to place a unit: rotation plus extents along x and y."""

    rotation: Rotation
    w: float
    h: float


def allowed_orientations(unit: ExpandedPart, allow_rotation: bool) -> list[Orientation]:
    """Return the orientations a unit may be placed in.

    Grain ``length`` keeps the part length along the sheet length (0 degrees)
    and grain ``width`` turns it across the sheet (90 degrees), whatever the
    rotation setting. Grain-free parts get both orientations when rotation
    is allowed, except squares, where rotating changes nothing.

    Args:
        unit: Unit to orient.
        allow_rotation: Whether grain-free parts may be rotated.

    Returns:
        Orientations in preference order, the upright one first.
    """
    length = unit.length_mm
    width = unit.width_mm
    upright = Orientation(Rotation.DEG_0, width, length)
    turned = Orientation(Rotation.DEG_90, length, width)

    if unit.grain == GrainOrientation.LENGTH:
        return [upright]
    if unit.grain == GrainOrientation.WIDTH:
        return [turned]
    if allow_rotation and length != width:
        return [upright, turned]
    return [upright]


def fits_sheet(orientation: Orientation, sheet: StockSheetSpec) -> bool:
    """Check whether an oriented unit fits an empty sheet."""
    return orientation.w <= sheet.width_mm and orientation.h <= sheet.length_mm


class SheetPool:
    """Tracks how many sheets of each stock type remain to be opened.

    Sheets are opened lazily in declared order: the first stock type with
    remaining quantity that can hold the unit wins.

    Attributes:
        stock: Available stock sheet types, in declared order.
        single_sheet_only: Refuse to open more than one sheet.
    """

    def __init__(self, stock: Sequence[StockSheetSpec], single_sheet_only: bool = False) -> None:
        """Initialize the pool.

        Args:
            stock: Stock sheet types available for the run.
            single_sheet_only: Open at most one sheet in total.

        Raises:
            ValueError: If no stock is given or every type has zero quantity.
        """
        if not stock:
            raise ValueError("At least one stock sheet type is required")
        if sum(sheet.qty for sheet in stock) == 0:
            raise ValueError("Every stock sheet type has zero quantity")

        self.stock = tuple(stock)
        self.single_sheet_only = single_sheet_only
        self._remaining = [sheet.qty for sheet in self.stock]
        self._opened_per_type = [0] * len(self.stock)
        self.opened = 0

    def fits_any_type(self, orientations: Sequence[Orientation]) -> bool:
        """True if some stock type could hold the unit, ignoring quantities."""
        return any(
            fits_sheet(orientation, sheet)
            for sheet in self.stock
            for orientation in orientations
        )

    def open_for(self, orientations: Sequence[Orientation]) -> tuple[StockSheetSpec, str] | None:
        """Open a new sheet able to hold the unit.

        Args:
            orientations: Legal orientations of the unit.

        Returns:
            The stock type and the new sheet instance id, or None if no
            stock type with remaining quantity can hold the unit.
        """
        if self.single_sheet_only and self.opened >= 1:
            return None

        for i, sheet in enumerate(self.stock):
            if self._remaining[i] <= 0:
                continue
            if not any(fits_sheet(o, sheet) for o in orientations):
                continue
            self._remaining[i] -= 1
            self._opened_per_type[i] += 1
            self.opened += 1
            sheet_id = f"{sheet.id}:{self._opened_per_type[i]}"
            logger.debug("Opened sheet %s (%d of this type left)", sheet_id, self._remaining[i])
            return sheet, sheet_id

        return None

    def unplaced_reason(self, orientations: Sequence[Orientation]) -> UnplacedReason:
        """Classify why a unit could not be placed."""
        if not self.fits_any_type(orientations):
            return UnplacedReason.TOO_LARGE_FOR_SHEET
        return UnplacedReason.INSUFFICIENT_SHEET_CAPACITY
