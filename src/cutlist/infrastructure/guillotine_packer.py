"""Free-rectangle guillotine packer.

Each open sheet owns a list of free rectangles. Units are placed in the
order given: the best-short-side-fit rectangle is chosen across every open
sheet and every legal orientation, the unit goes to that rectangle's
origin, and the remainder is split by one guillotine cut into at most two
new free rectangles.

Free rectangles are kerf-inclusive. A sheet starts with one rectangle of
``width + kerf`` by ``length + kerf`` and every unit is inflated by the
kerf when tested, so a unit may sit flush against a sheet edge while
neighbours stay one kerf apart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from cutlist.domain.value_objects import (
    CutLine,
    CutOrientation,
    ExpandedPart,
    FreeRect,
    LayoutResult,
    PackingAlgorithm,
    PackingConfig,
    PackOptions,
    Placement,
    Rotation,
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


@dataclass
class _SheetState:
    """Mutable state of one open sheet, owned by the packer.

    Attributes:
        stock: Stock type the sheet was cut from.
        sheet_id: Instance id, ``<stock id>:<n>``.
        index: Position of the sheet in opening order.
        free: Kerf-inclusive free rectangles.
        placements: Units placed so far.
        cuts: Guillotine cuts made so far.
    """

    stock: StockSheetSpec
    sheet_id: str
    index: int
    free: list[FreeRect] = field(default_factory=list)
    placements: list[Placement] = field(default_factory=list)
    cuts: list[CutLine] = field(default_factory=list)

    @classmethod
    def open(cls, stock: StockSheetSpec, sheet_id: str, index: int) -> _SheetState:
        kerf = stock.kerf_mm
        root = FreeRect(0.0, 0.0, stock.width_mm + kerf, stock.length_mm + kerf)
        return cls(stock=stock, sheet_id=sheet_id, index=index, free=[root])

    @property
    def kerf(self) -> float:
        return self.stock.kerf_mm

    def to_layout(self) -> SheetLayout:
        """Freeze the sheet, reporting free rectangles at their real extent."""
        kerf = self.kerf
        offcuts = tuple(
            FreeRect(rect.x, rect.y, rect.w - kerf, rect.h - kerf) for rect in self.free
        )
        return SheetLayout(
            sheet_id=self.sheet_id,
            stock_id=self.stock.id,
            index=self.index,
            length=self.stock.length_mm,
            width=self.stock.width_mm,
            kerf=kerf,
            placements=tuple(self.placements),
            offcuts=offcuts,
            cuts=tuple(self.cuts),
        )


@dataclass(frozen=True)
class _Fit:
    """A candidate position for a unit."""

    sheet: _SheetState
    rect_index: int
    orientation: Orientation
    score: float
    long_side: float

    @property
    def key(self) -> tuple[float, float]:
        return (self.score, self.long_side)


class GuillotinePacker:
    """Best-short-side-fit guillotine packer over lazily opened sheets.

    Attributes:
        stock: Stock sheet types, in the order they are opened.
        options: Packing options (rotation, single-sheet mode).
    """

    def __init__(self, stock: Sequence[StockSheetSpec], options: PackOptions | None = None) -> None:
        """Initialize the packer.

        Args:
            stock: Available stock sheet types.
            options: Packing options, defaults to PackOptions().
        """
        self.stock = tuple(stock)
        self.options = options or PackOptions()

    def pack(
        self,
        units: Sequence[ExpandedPart],
        preferences: Mapping[str, Rotation] | None = None,
        strategy_used: str | None = None,
    ) -> LayoutResult:
        """Place units in the given order.

        Args:
            units: Units to place, already sorted by the caller.
            preferences: Optional preferred rotation per unit id. A unit
                with a preference is placed in that orientation whenever
                an open sheet can take it that way, and falls back to its
                other legal orientation otherwise.
            strategy_used: Label recorded on the result.

        Returns:
            LayoutResult with every unit either placed or reported unplaced.

        Raises:
            ValueError: If no stock is given or every stock type has zero quantity.
        """
        pool = SheetPool(self.stock, single_sheet_only=self.options.single_sheet_only)
        preferences = preferences or {}
        sheets: list[_SheetState] = []
        unplaced: list[tuple[ExpandedPart, UnplacedReason]] = []

        logger.debug("Packing %d units onto %d stock types", len(units), len(self.stock))

        for unit in units:
            orientations = allowed_orientations(unit, self.options.allow_rotation)
            groups = _preference_groups(orientations, preferences.get(unit.uid))

            if not pool.fits_any_type(orientations):
                logger.debug("Unit '%s' is larger than every stock type", unit.uid)
                unplaced.append((unit, UnplacedReason.TOO_LARGE_FOR_SHEET))
                continue

            fit = self._find_fit(sheets, groups)
            if fit is None:
                opened = pool.open_for(groups[0]) or pool.open_for(orientations)
                if opened is None:
                    logger.debug("No stock left for unit '%s'", unit.uid)
                    unplaced.append((unit, pool.unplaced_reason(orientations)))
                    continue
                stock, sheet_id = opened
                sheet = _SheetState.open(stock, sheet_id, len(sheets))
                sheets.append(sheet)
                fit = self._find_fit([sheet], groups)
                if fit is None:
                    raise RuntimeError(f"Unit '{unit.uid}' does not fit a fresh sheet {sheet_id}")

            self._place(unit, fit)

        layouts = [sheet.to_layout() for sheet in sheets]
        for layout in layouts:
            logger.debug(
                "Sheet %s: %d pieces, %d offcuts, %d cuts",
                layout.sheet_id,
                layout.piece_count,
                len(layout.offcuts),
                len(layout.cuts),
            )

        return build_result(
            layouts,
            units,
            unplaced,
            PackingAlgorithm.GUILLOTINE,
            strategy_used=strategy_used,
        )

    def _find_fit(
        self,
        sheets: Sequence[_SheetState],
        groups: Sequence[Sequence[Orientation]],
    ) -> _Fit | None:
        """Find the best fit, trying orientation groups in order."""
        for group in groups:
            fit = self._best_fit(sheets, group)
            if fit is not None:
                return fit
        return None

    def _best_fit(
        self,
        sheets: Sequence[_SheetState],
        orientations: Sequence[Orientation],
    ) -> _Fit | None:
        """Best-short-side fit across all sheets and orientations.

        With ``options.placement`` set, candidates are ranked by
        placement_score instead of the bare short side. Ties keep the
        earliest sheet, orientation and rectangle.
        """
        config = self.options.placement
        best: _Fit | None = None
        for sheet in sheets:
            kerf = sheet.kerf
            for orientation in orientations:
                need_w = orientation.w + kerf
                need_h = orientation.h + kerf
                for i, rect in enumerate(sheet.free):
                    dw = rect.w - need_w
                    dh = rect.h - need_h
                    if dw < 0 or dh < 0:
                        continue
                    if config is None:
                        score = min(dw, dh)
                    else:
                        score = placement_score(rect, dw, dh, kerf, config)
                    candidate = _Fit(sheet, i, orientation, score, max(dw, dh))
                    if best is None or candidate.key < best.key:
                        best = candidate
        return best

    def _place(self, unit: ExpandedPart, fit: _Fit) -> None:
        """Place a unit at the fit's rectangle origin and split the remainder."""
        sheet = fit.sheet
        rect = sheet.free.pop(fit.rect_index)
        orientation = fit.orientation

        placement = Placement(
            part_id=unit.part_id,
            label=unit.uid,
            x=rect.x,
            y=rect.y,
            w=orientation.w,
            h=orientation.h,
            rotation=orientation.rotation,
        )
        sheet.placements.append(placement)

        remainders, cuts = split_free_rect(rect, orientation.w, orientation.h, sheet.kerf)
        sheet.free.extend(remainders)
        sheet.cuts.extend(cuts)

        logger.debug(
            "Placed '%s' on %s at (%s, %s) as %sx%s, rotation %d",
            unit.uid,
            sheet.sheet_id,
            placement.x,
            placement.y,
            placement.w,
            placement.h,
            int(placement.rotation),
        )


def _preference_groups(
    orientations: Sequence[Orientation],
    preferred: Rotation | None,
) -> list[list[Orientation]]:
    """Group orientations by preference.

    Without a usable preference all orientations compete in one group.
    """
    if preferred is None or len(orientations) < 2:
        return [list(orientations)]
    first = [o for o in orientations if o.rotation == preferred]
    rest = [o for o in orientations if o.rotation != preferred]
    if not first:
        return [rest]
    return [first, rest]


def placement_score(
    rect: FreeRect,
    dw: float,
    dh: float,
    kerf: float,
    config: PackingConfig,
) -> float:
    """Score a candidate position with waste-aware penalties; lower is better.

    Args:
        rect: Kerf-inclusive free rectangle the unit would go into.
        dw: Kerf-inclusive leftover along x.
        dh: Kerf-inclusive leftover along y.
        kerf: Blade kerf of the sheet.
        config: Penalty and bonus settings.

    Returns:
        The short real leftover, adjusted by penalties and bonuses.
    """
    # Leftovers no wider than the kerf vanish into the cut.
    rem_w = dw - kerf if dw > kerf else 0.0
    rem_h = dh - kerf if dh > kerf else 0.0
    positive = [rem for rem in (rem_w, rem_h) if rem > 0]
    score = min(positive) if positive else 0.0

    if rem_w == 0 or rem_h == 0:
        score -= config.perfect_fit_bonus

    for rem in (rem_w, rem_h):
        if 0 < rem < config.min_usable_dimension:
            score += config.sliver_penalty
        elif config.min_usable_dimension <= rem < config.preferred_min_dimension:
            score += config.sub_optimal_penalty

    if rect.x == 0:
        score -= config.touching_bonus
    if rect.y == 0:
        score -= config.touching_bonus
    return score


def split_free_rect(
    rect: FreeRect,
    part_w: float,
    part_h: float,
    kerf: float,
) -> tuple[list[FreeRect], list[CutLine]]:
    """Split a free rectangle after placing a part at its origin.

    Two guillotine splits are possible. A horizontal split gives the full
    width to the remainder below the part; a vertical split gives the full
    height to the remainder right of the part. The split whose larger
    remainder is bigger wins, ties going to the horizontal split.

    Args:
        rect: Kerf-inclusive free rectangle the part was placed in.
        part_w: Placed part extent along x.
        part_h: Placed part extent along y.
        kerf: Blade kerf of the sheet.

    Returns:
        Tuple of (new free rectangles, cuts made). Remainders with no real
        extent are dropped.
    """
    used_w = part_w + kerf
    used_h = part_h + kerf
    right_w = rect.w - used_w
    below_h = rect.h - used_h

    horizontal_best = max(rect.w * below_h, right_w * used_h)
    vertical_best = max(right_w * rect.h, used_w * below_h)

    cuts: list[CutLine] = []
    if horizontal_best >= vertical_best:
        below = FreeRect(rect.x, rect.y + used_h, rect.w, below_h)
        right = FreeRect(rect.x + used_w, rect.y, right_w, used_h)
        if below_h > 0:
            cuts.append(_horizontal_cut(rect.y + part_h, rect.x, rect.x + rect.w - kerf))
        if right_w > 0:
            cuts.append(_vertical_cut(rect.x + part_w, rect.y, rect.y + part_h))
    else:
        right = FreeRect(rect.x + used_w, rect.y, right_w, rect.h)
        below = FreeRect(rect.x, rect.y + used_h, used_w, below_h)
        if right_w > 0:
            cuts.append(_vertical_cut(rect.x + part_w, rect.y, rect.y + rect.h - kerf))
        if below_h > 0:
            cuts.append(_horizontal_cut(rect.y + part_h, rect.x, rect.x + part_w))

    remainders = [r for r in (below, right) if r.w > kerf and r.h > kerf]
    return remainders, cuts


def _horizontal_cut(y: float, x_start: float, x_end: float) -> CutLine:
    return CutLine(CutOrientation.HORIZONTAL, position=y, start=x_start, end=x_end)


def _vertical_cut(x: float, y_start: float, y_end: float) -> CutLine:
    return CutLine(CutOrientation.VERTICAL, position=x, start=y_start, end=y_end)


def pack_guillotine(
    units: Sequence[ExpandedPart],
    stock: Sequence[StockSheetSpec],
    options: PackOptions | None = None,
    preferences: Mapping[str, Rotation] | None = None,
    strategy_used: str | None = None,
) -> LayoutResult:
    """Pack units in the given order with the guillotine packer."""
    return GuillotinePacker(stock, options).pack(
        units, preferences=preferences, strategy_used=strategy_used
    )
