"""Scalar quality scores for ranking layouts.

Higher is better. Both variants charge a fixed penalty per sheet that is
larger than the combined range of every other term, so a layout with
fewer sheets always outscores one with more. Within a sheet count the
scores reward concentrating waste into one large offcut over scattering
it across many small fragments.
"""

from __future__ import annotations

from cutlist.domain.value_objects import LayoutResult

SHEET_PENALTY = 10_000.0
SHEET_PENALTY_V2 = 100_000.0

_MAX_FRAGMENT_PENALTY = 20.0
_MAX_FRAGMENTS_V2 = 100


def _concentration(result: LayoutResult, waste: float) -> float:
    """Largest offcut share of the waste, 1.0 when nothing is wasted."""
    if waste <= 0:
        return 1.0
    return min(1.0, result.largest_offcut_area / waste)


def _check_area(sheet_area: float) -> None:
    if sheet_area <= 0:
        raise ValueError("Sheet area must be positive")


def score(result: LayoutResult, sheet_area: float) -> float:
    """Score a layout.

    ``-10000 * sheets + utilisation% + 0.5 * largest-offcut%
    + 20 * concentration - min(2 * fragments, 20)``

    Args:
        result: Layout to score.
        sheet_area: Area of one sheet.

    Returns:
        The score.

    Raises:
        ValueError: If sheet_area is not positive.
    """
    _check_area(sheet_area)
    sheets = result.sheet_count
    total_area = sheet_area * sheets
    used = result.stats.used_area_mm2
    waste = total_area - used

    utilisation = used / total_area * 100 if total_area else 0.0
    largest_pct = result.largest_offcut_area / sheet_area * 100
    fragments = min(2.0 * result.fragment_count, _MAX_FRAGMENT_PENALTY)

    return (
        -SHEET_PENALTY * sheets
        + utilisation
        + 0.5 * largest_pct
        + 20.0 * _concentration(result, waste)
        - fragments
    )


def score_v2(result: LayoutResult, sheet_area: float) -> float:
    """Score a layout with explicit weight on offcut quality.

    ``-100000 * sheets + 500 * largest-offcut% + 300 * concentration%
    - 50 * mean bounding-box% + utilisation% - 20 * min(fragments, 100)``

    The bounding-box term favours layouts that keep parts packed toward
    the sheet origin, leaving the remainder in one piece.

    Args:
        result: Layout to score.
        sheet_area: Area of one sheet.

    Returns:
        The score.

    Raises:
        ValueError: If sheet_area is not positive.
    """
    _check_area(sheet_area)
    sheets = result.sheet_count
    total_area = sheet_area * sheets
    used = result.stats.used_area_mm2
    waste = total_area - used

    utilisation = used / total_area * 100 if total_area else 0.0
    largest_pct = result.largest_offcut_area / sheet_area * 100
    concentration_pct = _concentration(result, waste) * 100
    if sheets:
        bbox_pct = (
            sum(sheet.bounding_area for sheet in result.sheets) / sheets / sheet_area * 100
        )
    else:
        bbox_pct = 0.0
    fragments = min(result.fragment_count, _MAX_FRAGMENTS_V2)

    return (
        -SHEET_PENALTY_V2 * sheets
        + 500.0 * largest_pct
        + 300.0 * concentration_pct
        - 50.0 * bbox_pct
        + utilisation
        - 20.0 * fragments
    )
