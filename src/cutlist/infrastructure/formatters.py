"""Output formatters for layout results."""

from __future__ import annotations

import json
from typing import Any

from cutlist.domain.value_objects import LayoutResult, PackOptions, SheetLayout


class LayoutReportFormatter:
    """Formats a layout result as a plain-text report.

    The report has one placement table per sheet, followed by material
    statistics and any unplaced parts.
    """

    def __init__(self, options: PackOptions | None = None, show_cuts: bool = False) -> None:
        """Initialize formatter.

        Args:
            options: Options the layout was packed with, used for the
                usable-offcut thresholds.
            show_cuts: Whether to list every cut per sheet.
        """
        self._options = options or PackOptions()
        self._show_cuts = show_cuts

    def format(self, result: LayoutResult) -> str:
        """Format the full report."""
        lines = [
            "CUTTING LAYOUT",
            "=" * 70,
            f"Algorithm: {result.algorithm.value}",
            f"Strategy:  {result.strategy_used or '-'}",
            f"Sheets:    {result.sheet_count}",
            "",
        ]

        if not result.sheets:
            lines.append("No sheets used.")
            lines.append("")

        for sheet in result.sheets:
            lines.extend(self._format_sheet(sheet))
            lines.append("")

        lines.extend(self._format_stats(result))

        if result.unplaced:
            lines.append("")
            lines.extend(self._format_unplaced(result))

        return "\n".join(lines)

    def _format_sheet(self, sheet: SheetLayout) -> list[str]:
        """Format the placement table of one sheet."""
        used_pct = sheet.used_area / sheet.area * 100
        lines = [
            f"SHEET {sheet.index + 1}: {sheet.sheet_id} "
            f"({sheet.length:g} x {sheet.width:g}, kerf {sheet.kerf:g})",
            "-" * 70,
            f"{'Part':<20} {'X':>8} {'Y':>8} {'W':>8} {'H':>8} {'Rot':>5}",
            "-" * 70,
        ]
        for p in sheet.placements:
            lines.append(
                f"{p.label or p.part_id:<20} {p.x:>8.1f} {p.y:>8.1f} "
                f"{p.w:>8.1f} {p.h:>8.1f} {int(p.rotation):>5}"
            )
        lines.append("-" * 70)
        lines.append(
            f"{sheet.piece_count} pieces, {used_pct:.1f}% used, "
            f"{len(sheet.offcuts)} offcuts, {len(sheet.cuts)} cuts"
        )

        if self._show_cuts:
            for cut in sheet.cuts:
                lines.append(
                    f"  {cut.orientation.value:<10} at {cut.position:>8.1f} "
                    f"from {cut.start:>8.1f} to {cut.end:>8.1f}"
                )

        return lines

    def _format_stats(self, result: LayoutResult) -> list[str]:
        """Format aggregate statistics."""
        stats = result.stats
        usable = result.usable_offcuts(
            self._options.min_usable_dimension, self._options.min_usable_area
        )
        lines = [
            "STATISTICS",
            "=" * 70,
            f"{'Used area:':<28} {stats.used_area_mm2:>16,.0f} mm2",
            f"{'Waste area:':<28} {stats.waste_area_mm2:>16,.0f} mm2",
            f"{'Yield:':<28} {result.yield_ratio * 100:>15.1f}%",
            f"{'Cuts:':<28} {stats.cuts:>16}",
            f"{'Cut length:':<28} {stats.cut_length_mm:>16,.0f} mm",
            f"{'Largest offcut:':<28} {result.largest_offcut_area:>16,.0f} mm2",
            f"{'Usable offcuts:':<28} {len(usable):>16}",
            f"{'Edge banding 16mm:':<28} {stats.edgebanding_16mm_mm:>16,.0f} mm",
            f"{'Edge banding 32mm:':<28} {stats.edgebanding_32mm_mm:>16,.0f} mm",
        ]
        for req in stats.edging_by_thickness:
            if req.thickness_mm > 32:
                label = f"Edge banding {req.thickness_mm}mm:"
                lines.append(f"{label:<28} {req.length_mm:>16,.0f} mm")
        return lines

    def _format_unplaced(self, result: LayoutResult) -> list[str]:
        """Format the list of parts that could not be placed."""
        lines = [
            "UNPLACED PARTS",
            "=" * 70,
            f"{'Part':<20} {'Size':<20} {'Qty':>5}  {'Reason'}",
            "-" * 70,
        ]
        for entry in result.unplaced:
            part = entry.part
            size = f"{part.length_mm:g} x {part.width_mm:g}"
            lines.append(
                f"{part.display_name:<20} {size:<20} {entry.count:>5}  {entry.reason.value}"
            )
        return lines


def layout_to_dict(result: LayoutResult, options: PackOptions | None = None) -> dict[str, Any]:
    """Convert a layout result to a JSON-compatible dictionary.

    Args:
        result: Layout to convert.
        options: Options the layout was packed with, for usable-offcut
            thresholds.

    Returns:
        Dictionary with sheets, stats, unplaced parts and offcut metrics.
    """
    options = options or PackOptions()
    stats = result.stats
    usable = result.usable_offcuts(options.min_usable_dimension, options.min_usable_area)

    return {
        "algorithm": result.algorithm.value,
        "strategy_used": result.strategy_used,
        "sheets": [
            {
                "sheet_id": sheet.sheet_id,
                "stock_id": sheet.stock_id,
                "index": sheet.index,
                "length": sheet.length,
                "width": sheet.width,
                "kerf": sheet.kerf,
                "used_area": sheet.used_area,
                "placements": [
                    {
                        "part_id": p.part_id,
                        "label": p.label,
                        "x": p.x,
                        "y": p.y,
                        "w": p.w,
                        "h": p.h,
                        "rotation": int(p.rotation),
                    }
                    for p in sheet.placements
                ],
                "offcuts": [
                    {"x": r.x, "y": r.y, "w": r.w, "h": r.h} for r in sheet.offcuts
                ],
                "cuts": [
                    {
                        "orientation": c.orientation.value,
                        "position": c.position,
                        "start": c.start,
                        "end": c.end,
                    }
                    for c in sheet.cuts
                ],
            }
            for sheet in result.sheets
        ],
        "stats": {
            "used_area_mm2": stats.used_area_mm2,
            "waste_area_mm2": stats.waste_area_mm2,
            "cuts": stats.cuts,
            "cut_length_mm": stats.cut_length_mm,
            "edgebanding_length_mm": stats.edgebanding_length_mm,
            "edgebanding_16mm_mm": stats.edgebanding_16mm_mm,
            "edgebanding_32mm_mm": stats.edgebanding_32mm_mm,
            "edging_by_thickness": [
                {"thickness_mm": e.thickness_mm, "length_mm": e.length_mm}
                for e in stats.edging_by_thickness
            ],
            "yield": result.yield_ratio,
            "largest_offcut_area": result.largest_offcut_area,
            "offcut_concentration": result.offcut_concentration,
            "fragment_count": result.fragment_count,
            "usable_offcuts": len(usable),
        },
        "unplaced": [
            {"part_id": u.part.id, "count": u.count, "reason": u.reason.value}
            for u in result.unplaced
        ],
    }


def layout_to_json(result: LayoutResult, options: PackOptions | None = None) -> str:
    """Serialize a layout result as indented JSON."""
    return json.dumps(layout_to_dict(result, options), indent=2)
