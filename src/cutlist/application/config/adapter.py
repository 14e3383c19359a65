"""Conversion from validated job configuration to domain objects."""

from __future__ import annotations

from cutlist.application.config.schema import (
    AnnealingConfig,
    CutlistConfiguration,
    PartConfig,
    SheetConfig,
)
from cutlist.domain.value_objects import (
    BandEdges,
    PackingConfig,
    PackOptions,
    PartSpec,
    StockSheetSpec,
)
from cutlist.infrastructure.annealing import AnnealingSchedule, MoveOptions


def _part_config_to_spec(part: PartConfig) -> PartSpec:
    edges = part.band_edges
    return PartSpec(
        id=part.id,
        length_mm=part.length_mm,
        width_mm=part.width_mm,
        qty=part.qty,
        grain=part.grain,
        band_edges=BandEdges(
            top=edges.top, right=edges.right, bottom=edges.bottom, left=edges.left
        ),
        lamination_type=part.lamination_type,
        lamination_layers=part.lamination_layers,
        label=part.label,
    )


def _sheet_config_to_spec(sheet: SheetConfig) -> StockSheetSpec:
    return StockSheetSpec(
        id=sheet.id,
        length_mm=sheet.length_mm,
        width_mm=sheet.width_mm,
        qty=sheet.qty,
        kerf_mm=sheet.kerf_mm,
        material=sheet.material,
    )


def config_to_parts(config: CutlistConfiguration) -> list[PartSpec]:
    """Convert configured parts to PartSpec objects, in file order."""
    return [_part_config_to_spec(part) for part in config.parts]


def config_to_sheets(config: CutlistConfiguration) -> list[StockSheetSpec]:
    """Convert configured sheets to StockSheetSpec objects, in file order."""
    return [_sheet_config_to_spec(sheet) for sheet in config.sheets]


def config_to_options(config: CutlistConfiguration) -> PackOptions:
    """Convert the options section to PackOptions.

    The ``optimize`` flag is not part of PackOptions; callers read it from
    ``config.options`` to choose between single and multi-strategy packing.
    ``waste_aware`` turns on a PackingConfig whose sliver threshold is the
    job's minimum usable dimension.
    """
    options = config.options
    return PackOptions(
        allow_rotation=options.allow_rotation,
        algorithm=options.algorithm,
        strategy=options.strategy,
        single_sheet_only=options.single_sheet_only,
        min_usable_dimension=options.min_usable_dimension,
        min_usable_area=options.min_usable_area,
        placement=(
            PackingConfig(
                min_usable_dimension=options.min_usable_dimension,
                preferred_min_dimension=max(300.0, options.min_usable_dimension),
            )
            if options.waste_aware
            else None
        ),
    )


def config_to_annealing(
    config: CutlistConfiguration | AnnealingConfig,
) -> tuple[AnnealingSchedule, MoveOptions]:
    """Convert the annealing section to a schedule and move weights.

    Args:
        config: Full configuration, or just its annealing section.

    Returns:
        Tuple of (AnnealingSchedule, MoveOptions).
    """
    annealing = config.annealing if isinstance(config, CutlistConfiguration) else config
    schedule = AnnealingSchedule(
        t_start=annealing.t_start,
        t_end=annealing.t_end,
        progress_interval_ms=annealing.progress_interval_ms,
        seed=annealing.seed,
    )
    moves = MoveOptions(
        swap=annealing.moves.swap,
        insert=annealing.moves.insert,
        reverse=annealing.moves.reverse,
        rotate=annealing.moves.rotate,
        block_swap=annealing.moves.block_swap,
        promote=annealing.moves.promote,
    )
    return schedule, moves
