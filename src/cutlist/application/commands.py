"""Application commands (use cases) for running cutlist jobs."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from cutlist.application.config import (
    CutlistConfiguration,
    config_to_annealing,
    config_to_options,
    config_to_parts,
    config_to_sheets,
)
from cutlist.domain.value_objects import LayoutResult, PackOptions
from cutlist.infrastructure.annealing import AnnealingProgress, pack_annealed
from cutlist.infrastructure.strategies import pack, pack_optimized

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobOverrides:
    """Command-line overrides applied on top of a job file.

    Unset fields keep the value from the job file.
    """

    algorithm: str | None = None
    strategy: str | None = None
    optimize: bool | None = None
    allow_rotation: bool | None = None
    waste_aware: bool | None = None
    anneal_ms: float | None = None
    seed: int | None = None


@dataclass(frozen=True)
class JobOutput:
    """Result of running a job.

    Attributes:
        result: The final layout.
        options: Packing options the job ran with.
        annealed: Whether the annealing pass ran.
    """

    result: LayoutResult
    options: PackOptions
    annealed: bool = False

    @property
    def exit_code(self) -> int:
        """0 when every part was placed, 2 otherwise."""
        return 0 if self.result.is_complete else 2


class PackJobCommand:
    """Runs a loaded job configuration through the packing pipeline.

    Single-strategy packing, multi-strategy optimization and the annealing
    refinement are selected from the job's options and any overrides.
    """

    def __init__(
        self,
        on_progress: Callable[[AnnealingProgress], None] | None = None,
        should_cancel: Callable[[], bool] | None = None,
    ) -> None:
        self.on_progress = on_progress
        self.should_cancel = should_cancel

    def execute(
        self,
        config: CutlistConfiguration,
        overrides: JobOverrides | None = None,
    ) -> JobOutput:
        """Execute the job.

        Args:
            config: Validated job configuration.
            overrides: Optional command-line overrides.

        Returns:
            JobOutput with the final layout.

        Raises:
            ValueError: If the overrides name an unknown algorithm or strategy.
        """
        config = _apply_overrides(config, overrides or JobOverrides())
        parts = config_to_parts(config)
        sheets = config_to_sheets(config)
        options = config_to_options(config)

        if config.annealing.enabled:
            schedule, moves = config_to_annealing(config)
            if len(sheets) > 1:
                logger.warning(
                    "Annealing uses only the first sheet type '%s'", sheets[0].id
                )
            result = pack_annealed(
                parts,
                sheets[0],
                config.annealing.time_budget_ms,
                schedule,
                moves,
                on_progress=self.on_progress,
                should_cancel=self.should_cancel,
                options=options,
            )
            return JobOutput(result=result, options=options, annealed=True)

        if config.options.optimize:
            result = pack_optimized(parts, sheets, options)
        else:
            result = pack(parts, sheets, options)
        return JobOutput(result=result, options=options)


def _apply_overrides(
    config: CutlistConfiguration,
    overrides: JobOverrides,
) -> CutlistConfiguration:
    """Return a re-validated copy of the configuration with overrides applied."""
    options = config.options.model_dump()
    annealing = config.annealing.model_dump()

    if overrides.algorithm is not None:
        options["algorithm"] = overrides.algorithm
    if overrides.strategy is not None:
        options["strategy"] = overrides.strategy
        if overrides.optimize is None:
            options["optimize"] = False
    if overrides.optimize is not None:
        options["optimize"] = overrides.optimize
    if overrides.allow_rotation is not None:
        options["allow_rotation"] = overrides.allow_rotation
    if overrides.waste_aware is not None:
        options["waste_aware"] = overrides.waste_aware
    if overrides.anneal_ms is not None:
        annealing["enabled"] = overrides.anneal_ms > 0
        annealing["time_budget_ms"] = overrides.anneal_ms
    if overrides.seed is not None:
        annealing["seed"] = overrides.seed

    if overrides != JobOverrides():
        logger.debug("Applying overrides: %s", overrides)

    data = config.model_dump()
    data["options"] = options
    data["annealing"] = annealing
    return CutlistConfiguration.model_validate(data)
