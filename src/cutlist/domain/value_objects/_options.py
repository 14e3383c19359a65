"""Packing options and strategy enumerations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PackingAlgorithm(str, Enum):
    """Placement algorithm used by a packing run.

    Attributes:
        GUILLOTINE: Free-rectangle guillotine packer (default).
        LEGACY: Shelf packer kept for comparison.
    """

    GUILLOTINE = "guillotine"
    LEGACY = "legacy"


class SortStrategy(str, Enum):
    """Deterministic part orderings tried by the multi-strategy optimizer.

    Every strategy sorts descending by its key. Grain-locked parts always
    come first.
    """

    AREA = "area"
    LENGTH = "length"
    WIDTH = "width"
    PERIMETER = "perimeter"
    LONGEST_SIDE = "longest-side"
    HEIGHT = "height"


DEFAULT_STRATEGIES: tuple[SortStrategy, ...] = (
    SortStrategy.AREA,
    SortStrategy.LENGTH,
    SortStrategy.WIDTH,
    SortStrategy.PERIMETER,
)


@dataclass(frozen=True)
class PackingConfig:
    """Waste-aware placement scoring for the guillotine packer.

    When set on PackOptions, each candidate position is scored as its
    short-side leftover plus penalties for leftover strips narrower than
    ``min_usable_dimension`` (slivers) or ``preferred_min_dimension``
    (sub-optimal strips), minus bonuses for an exact fit along one side
    and for touching the left or top sheet edge. Lower scores win.

    Attributes:
        min_usable_dimension: Leftover strips below this are slivers.
        preferred_min_dimension: Leftover strips below this are sub-optimal.
        sliver_penalty: Added per sliver.
        sub_optimal_penalty: Added per sub-optimal strip.
        touching_bonus: Subtracted per sheet edge the position touches.
        perfect_fit_bonus: Subtracted when a leftover side is zero.
    """

    min_usable_dimension: float = 150.0
    preferred_min_dimension: float = 300.0
    sliver_penalty: float = 10_000.0
    sub_optimal_penalty: float = 2_000.0
    touching_bonus: float = 500.0
    perfect_fit_bonus: float = 1_000.0

    def __post_init__(self) -> None:
        if self.min_usable_dimension < 0:
            raise ValueError("Minimum usable dimension must be non-negative")
        if self.preferred_min_dimension < self.min_usable_dimension:
            raise ValueError("Preferred dimension must not be below the usable minimum")


@dataclass(frozen=True)
class PackOptions:
    """Options recognised by every packing entry point.

    Attributes:
        allow_rotation: Allow 90 degree rotation of grain-free parts.
        algorithm: Placement algorithm.
        strategy: Sort order used by single-strategy packing.
        single_sheet_only: Open at most one sheet (feasibility checks).
        min_usable_dimension: Shortest side for an offcut to count as usable.
        min_usable_area: Minimum area for an offcut to count as usable.
        placement: Waste-aware placement scoring; None keeps plain
            best-short-side fit.
    """

    allow_rotation: bool = True
    algorithm: PackingAlgorithm = PackingAlgorithm.GUILLOTINE
    strategy: SortStrategy = SortStrategy.AREA
    single_sheet_only: bool = False
    min_usable_dimension: float = 150.0
    min_usable_area: float = 100_000.0
    placement: PackingConfig | None = None

    def __post_init__(self) -> None:
        if self.min_usable_dimension < 0:
            raise ValueError("Minimum usable dimension must be non-negative")
        if self.min_usable_area < 0:
            raise ValueError("Minimum usable area must be non-negative")
