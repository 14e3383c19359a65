"""Pydantic models for cutlist job configuration files.

A job file lists the parts to cut, the stock sheets available, and the
packing and annealing options. All models forbid unknown keys so typos
surface as validation errors instead of being silently ignored.
"""

from __future__ import annotations

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from cutlist.domain.value_objects import (
    GrainOrientation,
    LaminationType,
    PackingAlgorithm,
    SortStrategy,
)

SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})


class BandEdgesConfig(BaseModel):
    """Edges of a part that receive edge banding."""

    model_config = ConfigDict(extra="forbid")

    top: bool = False
    right: bool = False
    bottom: bool = False
    left: bool = False


class PartConfig(BaseModel):
    """A part to cut.

    Attributes:
        id: Identifier, unique within the job.
        length_mm: Part length in millimetres.
        width_mm: Part width in millimetres.
        qty: Number of units required.
        grain: Grain constraint (any, length, width).
        band_edges: Edges that receive banding.
        lamination_type: Lamination build-up.
        lamination_layers: Layer count, custom lamination only.
        label: Optional display name.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    length_mm: float = Field(..., gt=0, description="Part length in mm")
    width_mm: float = Field(..., gt=0, description="Part width in mm")
    qty: int = Field(default=1, ge=0, le=10_000)
    grain: GrainOrientation = GrainOrientation.ANY
    band_edges: BandEdgesConfig = Field(default_factory=BandEdgesConfig)
    lamination_type: LaminationType = LaminationType.NONE
    lamination_layers: int | None = Field(default=None, ge=2, le=10)
    label: str | None = None

    @model_validator(mode="after")
    def validate_lamination_layers(self) -> "PartConfig":
        """Layer counts only make sense for custom lamination."""
        if self.lamination_layers is not None and self.lamination_type != LaminationType.CUSTOM:
            raise ValueError("lamination_layers requires lamination_type 'custom'")
        return self


class SheetConfig(BaseModel):
    """A stock sheet type.

    Attributes:
        id: Identifier of the sheet type.
        length_mm: Sheet length in millimetres.
        width_mm: Sheet width in millimetres.
        qty: Number of sheets available.
        kerf_mm: Saw blade kerf in millimetres.
        material: Optional material label.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    length_mm: float = Field(..., gt=0, description="Sheet length in mm")
    width_mm: float = Field(..., gt=0, description="Sheet width in mm")
    qty: int = Field(default=1, ge=0)
    kerf_mm: float = Field(default=0.0, ge=0, le=20, description="Saw kerf in mm")
    material: str | None = None


class OptionsConfig(BaseModel):
    """Packing options.

    Attributes:
        allow_rotation: Allow rotating grain-free parts.
        algorithm: guillotine (default) or legacy shelf packing.
        strategy: Sort order when ``optimize`` is false.
        optimize: Try every default sort strategy and keep the best.
        single_sheet_only: Open at most one sheet.
        waste_aware: Score placements with sliver penalties and edge
            bonuses instead of plain best-short-side fit.
        min_usable_dimension: Shortest side of a usable offcut in mm.
        min_usable_area: Smallest usable offcut area in mm2.
    """

    model_config = ConfigDict(extra="forbid")

    allow_rotation: bool = True
    algorithm: PackingAlgorithm = PackingAlgorithm.GUILLOTINE
    strategy: SortStrategy = SortStrategy.AREA
    optimize: bool = True
    single_sheet_only: bool = False
    waste_aware: bool = False
    min_usable_dimension: float = Field(default=150.0, ge=0)
    min_usable_area: float = Field(default=100_000.0, ge=0)


class MoveWeightsConfig(BaseModel):
    """Relative weights of the annealing moves."""

    model_config = ConfigDict(extra="forbid")

    swap: float = Field(default=0.4, ge=0)
    insert: float = Field(default=0.2, ge=0)
    reverse: float = Field(default=0.2, ge=0)
    rotate: float = Field(default=0.2, ge=0)
    block_swap: float = Field(default=0.15, ge=0)
    promote: float = Field(default=0.1, ge=0)


class AnnealingConfig(BaseModel):
    """Simulated annealing settings.

    Attributes:
        enabled: Refine the optimized layout with annealing.
        time_budget_ms: Wall-clock budget in milliseconds.
        t_start: Starting temperature.
        t_end: Final temperature.
        progress_interval_ms: Gap between progress reports.
        seed: Random seed for reproducible runs.
        moves: Move weights.
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = False
    time_budget_ms: float = Field(default=2000.0, ge=0, le=600_000)
    t_start: float = Field(default=500.0, gt=0)
    t_end: float = Field(default=0.1, gt=0)
    progress_interval_ms: float = Field(default=500.0, gt=0)
    seed: int | None = 0
    moves: MoveWeightsConfig = Field(default_factory=MoveWeightsConfig)

    @model_validator(mode="after")
    def validate_temperatures(self) -> "AnnealingConfig":
        """The schedule must cool, never heat."""
        if self.t_start < self.t_end:
            raise ValueError("t_start must not be below t_end")
        return self


class CutlistConfiguration(BaseModel):
    """Root model of a cutlist job file.

    Example:
        >>> config = CutlistConfiguration(
        ...     version="1.0",
        ...     parts=[PartConfig(id="side", length_mm=720, width_mm=560, qty=2)],
        ...     sheets=[SheetConfig(id="board", length_mm=2750, width_mm=1830)],
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    version: str = Field(..., pattern=r"^\d+\.\d+$")
    parts: list[PartConfig] = Field(..., min_length=1)
    sheets: list[SheetConfig] = Field(..., min_length=1)
    options: OptionsConfig = Field(default_factory=OptionsConfig)
    annealing: AnnealingConfig = Field(default_factory=AnnealingConfig)

    @field_validator("version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept supported versions and newer minor versions of them."""
        if v in SUPPORTED_VERSIONS:
            return v
        major = v.split(".")[0]
        if any(supported.split(".")[0] == major for supported in SUPPORTED_VERSIONS):
            return v
        raise ValueError(
            f"Unsupported version {v!r}; supported versions: "
            f"{', '.join(sorted(SUPPORTED_VERSIONS))}"
        )

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "CutlistConfiguration":
        """Part and sheet ids must be unique, and some sheet must be available."""
        part_ids = [part.id for part in self.parts]
        duplicates = sorted({pid for pid in part_ids if part_ids.count(pid) > 1})
        if duplicates:
            raise ValueError(f"Duplicate part ids: {', '.join(duplicates)}")

        sheet_ids = [sheet.id for sheet in self.sheets]
        duplicates = sorted({sid for sid in sheet_ids if sheet_ids.count(sid) > 1})
        if duplicates:
            raise ValueError(f"Duplicate sheet ids: {', '.join(duplicates)}")

        if sum(sheet.qty for sheet in self.sheets) == 0:
            raise ValueError("At least one sheet type must have a quantity above zero")
        return self
