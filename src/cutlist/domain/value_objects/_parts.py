"""Part and stock sheet value objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum


class GrainOrientation(str, Enum):
    """Grain constraint for a part.

    Attributes:
        ANY: Part may be placed at 0 or 90 degrees.
        LENGTH: Part length runs along the sheet length (0 degrees only).
        WIDTH: Part length runs along the sheet width (90 degrees only).
    """

    ANY = "any"
    LENGTH = "length"
    WIDTH = "width"


class LaminationType(str, Enum):
    """How a part is built up from board layers.

    Attributes:
        NONE: Single board, 16mm edging.
        WITH_BACKER: Primary board plus a backer board, 32mm edging.
        SAME_BOARD: Two layers of the primary board, 32mm edging.
        CUSTOM: Three or more layers, edging thickness follows layer count.
    """

    NONE = "none"
    WITH_BACKER = "with-backer"
    SAME_BOARD = "same-board"
    CUSTOM = "custom"


class Rotation(IntEnum):
    """Rotation applied to a placed part, in degrees."""

    DEG_0 = 0
    DEG_90 = 90


BOARD_THICKNESS_MM = 16


@dataclass(frozen=True)
class BandEdges:
    """Edges of a part that receive edge banding.

    Top and bottom edges run along the part width; left and right edges
    run along the part length.
    """

    top: bool = False
    right: bool = False
    bottom: bool = False
    left: bool = False

    @classmethod
    def all(cls) -> BandEdges:
        """Band every edge."""
        return cls(top=True, right=True, bottom=True, left=True)

    @property
    def any(self) -> bool:
        """True if at least one edge is banded."""
        return self.top or self.right or self.bottom or self.left

    def banded_length(self, length: float, width: float) -> float:
        """Total banded edge length for a part of the given size."""
        total = 0.0
        if self.top:
            total += width
        if self.bottom:
            total += width
        if self.left:
            total += length
        if self.right:
            total += length
        return total


@dataclass(frozen=True)
class PartSpec:
    """A rectangular part requested for cutting.

    Attributes:
        id: Identifier, unique within a job.
        length_mm: Length, aligned with the sheet length at 0 degrees.
        width_mm: Width, aligned with the sheet width at 0 degrees.
        qty: Number of units required.
        grain: Grain constraint.
        band_edges: Edges that receive banding.
        lamination_type: Lamination build-up, selects the edging class.
        lamination_layers: Layer count for custom lamination.
        label: Optional display name.
    """

    id: str
    length_mm: float
    width_mm: float
    qty: int = 1
    grain: GrainOrientation = GrainOrientation.ANY
    band_edges: BandEdges = field(default_factory=BandEdges)
    lamination_type: LaminationType = LaminationType.NONE
    lamination_layers: int | None = None
    label: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Part id must not be empty")
        if self.length_mm <= 0 or self.width_mm <= 0:
            raise ValueError(
                f"Part '{self.id}' dimensions must be positive "
                f"(got {self.length_mm}x{self.width_mm})"
            )
        if self.qty < 0:
            raise ValueError(f"Part '{self.id}' quantity must be non-negative")
        if self.lamination_layers is not None:
            if self.lamination_type != LaminationType.CUSTOM:
                raise ValueError(
                    f"Part '{self.id}': lamination_layers only applies to custom lamination"
                )
            if self.lamination_layers < 2:
                raise ValueError(f"Part '{self.id}': lamination needs at least 2 layers")

    @property
    def area(self) -> float:
        """Area of one unit."""
        return self.length_mm * self.width_mm

    @property
    def is_grain_locked(self) -> bool:
        """True if the grain constraint fixes the rotation."""
        return self.grain != GrainOrientation.ANY

    @property
    def edge_thickness_mm(self) -> int:
        """Thickness of the edging this part needs."""
        if self.lamination_type == LaminationType.NONE:
            return BOARD_THICKNESS_MM
        if self.lamination_type == LaminationType.CUSTOM:
            return BOARD_THICKNESS_MM * (self.lamination_layers or 2)
        return 2 * BOARD_THICKNESS_MM

    @property
    def display_name(self) -> str:
        return self.label or self.id


@dataclass(frozen=True)
class StockSheetSpec:
    """A stock sheet type available for cutting.

    Attributes:
        id: Identifier of the sheet type.
        length_mm: Sheet length (y axis).
        width_mm: Sheet width (x axis).
        qty: Number of sheets of this type available.
        kerf_mm: Saw blade width removed at every cut.
        material: Optional material label.
    """

    id: str
    length_mm: float
    width_mm: float
    qty: int = 1
    kerf_mm: float = 0.0
    material: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Sheet id must not be empty")
        if self.length_mm <= 0 or self.width_mm <= 0:
            raise ValueError(
                f"Sheet '{self.id}' dimensions must be positive "
                f"(got {self.length_mm}x{self.width_mm})"
            )
        if self.qty < 0:
            raise ValueError(f"Sheet '{self.id}' quantity must be non-negative")
        if self.kerf_mm < 0:
            raise ValueError(f"Sheet '{self.id}' kerf must be non-negative")

    @property
    def area(self) -> float:
        """Area of one sheet."""
        return self.length_mm * self.width_mm


@dataclass(frozen=True)
class ExpandedPart:
    """A single unit rectangle to place, expanded from a PartSpec.

    Attributes:
        uid: Unit identifier, ``<part id>#<n>``.
        spec: The originating part specification.
        index: Zero-based unit number within the spec.
    """

    uid: str
    spec: PartSpec
    index: int

    @property
    def part_id(self) -> str:
        return self.spec.id

    @property
    def length_mm(self) -> float:
        return self.spec.length_mm

    @property
    def width_mm(self) -> float:
        return self.spec.width_mm

    @property
    def grain(self) -> GrainOrientation:
        return self.spec.grain

    @property
    def area(self) -> float:
        return self.spec.area
