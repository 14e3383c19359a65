"""Validation results and advisory checks for job configurations.

Schema errors are found by pydantic when the job is loaded. The checks
here run on a valid configuration and report problems that will not stop
a packing run but will likely surprise the user.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cutlist.application.config.schema import CutlistConfiguration, PartConfig, SheetConfig
from cutlist.domain.value_objects import GrainOrientation


@dataclass
class ValidationError:
    """A blocking validation error.

    Attributes:
        path: JSON path to the invalid field (e.g. "parts[2].length_mm").
        message: Human-readable description of the error.
        value: The invalid value, if known.
    """

    path: str
    message: str
    value: Any = None


@dataclass
class ValidationWarning:
    """A non-blocking advisory.

    Attributes:
        path: JSON path to the concerning field.
        message: Human-readable description of the concern.
        suggestion: Optional remedy.
    """

    path: str
    message: str
    suggestion: str | None = None


@dataclass
class ValidationResult:
    """Errors and warnings collected while validating a job.

    Attributes:
        errors: Blocking errors.
        warnings: Non-blocking advisories.
    """

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def exit_code(self) -> int:
        """CLI exit code: 0 clean, 1 errors, 2 warnings only."""
        if self.errors:
            return 1
        if self.warnings:
            return 2
        return 0

    def add_error(self, path: str, message: str, value: Any = None) -> ValidationResult:
        self.errors.append(ValidationError(path=path, message=message, value=value))
        return self

    def add_warning(
        self, path: str, message: str, suggestion: str | None = None
    ) -> ValidationResult:
        self.warnings.append(ValidationWarning(path=path, message=message, suggestion=suggestion))
        return self


def _fits(part: PartConfig, sheet: SheetConfig, allow_rotation: bool) -> bool:
    upright = part.width_mm <= sheet.width_mm and part.length_mm <= sheet.length_mm
    turned = part.length_mm <= sheet.width_mm and part.width_mm <= sheet.length_mm
    if part.grain == GrainOrientation.LENGTH:
        return upright
    if part.grain == GrainOrientation.WIDTH:
        return turned
    return upright or (allow_rotation and turned)


def check_part_fit(config: CutlistConfiguration) -> ValidationResult:
    """Warn about parts that no configured sheet type can hold."""
    result = ValidationResult()
    allow_rotation = config.options.allow_rotation
    for i, part in enumerate(config.parts):
        if any(_fits(part, sheet, allow_rotation) for sheet in config.sheets):
            continue
        suggestion = None
        if part.grain != GrainOrientation.ANY:
            suggestion = "Relax the grain constraint or add a larger sheet type"
        elif not allow_rotation:
            suggestion = "Enable rotation or add a larger sheet type"
        result.add_warning(
            f"parts[{i}]",
            f"Part '{part.id}' ({part.length_mm:g} x {part.width_mm:g}) "
            "fits no sheet type and will be reported unplaced",
            suggestion,
        )
    return result


def check_annealing(config: CutlistConfiguration) -> ValidationResult:
    """Warn about annealing settings that will not behave as expected."""
    result = ValidationResult()
    annealing = config.annealing
    if not annealing.enabled:
        return result

    if len(config.sheets) > 1:
        result.add_warning(
            "annealing.enabled",
            "Annealing packs a single sheet type; only "
            f"'{config.sheets[0].id}' will be used",
            "Disable annealing or list a single sheet type",
        )
    if annealing.time_budget_ms == 0:
        result.add_warning(
            "annealing.time_budget_ms",
            "A zero time budget returns the multi-strategy layout unchanged",
        )
    moves = annealing.moves
    total = (
        moves.swap + moves.insert + moves.reverse + moves.rotate + moves.block_swap + moves.promote
    )
    if total == 0:
        result.add_error("annealing.moves", "At least one move weight must be positive")
    return result


def validate_config(config: CutlistConfiguration) -> ValidationResult:
    """Run every advisory check on a loaded configuration."""
    result = ValidationResult()
    for check in (check_part_fit, check_annealing):
        partial = check(config)
        result.errors.extend(partial.errors)
        result.warnings.extend(partial.warnings)
    return result
