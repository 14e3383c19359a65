"""Unit tests for job configuration schema and loader.

These tests verify:
- Valid job files load with their defaults applied
- Missing and invalid fields produce JSON-path error details
- Unknown fields are rejected (extra="forbid")
- Version pattern and supported-version checks
- Loader error handling (file not found, JSON parse errors)
"""

import json
from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError as PydanticValidationError

from cutlist.application.config import (
    SUPPORTED_VERSIONS,
    AnnealingConfig,
    ConfigError,
    CutlistConfiguration,
    OptionsConfig,
    PartConfig,
    SheetConfig,
    load_config,
    load_config_from_dict,
)
from cutlist.application.config.loader import format_json_path
from cutlist.domain.value_objects import (
    GrainOrientation,
    LaminationType,
    PackingAlgorithm,
    SortStrategy,
)

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "configs"


def _minimal(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "version": "1.0",
        "parts": [{"id": "side", "length_mm": 720, "width_mm": 560}],
        "sheets": [{"id": "board", "length_mm": 2750, "width_mm": 1830}],
    }
    data.update(overrides)
    return data


class TestPartConfig:
    """Tests for PartConfig model."""

    def test_defaults(self) -> None:
        part = PartConfig(id="side", length_mm=720, width_mm=560)
        assert part.qty == 1
        assert part.grain == GrainOrientation.ANY
        assert part.lamination_type == LaminationType.NONE
        assert not part.band_edges.top

    def test_enum_values_from_strings(self) -> None:
        part = PartConfig.model_validate(
            {
                "id": "side",
                "length_mm": 720,
                "width_mm": 560,
                "grain": "width",
                "lamination_type": "custom",
                "lamination_layers": 3,
            }
        )
        assert part.grain == GrainOrientation.WIDTH
        assert part.lamination_layers == 3

    def test_layers_need_custom_lamination(self) -> None:
        with pytest.raises(PydanticValidationError, match="custom"):
            PartConfig(id="p", length_mm=1, width_mm=1, lamination_layers=3)

    @pytest.mark.parametrize("layers", [1, 11])
    def test_layer_bounds(self, layers: int) -> None:
        with pytest.raises(PydanticValidationError):
            PartConfig(
                id="p",
                length_mm=1,
                width_mm=1,
                lamination_type=LaminationType.CUSTOM,
                lamination_layers=layers,
            )

    def test_rejects_zero_length(self) -> None:
        with pytest.raises(PydanticValidationError):
            PartConfig(id="p", length_mm=0, width_mm=1)

    def test_rejects_unknown_grain(self) -> None:
        with pytest.raises(PydanticValidationError):
            PartConfig.model_validate({"id": "p", "length_mm": 1, "width_mm": 1, "grain": "diag"})


class TestSheetConfig:
    """Tests for SheetConfig model."""

    def test_defaults(self) -> None:
        sheet = SheetConfig(id="board", length_mm=2750, width_mm=1830)
        assert sheet.qty == 1
        assert sheet.kerf_mm == 0
        assert sheet.material is None

    @pytest.mark.parametrize("kerf", [-1, 21])
    def test_kerf_bounds(self, kerf: float) -> None:
        with pytest.raises(PydanticValidationError):
            SheetConfig(id="board", length_mm=2750, width_mm=1830, kerf_mm=kerf)


class TestOptionsAndAnnealing:
    """Tests for the options and annealing sections."""

    def test_options_defaults(self) -> None:
        options = OptionsConfig()
        assert options.allow_rotation
        assert options.algorithm == PackingAlgorithm.GUILLOTINE
        assert options.strategy == SortStrategy.AREA
        assert options.optimize
        assert not options.single_sheet_only

    def test_annealing_defaults(self) -> None:
        annealing = AnnealingConfig()
        assert not annealing.enabled
        assert annealing.time_budget_ms == 2000
        assert annealing.seed == 0
        assert annealing.moves.swap == 0.4

    def test_annealing_must_cool(self) -> None:
        with pytest.raises(PydanticValidationError, match="t_start"):
            AnnealingConfig(t_start=1, t_end=5)

    def test_rejects_negative_move_weight(self) -> None:
        with pytest.raises(PydanticValidationError):
            AnnealingConfig.model_validate({"moves": {"swap": -1}})


class TestCutlistConfiguration:
    """Tests for the root model."""

    def test_minimal(self) -> None:
        config = CutlistConfiguration.model_validate(_minimal())
        assert config.version == "1.0"
        assert len(config.parts) == 1
        assert config.options.optimize

    def test_supported_versions(self) -> None:
        assert "1.0" in SUPPORTED_VERSIONS

    def test_newer_minor_version_accepted(self) -> None:
        config = CutlistConfiguration.model_validate(_minimal(version="1.3"))
        assert config.version == "1.3"

    def test_unsupported_major_version(self) -> None:
        with pytest.raises(PydanticValidationError, match="Unsupported version"):
            CutlistConfiguration.model_validate(_minimal(version="2.0"))

    @pytest.mark.parametrize("version", ["1", "v1.0", "1.0.0"])
    def test_version_pattern(self, version: str) -> None:
        with pytest.raises(PydanticValidationError):
            CutlistConfiguration.model_validate(_minimal(version=version))

    def test_requires_parts(self) -> None:
        with pytest.raises(PydanticValidationError):
            CutlistConfiguration.model_validate(_minimal(parts=[]))

    def test_duplicate_part_ids(self) -> None:
        part = {"id": "side", "length_mm": 720, "width_mm": 560}
        with pytest.raises(PydanticValidationError, match="Duplicate part ids: side"):
            CutlistConfiguration.model_validate(_minimal(parts=[part, part]))

    def test_duplicate_sheet_ids(self) -> None:
        sheet = {"id": "board", "length_mm": 2750, "width_mm": 1830}
        with pytest.raises(PydanticValidationError, match="Duplicate sheet ids"):
            CutlistConfiguration.model_validate(_minimal(sheets=[sheet, sheet]))

    def test_zero_total_sheet_quantity(self) -> None:
        sheets = [{"id": "board", "length_mm": 2750, "width_mm": 1830, "qty": 0}]
        with pytest.raises(PydanticValidationError, match="quantity above zero"):
            CutlistConfiguration.model_validate(_minimal(sheets=sheets))


# =============================================================================
# Loader Tests
# =============================================================================


class TestFormatJsonPath:
    """Tests for format_json_path."""

    def test_nested(self) -> None:
        assert format_json_path(("parts", 2, "length_mm")) == "parts[2].length_mm"

    def test_root_field(self) -> None:
        assert format_json_path(("version",)) == "version"

    def test_empty(self) -> None:
        assert format_json_path(()) == ""


class TestLoadConfig:
    """Tests for load_config and load_config_from_dict."""

    def test_valid_file(self) -> None:
        config = load_config(FIXTURES_PATH / "valid_job.json")
        assert [p.id for p in config.parts] == ["side", "shelf", "door", "top"]
        assert config.sheets[0].kerf_mm == 3
        assert config.parts[0].grain == GrainOrientation.LENGTH

    def test_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "missing.json")
        assert exc_info.value.error_type == "file_not_found"
        assert "not found" in str(exc_info.value)

    def test_invalid_json(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(FIXTURES_PATH / "invalid_json.json")
        error = exc_info.value
        assert error.error_type == "json_parse"
        assert "Invalid JSON" in error.message
        assert error.details[0]["line"] >= 1
        assert isinstance(error.__cause__, json.JSONDecodeError)

    def test_unknown_field(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(FIXTURES_PATH / "unknown_field.json")
        error = exc_info.value
        assert error.error_type == "validation"
        assert error.details[0]["path"] == "parts[0].thickness_mm"
        assert error.message.startswith("Job configuration is invalid:")

    def test_validation_error_paths(self) -> None:
        data = _minimal(
            parts=[
                {"id": "ok", "length_mm": 100, "width_mm": 100},
                {"id": "bad", "length_mm": -5, "width_mm": 100},
            ]
        )
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(data)
        error = exc_info.value
        assert error.path is None
        assert [d["path"] for d in error.details] == ["parts[1].length_mm"]
        assert "parts[1].length_mm" in error.message
        assert "(got: -5)" in error.message

    def test_missing_required_section(self) -> None:
        data = _minimal()
        del data["sheets"]
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(data)
        assert exc_info.value.details[0]["path"] == "sheets"

    def test_file_path_recorded(self, tmp_path: Path) -> None:
        job = tmp_path / "job.json"
        job.write_text(json.dumps(_minimal(version="9.0")))
        with pytest.raises(ConfigError) as exc_info:
            load_config(job)
        assert exc_info.value.path == job
