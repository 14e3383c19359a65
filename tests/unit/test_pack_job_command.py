"""Tests for PackJobCommand and command-line overrides."""

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from cutlist.application import JobOverrides, PackJobCommand
from cutlist.application.config import load_config, load_config_from_dict
from cutlist.domain.value_objects import PackingAlgorithm, SortStrategy
from cutlist.infrastructure.annealing import AnnealingProgress

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "configs"


@pytest.fixture
def valid_config():
    return load_config(FIXTURES_PATH / "valid_job.json")


class TestPackJobCommand:
    """Tests for PackJobCommand.execute."""

    def test_optimized_by_default(self, valid_config) -> None:
        output = PackJobCommand().execute(valid_config)

        assert output.result.is_complete
        assert output.exit_code == 0
        assert not output.annealed
        assert output.result.strategy_used in {s.value for s in SortStrategy}
        assert output.options.algorithm == PackingAlgorithm.GUILLOTINE

    def test_single_strategy_override(self, valid_config) -> None:
        output = PackJobCommand().execute(valid_config, JobOverrides(strategy="length"))
        assert output.result.strategy_used == "length"
        assert output.options.strategy == SortStrategy.LENGTH

    def test_strategy_with_explicit_optimize(self, valid_config) -> None:
        overrides = JobOverrides(strategy="length", optimize=True)
        output = PackJobCommand().execute(valid_config, overrides)
        # Optimizing tries the default strategies, so the single strategy is ignored.
        assert output.result.strategy_used in {"area", "length", "width", "perimeter"}

    def test_legacy_algorithm_override(self, valid_config) -> None:
        output = PackJobCommand().execute(valid_config, JobOverrides(algorithm="legacy"))
        assert output.result.algorithm == PackingAlgorithm.LEGACY

    def test_no_rotation_override(self, valid_config) -> None:
        output = PackJobCommand().execute(valid_config, JobOverrides(allow_rotation=False))
        assert not output.options.allow_rotation
        for sheet in output.result.sheets:
            for p in sheet.placements:
                assert int(p.rotation) == 0

    def test_unknown_strategy_rejected(self, valid_config) -> None:
        with pytest.raises(PydanticValidationError):
            PackJobCommand().execute(valid_config, JobOverrides(strategy="random"))

    def test_unplaced_exit_code(self) -> None:
        config = load_config(FIXTURES_PATH / "job_with_unplaced.json")
        output = PackJobCommand().execute(config)
        assert output.exit_code == 2
        assert output.result.unplaced[0].part.id == "worktop"

    def test_overrides_do_not_mutate_config(self, valid_config) -> None:
        PackJobCommand().execute(valid_config, JobOverrides(strategy="width", anneal_ms=10))
        assert valid_config.options.optimize
        assert not valid_config.annealing.enabled


class TestAnnealingJob:
    """Tests for jobs that run the annealing pass."""

    def test_anneal_override_enables_annealing(self, valid_config) -> None:
        events: list[AnnealingProgress] = []
        command = PackJobCommand(on_progress=events.append)
        output = command.execute(valid_config, JobOverrides(anneal_ms=30, seed=5))

        assert output.annealed
        assert output.result.strategy_used.startswith("annealed (")
        assert output.result.is_complete
        assert events[-1].final

    def test_zero_anneal_budget_disables(self, valid_config) -> None:
        config = valid_config.model_copy(
            update={"annealing": valid_config.annealing.model_copy(update={"enabled": True})}
        )
        output = PackJobCommand().execute(config, JobOverrides(anneal_ms=0))
        assert not output.annealed

    def test_cancelled_annealing_returns_baseline(self, valid_config) -> None:
        command = PackJobCommand(should_cancel=lambda: True)
        output = command.execute(valid_config, JobOverrides(anneal_ms=5000))
        assert output.result.strategy_used == "annealed (0 iterations, 0 improvements)"

    def test_uses_first_sheet_type_only(self, caplog) -> None:
        config = load_config_from_dict(
            {
                "version": "1.0",
                "parts": [{"id": "p", "length_mm": 500, "width_mm": 400, "qty": 2}],
                "sheets": [
                    {"id": "first", "length_mm": 2440, "width_mm": 1220},
                    {"id": "second", "length_mm": 2750, "width_mm": 1830},
                ],
                "annealing": {"enabled": True, "time_budget_ms": 20},
            }
        )
        with caplog.at_level("WARNING", logger="cutlist.application.commands"):
            output = PackJobCommand().execute(config)

        assert {s.stock_id for s in output.result.sheets} == {"first"}
        assert "first sheet type 'first'" in caplog.text
