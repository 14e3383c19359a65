"""Typer CLI for cutlist optimization."""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from cutlist.application.commands import JobOverrides, PackJobCommand
from cutlist.application.config import (
    ConfigError,
    ValidationResult,
    load_config,
    validate_config,
)
from cutlist.domain.value_objects import PackingAlgorithm, SortStrategy
from cutlist.infrastructure import AnnealingProgress, LayoutReportFormatter, layout_to_json

app = typer.Typer(
    name="cutlist",
    help="Optimize how rectangular parts are cut from stock sheets.",
    no_args_is_help=True,
)


class OutputFormat(str, Enum):
    """Report formats for the pack command."""

    TEXT = "text"
    JSON = "json"


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _display_load_error(error: ConfigError) -> None:
    """Display a job loading error on stderr."""
    typer.echo("Errors:", err=True)
    if error.error_type == "file_not_found":
        typer.echo(f"  File not found: {error.path}", err=True)
    elif error.error_type == "json_parse":
        typer.echo("  Invalid JSON syntax", err=True)
        for detail in error.details:
            typer.echo(
                f"    Line {detail.get('line', '?')}, column {detail.get('column', '?')}: "
                f"{detail.get('message', '')}",
                err=True,
            )
    elif error.error_type == "validation":
        for detail in error.details:
            typer.echo(f"  - {detail['path'] or '<root>'}: {detail['message']}", err=True)
    else:
        typer.echo(f"  {error.message}", err=True)


def _display_validation_result(result: ValidationResult) -> None:
    """Display errors and warnings from the advisory checks."""
    if result.errors:
        typer.echo("Errors:", err=True)
        for error in result.errors:
            typer.echo(f"  - {error.path}: {error.message}", err=True)
        typer.echo()

    if result.warnings:
        typer.echo("Warnings:")
        for warning in result.warnings:
            typer.echo(f"  - {warning.path}: {warning.message}")
            if warning.suggestion:
                typer.echo(f"    Suggestion: {warning.suggestion}")
        typer.echo()

    if result.is_valid and not result.has_warnings:
        typer.echo("Job configuration is valid.")
    elif result.is_valid:
        typer.echo("Job configuration is valid (with warnings).")
    else:
        typer.echo("Job configuration has errors.", err=True)


def _echo_progress(progress: AnnealingProgress) -> None:
    if progress.final:
        return
    typer.echo(
        f"  annealing: {progress.iteration} iterations, best score "
        f"{progress.best_score:.1f} (baseline {progress.baseline_score:.1f}), "
        f"T={progress.temperature:.2f}",
        err=True,
    )


@app.command()
def pack(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file"),
    ],
    algorithm: Annotated[
        PackingAlgorithm | None,
        typer.Option("--algorithm", "-a", help="Packing algorithm"),
    ] = None,
    strategy: Annotated[
        SortStrategy | None,
        typer.Option("--strategy", "-s", help="Single sort strategy (disables optimization)"),
    ] = None,
    optimize: Annotated[
        bool | None,
        typer.Option("--optimize/--no-optimize", help="Try every default sort strategy"),
    ] = None,
    no_rotation: Annotated[
        bool,
        typer.Option("--no-rotation", help="Never rotate parts"),
    ] = False,
    waste_aware: Annotated[
        bool,
        typer.Option("--waste-aware", help="Penalise placements that leave thin slivers"),
    ] = False,
    anneal_ms: Annotated[
        float | None,
        typer.Option("--anneal-ms", min=0, help="Annealing time budget in ms (0 disables)"),
    ] = None,
    seed: Annotated[
        int | None,
        typer.Option("--seed", help="Random seed for annealing"),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option("--format", "-f", help="Report format"),
    ] = OutputFormat.TEXT,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the report to a file"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Pack the parts of a job onto its stock sheets.

    Exit codes:
        0 - Every part was placed
        1 - The job file could not be loaded
        2 - Some parts could not be placed

    Example:
        cutlist pack kitchen-job.json --anneal-ms 3000 --format json
    """
    _configure_logging(verbose)

    try:
        config = load_config(config_file)
    except ConfigError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)

    overrides = JobOverrides(
        algorithm=algorithm.value if algorithm else None,
        strategy=strategy.value if strategy else None,
        optimize=optimize,
        allow_rotation=False if no_rotation else None,
        waste_aware=True if waste_aware else None,
        anneal_ms=anneal_ms,
        seed=seed,
    )
    command = PackJobCommand(on_progress=_echo_progress if verbose else None)
    try:
        job = command.execute(config, overrides)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if output_format == OutputFormat.JSON:
        report = layout_to_json(job.result, job.options)
    else:
        report = LayoutReportFormatter(job.options, show_cuts=verbose).format(job.result)

    if output is not None:
        output.write_text(report + "\n", encoding="utf-8")
        typer.echo(f"Report written to {output}")
    else:
        typer.echo(report)

    if job.exit_code:
        typer.echo(
            f"Warning: {job.result.unplaced_count} part(s) could not be placed",
            err=True,
        )
    raise typer.Exit(code=job.exit_code)


@app.command()
def validate(
    config_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON job file to validate"),
    ],
) -> None:
    """Validate a job file.

    Exit codes:
        0 - Job is valid with no warnings
        1 - Job has errors (cannot be used)
        2 - Job is valid but has warnings
    """
    typer.echo(f"Validating {config_file}...")
    typer.echo()

    try:
        config = load_config(config_file)
    except ConfigError as e:
        _display_load_error(e)
        raise typer.Exit(code=1)

    result = validate_config(config)
    _display_validation_result(result)
    raise typer.Exit(code=result.exit_code)


if __name__ == "__main__":
    app()
