"""Job file loading with structured error reporting.

Loads JSON job files and validates them against CutlistConfiguration.
File system failures, malformed JSON and schema violations all surface as
a single ConfigError type whose ``error_type`` tells them apart.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from cutlist.application.config.schema import CutlistConfiguration

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when a job configuration cannot be loaded or validated.

    Attributes:
        message: Human-readable error message.
        error_type: One of file_not_found, permission_denied,
            file_read_error, json_parse or validation.
        path: Job file path, if the configuration came from a file.
        details: Structured details (JSON line/column, or one entry per
            validation error with path, message, value and error_type).
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def format_json_path(loc: tuple[str | int, ...]) -> str:
    """Render a pydantic error location as a JSON path.

    Examples:
        >>> format_json_path(("parts", 2, "length_mm"))
        'parts[2].length_mm'
        >>> format_json_path(("options", "algorithm"))
        'options.algorithm'
    """
    path = ""
    for segment in loc:
        if isinstance(segment, int):
            path += f"[{segment}]"
        elif path:
            path += f".{segment}"
        else:
            path = str(segment)
    return path


def _validation_details(error: PydanticValidationError) -> list[dict[str, Any]]:
    return [
        {
            "path": format_json_path(err["loc"]),
            "message": err["msg"],
            "value": err.get("input"),
            "error_type": err["type"],
        }
        for err in error.errors()
    ]


def _validation_message(details: list[dict[str, Any]]) -> str:
    lines = ["Job configuration is invalid:"]
    for detail in details:
        line = f"  - {detail['path'] or '<root>'}: {detail['message']}"
        value = detail.get("value")
        # Whole-object inputs make unreadable messages; only show scalars.
        if value is not None and not isinstance(value, (dict, list)):
            line += f" (got: {value!r})"
        lines.append(line)
    return "\n".join(lines)


def _validate(data: Any, path: Path | None = None) -> CutlistConfiguration:
    try:
        config = CutlistConfiguration.model_validate(data)
    except PydanticValidationError as e:
        details = _validation_details(e)
        raise ConfigError(
            message=_validation_message(details),
            error_type="validation",
            path=path,
            details=details,
        ) from e

    logger.debug(
        "Loaded job with %d parts and %d sheet types", len(config.parts), len(config.sheets)
    )
    return config


def load_config(path: Path) -> CutlistConfiguration:
    """Load and validate a job file.

    Args:
        path: Path to the JSON job file.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the file is missing or unreadable, is not valid JSON,
            or does not match the schema.
    """
    if not path.exists():
        raise ConfigError(
            message=f"Job file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError as e:
        raise ConfigError(
            message=f"Permission denied reading job file: {path}",
            error_type="permission_denied",
            path=path,
        ) from e
    except OSError as e:
        raise ConfigError(
            message=f"Error reading job file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        ) from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=(
                f"Invalid JSON in job file: {path} "
                f"(line {e.lineno}, column {e.colno}): {e.msg}"
            ),
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from e

    return _validate(data, path)


def load_config_from_dict(data: dict[str, Any]) -> CutlistConfiguration:
    """Validate a job configuration held in memory.

    Raises:
        ConfigError: If the data does not match the schema.
    """
    return _validate(data)
