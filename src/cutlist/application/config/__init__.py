"""Job configuration schema, loading and validation.

Public API:
    - CutlistConfiguration: Root configuration model
    - PartConfig, SheetConfig, OptionsConfig, AnnealingConfig: Section models
    - load_config: Load a job from a JSON file
    - load_config_from_dict: Load a job from a dictionary
    - ConfigError: Exception for configuration errors
    - ValidationResult: Container for validation results
    - validate_config: Run advisory checks on a loaded job
    - config_to_parts, config_to_sheets, config_to_options,
      config_to_annealing: Convert configuration to domain objects

Example:
    >>> from pathlib import Path
    >>> from cutlist.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("kitchen-job.json"))
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from cutlist.application.config.adapter import (
    config_to_annealing,
    config_to_options,
    config_to_parts,
    config_to_sheets,
)
from cutlist.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from cutlist.application.config.schema import (
    SUPPORTED_VERSIONS,
    AnnealingConfig,
    BandEdgesConfig,
    CutlistConfiguration,
    MoveWeightsConfig,
    OptionsConfig,
    PartConfig,
    SheetConfig,
)
from cutlist.application.config.validator import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    validate_config,
)

__all__ = [
    "AnnealingConfig",
    "BandEdgesConfig",
    "ConfigError",
    "CutlistConfiguration",
    "MoveWeightsConfig",
    "OptionsConfig",
    "PartConfig",
    "SUPPORTED_VERSIONS",
    "SheetConfig",
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "config_to_annealing",
    "config_to_options",
    "config_to_parts",
    "config_to_sheets",
    "load_config",
    "load_config_from_dict",
    "validate_config",
]
