"""YAML configuration for the execution environment and logging.

    environment: secure
    memory_budget: 200
    exclude_restricted_functions: false
    log_dir: ./logs

Load it with ``load_config`` and install it with ``apply_config``
before any traversal starts.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from squiggly import filter_logger
from squiggly.environment import (
    DEFAULT_MEMORY_BUDGET,
    Environment,
    EnvironmentPolicy,
    set_active_policy,
)
from squiggly.errors import ConfigLoadError


class SquigglyConfig(BaseModel):
    environment: Environment = Environment.NORMAL
    memory_budget: int = Field(DEFAULT_MEMORY_BUDGET, gt=0)
    exclude_restricted_functions: bool = False
    log_dir: str | None = None

    def to_policy(self) -> EnvironmentPolicy:
        return EnvironmentPolicy(
            environment=self.environment,
            memory_budget=self.memory_budget,
            exclude_restricted=self.exclude_restricted_functions,
        )


def load_config(path: str | Path) -> SquigglyConfig:
    """Load configuration from a YAML file. An empty file means defaults.

    Raises:
        ConfigLoadError: If the file doesn't exist, YAML is invalid,
            or a setting has the wrong type or value.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigLoadError(f"Config file not found: {path}")

    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {path}: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigLoadError(
            f"Config YAML must be a mapping, got {type(raw).__name__}"
        )

    try:
        return SquigglyConfig.model_validate(raw)
    except PydanticValidationError as e:
        raise ConfigLoadError(f"Config invalid: {e}") from e


def apply_config(config: SquigglyConfig) -> EnvironmentPolicy:
    """Configure logging and install the config's policy process-wide."""
    if config.log_dir:
        filter_logger.configure_logging(config.log_dir)
    policy = config.to_policy()
    set_active_policy(policy)
    return policy
