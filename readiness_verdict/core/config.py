"""Configuration Module - Tunable inputs of the verdict pipeline."""

import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml


class ConfigError(ValueError):
    """Raised when a configuration source holds an invalid value."""


# Environment variable -> config field
ENV_VARIABLES: Dict[str, str] = {
    "PRC_TARGET_CAPACITY": "target_concurrent_users",
    "PRC_BASELINE_CAPACITY": "baseline_capacity",
    "PRC_TEST_COVERAGE": "test_coverage_estimate",
    "PRC_TOTAL_PHASES": "total_phases",
}


@dataclass(frozen=True)
class VerdictConfig:
    """Measured-data stand-ins and targets used by the assessors."""
    target_concurrent_users: int = 150
    baseline_capacity: int = 120
    test_coverage_estimate: float = 75.0
    total_phases: int = 5

    def __post_init__(self):
        if self.target_concurrent_users <= 0:
            raise ConfigError("target_concurrent_users must be positive")
        if self.baseline_capacity < 0:
            raise ConfigError("baseline_capacity must not be negative")
        if not 0.0 <= self.test_coverage_estimate <= 100.0:
            raise ConfigError("test_coverage_estimate must be between 0 and 100")
        if self.total_phases <= 0:
            raise ConfigError("total_phases must be positive")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VerdictConfig":
        """Create a config from a mapping of field values.

        Raises:
            ConfigError: On unknown keys or values of the wrong type
        """
        return cls().merge(data)

    def merge(self, data: Mapping[str, Any]) -> "VerdictConfig":
        """Return a copy with the given values applied."""
        known = {f.name for f in fields(self)}
        updates: Dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                raise ConfigError(f"Unknown configuration key '{key}'")
            if value is None:
                continue
            caster = float if key == "test_coverage_estimate" else int
            try:
                updates[key] = caster(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid value for '{key}': {value!r}") from e
        return replace(self, **updates)

    @classmethod
    def from_file(cls, path: str | Path, base: Optional["VerdictConfig"] = None) -> "VerdictConfig":
        """Load a YAML config file.

        Raises:
            ConfigError: If the file cannot be parsed or holds invalid values
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not read config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")
        return (base or cls()).merge(data)

    def with_env(self, environ: Optional[Mapping[str, str]] = None) -> "VerdictConfig":
        """Apply PRC_* environment variable overrides."""
        environ = os.environ if environ is None else environ
        overrides = {
            field_name: environ[var]
            for var, field_name in ENV_VARIABLES.items()
            if environ.get(var)
        }
        return self.merge(overrides)
