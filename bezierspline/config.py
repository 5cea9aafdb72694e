"""
Configuration management for bezierspline.

This module provides:
- SplineConfig: Typed configuration dataclass
- ConfigManager: Defaults, YAML file and environment variable layering
- create_default_config: Default configuration dictionary
- load_config: Load configuration from YAML files
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from bezierspline.exceptions import ConfigNotFoundError, ConfigValidationError


AXES = ("x", "y", "z")
VELOCITY_MODES = ("origin_subtract", "vector")


def _parse_flag(value: Any) -> Any:
    """Turn "true"/"off"-style strings into booleans; other values pass through to validate()."""
    if isinstance(value, str):
        return ConfigManager._parse_value(value)
    return value


# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class EditingConfig:
    """Placement policy for segments appended by add_segment."""

    segment_step: float = 1.0
    segment_axis: str = "x"

    def validate(self) -> None:
        if self.segment_axis not in AXES:
            raise ConfigValidationError(
                "editing.segment_axis", f"must be one of {AXES}", self.segment_axis
            )

    @property
    def axis_index(self) -> int:
        return AXES.index(self.segment_axis)


@dataclass
class BoundsConfig:
    """Bounding box sampling and cache policy."""

    steps_per_curve: int = 10
    min_size: float = 0.1
    auto_invalidate: bool = True

    def validate(self) -> None:
        if self.steps_per_curve < 1:
            raise ConfigValidationError("bounds.steps_per_curve", "must be >= 1", self.steps_per_curve)
        if self.min_size <= 0:
            raise ConfigValidationError("bounds.min_size", "must be > 0", self.min_size)
        if not isinstance(self.auto_invalidate, bool):
            raise ConfigValidationError("bounds.auto_invalidate", "must be true or false", self.auto_invalidate)


@dataclass
class SearchConfig:
    """Step schedule of the nearest point search."""

    initial_step: float = 0.1
    min_step: float = 0.001
    refine_factor: float = 8.0

    def validate(self) -> None:
        if not 0 < self.initial_step <= 1:
            raise ConfigValidationError("search.initial_step", "must be in (0, 1]", self.initial_step)
        if self.min_step <= 0:
            raise ConfigValidationError("search.min_step", "must be > 0", self.min_step)
        if self.refine_factor <= 1:
            raise ConfigValidationError("search.refine_factor", "must be > 1", self.refine_factor)


@dataclass
class EvaluationConfig:
    """How derivatives are carried into world space."""

    velocity_mode: str = "origin_subtract"

    def validate(self) -> None:
        if self.velocity_mode not in VELOCITY_MODES:
            raise ConfigValidationError(
                "evaluation.velocity_mode", f"must be one of {VELOCITY_MODES}", self.velocity_mode
            )


@dataclass
class SplineConfig:
    """Complete bezierspline configuration."""

    editing: EditingConfig = field(default_factory=EditingConfig)
    bounds: BoundsConfig = field(default_factory=BoundsConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    evaluation: EvaluationConfig = field(default_factory=EvaluationConfig)

    def validate(self) -> None:
        """Validate all configuration settings."""
        self.editing.validate()
        self.bounds.validate()
        self.search.validate()
        self.evaluation.validate()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {
            "editing": {
                "segment_step": self.editing.segment_step,
                "segment_axis": self.editing.segment_axis,
            },
            "bounds": {
                "steps_per_curve": self.bounds.steps_per_curve,
                "min_size": self.bounds.min_size,
                "auto_invalidate": self.bounds.auto_invalidate,
            },
            "search": {
                "initial_step": self.search.initial_step,
                "min_step": self.search.min_step,
                "refine_factor": self.search.refine_factor,
            },
            "evaluation": {
                "velocity_mode": self.evaluation.velocity_mode,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SplineConfig":
        """Create SplineConfig from dictionary."""
        editing_data = data.get("editing", {})
        bounds_data = data.get("bounds", {})
        search_data = data.get("search", {})
        evaluation_data = data.get("evaluation", {})

        return cls(
            editing=EditingConfig(
                segment_step=float(editing_data.get("segment_step", 1.0)),
                segment_axis=str(editing_data.get("segment_axis", "x")).lower(),
            ),
            bounds=BoundsConfig(
                steps_per_curve=int(bounds_data.get("steps_per_curve", 10)),
                min_size=float(bounds_data.get("min_size", 0.1)),
                auto_invalidate=_parse_flag(bounds_data.get("auto_invalidate", True)),
            ),
            search=SearchConfig(
                initial_step=float(search_data.get("initial_step", 0.1)),
                min_step=float(search_data.get("min_step", 0.001)),
                refine_factor=float(search_data.get("refine_factor", 8.0)),
            ),
            evaluation=EvaluationConfig(
                velocity_mode=str(evaluation_data.get("velocity_mode", "origin_subtract")),
            ),
        )


# =============================================================================
# Configuration Manager
# =============================================================================


class ConfigManager:
    """Central configuration management with environment variable support.

    Environment variables take precedence over config files.
    Config files take precedence over defaults.

    Environment variable format: BEZIERSPLINE_<SECTION>_<KEY>
    Example: BEZIERSPLINE_SEARCH_MIN_STEP=0.0005
    """

    ENV_PREFIX = "BEZIERSPLINE"

    # Logging variables share the prefix but are not configuration sections
    _RESERVED_ENV = {"log_level", "log_format", "log_file"}

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        self._config: Optional[SplineConfig] = None
        self._config_path = Path(config_path) if config_path else None
        self._raw_config: Dict[str, Any] = {}

    def load(self, validate: bool = True) -> SplineConfig:
        """Load and return configuration.

        Args:
            validate: Whether to validate configuration after loading.

        Returns:
            Loaded SplineConfig instance.
        """
        self._raw_config = create_default_config()

        if self._config_path:
            self._load_from_file(self._config_path)

        self._load_from_env()

        self._config = SplineConfig.from_dict(self._raw_config)

        if validate:
            self._config.validate()

        return self._config

    def _load_from_file(self, path: Path) -> None:
        """Load configuration from YAML file."""
        if not path.exists():
            raise ConfigNotFoundError(str(path))

        with open(path, "r") as f:
            file_config = yaml.safe_load(f)

        if file_config:
            self._deep_update(self._raw_config, file_config)

    def _load_from_env(self) -> None:
        """Load configuration from environment variables."""
        for key, value in os.environ.items():
            if key.startswith(f"{self.ENV_PREFIX}_"):
                config_key = key[len(self.ENV_PREFIX) + 1 :].lower()
                if config_key in self._RESERVED_ENV:
                    continue
                self._set_nested_value(config_key, value)

    def _set_nested_value(self, key: str, value: str) -> None:
        """Set ``section_key`` from an environment variable.

        Only the first underscore separates the section, so multi-word keys
        such as ``search_min_step`` land in ``search.min_step``.
        """
        section, _, final_key = key.partition("_")
        if not final_key:
            return
        target = self._raw_config.setdefault(section, {})
        target[final_key] = self._parse_value(value)

    @staticmethod
    def _parse_value(value: str) -> Any:
        """Parse string value to appropriate Python type."""
        if value.lower() in ("true", "yes", "on"):
            return True
        if value.lower() in ("false", "no", "off"):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value

    @staticmethod
    def _deep_update(base: dict, update: dict) -> dict:
        """Deep merge update into base dictionary."""
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                ConfigManager._deep_update(base[key], value)
            else:
                base[key] = value
        return base

    @property
    def config(self) -> SplineConfig:
        """Get current configuration (loads if not already loaded)."""
        if self._config is None:
            self.load()
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dotted key path (e.g. "search.min_step")."""
        parts = key.split(".")
        value = self._raw_config

        for part in parts:
            if isinstance(value, dict) and part in value:
                value = value[part]
            else:
                return default

        return value


# =============================================================================
# Factory Functions
# =============================================================================


def create_default_config() -> Dict[str, Any]:
    """Create default configuration dictionary."""
    return SplineConfig().to_dict()


def load_config(path: Union[str, Path], validate: bool = True) -> SplineConfig:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML configuration file.
        validate: Whether to validate configuration.

    Returns:
        Loaded SplineConfig.
    """
    manager = ConfigManager(path)
    return manager.load(validate=validate)


_global_config: Optional[ConfigManager] = None


def get_config() -> ConfigManager:
    """Get global configuration manager instance."""
    global _global_config
    if _global_config is None:
        _global_config = ConfigManager()
    return _global_config


def init_config(path: Optional[Union[str, Path]] = None) -> ConfigManager:
    """Initialize global configuration from file."""
    global _global_config
    _global_config = ConfigManager(path)
    _global_config.load()
    return _global_config
