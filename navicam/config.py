"""
Configuration - Tunable thresholds for the scene trackers.

Configuration sources, in order of precedence:
1. Environment variables (NAVICAM_*)
2. JSON config file (optional)
3. Defaults below

Validated with Pydantic so typos and out-of-range values are caught
at startup instead of silently skewing the trackers.
"""

from __future__ import annotations
import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator

from .errors import ConfigError


class ObjectTrackerConfig(BaseModel):
    """Hysteresis settings for the object tracker."""
    # Score at which a label is confirmed and joins the stable set
    add_threshold: int = Field(default=5, ge=1)
    # Reinforcement cap; a reconfirmed label is pinned just above it
    ceiling: int = Field(default=10, ge=1)

    @model_validator(mode="after")
    def _check_order(self) -> ObjectTrackerConfig:
        # Hits are capped at the ceiling before the tick decays them
        if self.add_threshold >= self.ceiling:
            raise ValueError(
                f"add_threshold ({self.add_threshold}) must be below ceiling ({self.ceiling})"
            )
        return self


class TextTrackerConfig(BaseModel):
    """Thresholds for the three-stage text diff."""
    # Stage 1: full-text relative distance at or below this is noise
    overall_distance_threshold: float = Field(default=0.45, ge=0.0, le=1.0)
    # Stage 2: relative block-count change above this forces adoption
    block_activator_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    # Stage 3: matched per-block relative distance at or above this adopts
    levenshtein_distance_factor: float = Field(default=0.4, ge=0.0, le=1.0)


class AnalyzerConfig(BaseModel):
    """
    Complete configuration for a scene session.

    Usage:
        config = load_config("navicam.json")
        session = SceneSession(config=config, ...)
    """
    objects: ObjectTrackerConfig = Field(default_factory=ObjectTrackerConfig)
    text: TextTrackerConfig = Field(default_factory=TextTrackerConfig)

    # Labels below this confidence are dropped by the labeler
    label_confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)

    # Downstream consumer the notifier looks for
    consumer_name: str = "smartnotes"

    @classmethod
    def from_file(cls, path: str | Path) -> AnalyzerConfig:
        """Load configuration from a JSON file."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {path}")
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in {path}: {e}")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalyzerConfig:
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigError(str(e)) from e

    @classmethod
    def from_env(cls, base: AnalyzerConfig | None = None) -> AnalyzerConfig:
        """Apply NAVICAM_* environment overrides on top of `base`."""
        data = (base or cls()).model_dump()
        for env_name, (section, key) in ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value is None:
                continue
            if section:
                data[section][key] = value
            else:
                data[key] = value
        return cls.from_dict(data)


# Environment variable -> (section, field); empty section means top level
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "NAVICAM_ADD_THRESHOLD": ("objects", "add_threshold"),
    "NAVICAM_CEILING": ("objects", "ceiling"),
    "NAVICAM_OVERALL_DISTANCE_THRESHOLD": ("text", "overall_distance_threshold"),
    "NAVICAM_BLOCK_ACTIVATOR_THRESHOLD": ("text", "block_activator_threshold"),
    "NAVICAM_LEVENSHTEIN_DISTANCE_FACTOR": ("text", "levenshtein_distance_factor"),
    "NAVICAM_LABEL_CONFIDENCE_THRESHOLD": ("", "label_confidence_threshold"),
    "NAVICAM_CONSUMER": ("", "consumer_name"),
}


def load_config(path: str | Path | None = None) -> AnalyzerConfig:
    """
    Load the effective configuration.

    Reads `path` (or $NAVICAM_CONFIG) when given, then applies
    environment overrides.
    """
    path = path or os.getenv("NAVICAM_CONFIG")
    base = AnalyzerConfig.from_file(path) if path else AnalyzerConfig()
    return AnalyzerConfig.from_env(base)
