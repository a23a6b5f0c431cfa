"""
Tests for configuration loading and validation.
"""

import json

import pytest
from pydantic import ValidationError

from ..config import AnalyzerConfig, ObjectTrackerConfig, TextTrackerConfig, load_config
from ..errors import ConfigError


@pytest.fixture
def clean_env(monkeypatch):
    """Remove any NAVICAM_* variables from the environment."""
    import os

    for name in list(os.environ):
        if name.startswith("NAVICAM_"):
            monkeypatch.delenv(name)
    return monkeypatch


class TestDefaults:
    """Default values."""

    def test_defaults(self):
        config = AnalyzerConfig()

        assert config.objects.add_threshold == 5
        assert config.objects.ceiling == 10
        assert config.text.overall_distance_threshold == 0.45
        assert config.text.block_activator_threshold == 0.5
        assert config.text.levenshtein_distance_factor == 0.4
        assert config.label_confidence_threshold == 0.7
        assert config.consumer_name == "smartnotes"


class TestValidation:
    """Out-of-range values are rejected."""

    @pytest.mark.parametrize("add_threshold,ceiling", [(10, 10), (12, 10)])
    def test_add_threshold_below_ceiling(self, add_threshold, ceiling):
        with pytest.raises(ValidationError):
            ObjectTrackerConfig(add_threshold=add_threshold, ceiling=ceiling)

    def test_ratio_out_of_range(self):
        with pytest.raises(ValidationError):
            TextTrackerConfig(overall_distance_threshold=1.5)

    def test_from_dict_wraps_errors(self):
        with pytest.raises(ConfigError):
            AnalyzerConfig.from_dict({"objects": {"add_threshold": 0}})

    def test_from_dict_partial(self):
        config = AnalyzerConfig.from_dict({"text": {"overall_distance_threshold": 0.3}})

        assert config.text.overall_distance_threshold == 0.3
        assert config.text.block_activator_threshold == 0.5
        assert config.objects.add_threshold == 5


class TestSources:
    """File and environment sources."""

    def test_from_file(self, tmp_path):
        path = tmp_path / "navicam.json"
        path.write_text(json.dumps({"objects": {"add_threshold": 3, "ceiling": 6}}))

        config = AnalyzerConfig.from_file(path)

        assert config.objects.add_threshold == 3
        assert config.objects.ceiling == 6

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            AnalyzerConfig.from_file(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            AnalyzerConfig.from_file(path)

    def test_env_overrides(self, clean_env):
        clean_env.setenv("NAVICAM_ADD_THRESHOLD", "3")
        clean_env.setenv("NAVICAM_LEVENSHTEIN_DISTANCE_FACTOR", "0.25")
        clean_env.setenv("NAVICAM_CONSUMER", "notes")

        config = AnalyzerConfig.from_env()

        assert config.objects.add_threshold == 3
        assert config.text.levenshtein_distance_factor == 0.25
        assert config.consumer_name == "notes"

    def test_invalid_env_value(self, clean_env):
        clean_env.setenv("NAVICAM_CEILING", "lots")

        with pytest.raises(ConfigError):
            AnalyzerConfig.from_env()

    def test_load_config_env_wins_over_file(self, tmp_path, clean_env):
        path = tmp_path / "navicam.json"
        path.write_text(json.dumps({"label_confidence_threshold": 0.5, "consumer_name": "file"}))
        clean_env.setenv("NAVICAM_CONFIG", str(path))
        clean_env.setenv("NAVICAM_CONSUMER", "env")

        config = load_config()

        assert config.label_confidence_threshold == 0.5
        assert config.consumer_name == "env"

    def test_load_config_without_file(self, clean_env):
        assert load_config() == AnalyzerConfig()
