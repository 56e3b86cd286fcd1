"""Unit tests for the configuration system.

Tests VolumeConfig validation and JSON persistence.
"""

import pytest
import json
import tempfile
from pathlib import Path
from polyvolume.config import (
    DEFAULT_TOLERANCE,
    VolumeConfig,
    create_default_config,
    create_legacy_config
)
from polyvolume.errors import ConfigurationError, InvalidParameterError


class TestVolumeConfig:
    """Test VolumeConfig validation."""

    def test_defaults(self):
        config = VolumeConfig()
        assert config.tolerance == DEFAULT_TOLERANCE == 1e-4
        assert config.one_sided_tolerance is False
        assert config.check_bounds is True
        assert config.log_level == "INFO"
        assert config.log_dir is None

    def test_valid_config(self):
        """Default configuration should pass validation."""
        assert VolumeConfig().validate() == []

    @pytest.mark.parametrize("tolerance", [0.0, -1e-4, float("inf"), float("nan")])
    def test_invalid_tolerance(self, tolerance):
        """Tolerance must be positive and finite."""
        errors = VolumeConfig(tolerance=tolerance).validate()
        assert len(errors) == 1
        assert "tolerance" in errors[0]

    def test_non_numeric_tolerance(self):
        errors = VolumeConfig(tolerance="small").validate()
        assert any("must be a number" in e for e in errors)

    def test_invalid_log_level(self):
        errors = VolumeConfig(log_level="VERBOSE").validate()
        assert any("log_level" in e for e in errors)

    def test_log_level_case_insensitive(self):
        assert VolumeConfig(log_level="debug").validate() == []


class TestConfigSerialization:
    """Test dictionary and JSON round trips."""

    def test_to_dict(self):
        config_dict = VolumeConfig(tolerance=1e-6).to_dict()
        assert config_dict["tolerance"] == 1e-6
        assert set(config_dict) == {
            "tolerance", "one_sided_tolerance", "check_bounds", "log_level", "log_dir"
        }

    def test_from_dict_partial(self):
        """Missing keys fall back to defaults."""
        config = VolumeConfig.from_dict({"check_bounds": False})
        assert config.check_bounds is False
        assert config.tolerance == DEFAULT_TOLERANCE

    def test_from_dict_unknown_key(self):
        with pytest.raises(InvalidParameterError, match="Unknown configuration keys"):
            VolumeConfig.from_dict({"epsilon": 1e-4})

    def test_from_dict_rejects_non_object(self):
        with pytest.raises(ConfigurationError, match="must be a JSON object"):
            VolumeConfig.from_dict([1, 2])

    def test_load_non_object_file(self, tmp_path):
        filepath = tmp_path / "config.json"
        filepath.write_text(json.dumps([1, 2]))

        with pytest.raises(ConfigurationError, match="must be a JSON object"):
            VolumeConfig.load_from_file(str(filepath))

    def test_save_and_load(self):
        config = VolumeConfig(tolerance=1e-3, one_sided_tolerance=True, log_level="DEBUG")

        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = Path(tmpdir) / "nested" / "config.json"
            config.save_to_file(str(filepath))

            with open(filepath) as f:
                assert json.load(f)["tolerance"] == 1e-3

            loaded = VolumeConfig.load_from_file(str(filepath))

        assert loaded == config

    def test_load_missing_file(self):
        with pytest.raises(FileNotFoundError):
            VolumeConfig.load_from_file("/nonexistent/config.json")

    def test_load_invalid_config(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = Path(tmpdir) / "config.json"
            filepath.write_text(json.dumps({"tolerance": -1.0}))

            with pytest.raises(ConfigurationError, match="Invalid configuration"):
                VolumeConfig.load_from_file(str(filepath))


class TestConfigPresets:
    """Test preset configurations."""

    def test_default_config(self):
        config = create_default_config()
        assert config == VolumeConfig()
        assert config.one_sided_tolerance is False

    def test_legacy_config(self):
        config = create_legacy_config()
        assert config.one_sided_tolerance is True
        assert config.validate() == []
