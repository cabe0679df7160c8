"""
Tests for settings and logging setup.

Run with: pytest tests/test_config.py -v
"""

import logging
from pathlib import Path

import numpy as np
import pandas as pd
import pytest
import yaml

from patternscope.config import BUILTIN_DEFAULTS, CONFIG_ENV_VAR, Settings, configure, get_settings
from patternscope.detectors import get_detector
from patternscope.errors import ConfigurationError
from patternscope.utils.logging import setup_logging


@pytest.fixture
def settings_file(tmp_path):
    path = tmp_path / "patternscope.yaml"
    path.write_text(
        "detectors:\n"
        "  trend:\n"
        "    min_slope: 5.0\n"
        "similarity:\n"
        "  default_threshold: 0.9\n"
    )
    return path


class TestSettings:
    """Layered lookup: defaults < file < overrides."""

    def test_defaults(self):
        settings = Settings()
        assert settings.get("detectors.trend.min_slope") == 0.1
        assert settings.get("similarity.cluster_threshold") == 0.8
        assert settings.get("no.such.key", "fallback") == "fallback"

    def test_file_layer(self, settings_file):
        settings = Settings(config_path=settings_file)
        assert settings.get("detectors.trend.min_slope") == 5.0
        assert settings.get("detectors.trend.min_r_squared") == 0.5
        assert settings.get("similarity.default_threshold") == 0.9

    def test_overrides_win(self, settings_file):
        settings = Settings(
            config_path=settings_file,
            overrides={"detectors": {"trend": {"min_slope": 7.0}}},
        )
        assert settings.get("detectors.trend.min_slope") == 7.0

    def test_section_merges_layers(self, settings_file):
        section = Settings(config_path=settings_file).section("detectors.trend")
        assert section == {"min_slope": 5.0, "min_r_squared": 0.5}

    def test_set_and_reset(self):
        settings = Settings()
        settings.set("fingerprint.sample_records", 25)
        assert settings.get("fingerprint.sample_records") == 25
        settings.reset()
        assert settings.get("fingerprint.sample_records") == 10

    def test_get_all(self, settings_file):
        merged = Settings(config_path=settings_file).get_all()
        assert merged["detectors"]["trend"]["min_slope"] == 5.0
        assert merged["detectors"]["anomaly"]["z_threshold"] == 2.0

    def test_env_var(self, settings_file, monkeypatch):
        monkeypatch.setenv(CONFIG_ENV_VAR, str(settings_file))
        assert Settings().get("similarity.default_threshold") == 0.9

    def test_shipped_file_matches_defaults(self):
        """config/patternscope.yaml documents every built-in default."""
        path = Path(__file__).resolve().parent.parent / "config" / "patternscope.yaml"
        with open(path) as f:
            assert yaml.safe_load(f) == BUILTIN_DEFAULTS

    def test_configure_replaces_global(self, settings_file):
        configured = configure(config_path=settings_file)
        assert get_settings() is configured
        assert get_settings(reload=True).get("similarity.default_threshold") == 0.7


class TestSettingsErrors:

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            Settings(config_path=tmp_path / "absent.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("detectors: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            Settings(config_path=path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            Settings(config_path=path)


class TestSettingsDriveDetectors:

    def test_detector_params(self):
        settings = Settings(overrides={"detectors": {"seasonality": {"min_samples": 10}}})
        detector = get_detector("seasonality", settings)
        assert detector.min_samples == 10

    def test_strict_correlation(self):
        """Raising the cutoff suppresses a moderate correlation."""
        np.random.seed(42)
        x = np.random.randn(200)
        frame = pd.DataFrame({"x": x, "y": x + np.random.randn(200) * 0.4})

        assert get_detector("correlation").detect(frame)
        strict = Settings(overrides={"detectors": {"correlation": {"min_abs_correlation": 0.99}}})
        assert get_detector("correlation", strict).detect(frame) == []


class TestLogging:

    @pytest.fixture(autouse=True)
    def reset_package_logger(self):
        yield
        package_logger = logging.getLogger("patternscope")
        for handler in package_logger.handlers:
            handler.close()
        package_logger.handlers = []
        package_logger.setLevel(logging.NOTSET)

    def test_level_and_file_from_settings(self, tmp_path):
        log_file = tmp_path / "logs" / "run.log"
        settings = Settings(overrides={"logging": {"level": "DEBUG", "file": str(log_file)}})
        package_logger = setup_logging(settings)

        logging.getLogger("patternscope.detectors.trend").debug("hello from tests")
        for handler in package_logger.handlers:
            handler.flush()

        assert package_logger.level == logging.DEBUG
        assert "hello from tests" in log_file.read_text()

    def test_explicit_level_wins(self):
        settings = Settings(overrides={"logging": {"level": "DEBUG"}})
        assert setup_logging(settings, level="warning").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        assert setup_logging(Settings(), level="LOUD").level == logging.INFO

    def test_repeat_setup_replaces_handlers(self):
        setup_logging(Settings())
        assert len(setup_logging(Settings()).handlers) == 1
