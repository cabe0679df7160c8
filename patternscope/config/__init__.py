"""
patternscope Settings
=====================

Layered configuration for detectors, fingerprints and the similarity engine.

Configuration hierarchy (lowest to highest priority):
1. Built-in defaults (BUILTIN_DEFAULTS)
2. YAML settings file (explicit path, or $PATTERNSCOPE_CONFIG)
3. Runtime overrides

Usage:
    from patternscope.config import get_settings, Settings

    settings = get_settings()
    min_slope = settings.get("detectors.trend.min_slope", 0.1)

    # Whole section as a merged dict
    trend_settings = settings.section("detectors.trend")

    # Private settings object for one engine
    strict = Settings(overrides={"detectors": {"correlation": {"min_abs_correlation": 0.9}}})
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from patternscope.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PATTERNSCOPE_CONFIG"


BUILTIN_DEFAULTS: Dict[str, Any] = {
    "detectors": {
        # Baseline detectors
        "trend": {
            "min_slope": 0.1,
            "min_r_squared": 0.5,
        },
        "anomaly": {
            "z_threshold": 2.0,
            "max_confidence": 0.9,
            "density_multiplier": 5.0,
        },
        "correlation": {
            "min_abs_correlation": 0.7,
            "very_strong": 0.9,
        },
        "cluster": {
            "n_clusters": 3,
            "max_iter": 100,
            "n_init": 10,
            "min_samples": 10,
            "min_silhouette": 0.5,
            "random_state": 42,
        },
        "seasonality": {
            "min_samples": 50,
            "min_lag": 2,
            "max_lag": 50,
            "min_autocorrelation": 0.6,
        },
        # Advanced detectors
        "distribution": {
            "min_samples": 4,
            "min_goodness_of_fit": 0.7,
        },
        "nonlinear_correlation": {
            "min_abs_spearman": 0.7,
            "min_rank_gap": 0.2,
        },
        "polynomial": {
            "max_degree": 3,
            "min_r_squared": 0.8,
            "min_improvement": 0.02,
        },
        "hierarchical": {
            "min_samples": 10,
            "levels": [2, 3, 4, 5],
            "min_silhouette": 0.6,
            "linkage": "ward",
        },
        "frequency": {
            "min_samples": 50,
            "peak_significance": 0.5,
            "min_periodicity": 0.6,
            "multi_peak_significance": 0.7,
            "min_multi_peaks": 3,
            "entropy_bins": 20,
        },
        "autoregressive": {
            "min_samples": 30,
            "orders": [1, 2, 3],
            "min_r_squared": 0.6,
            "max_p_value": 0.05,
        },
        "change_point": {
            "min_samples": 20,
            "sigma_threshold": 3.0,
            "keep_significance": 0.5,
            "min_significance": 0.8,
        },
        "cycles": {
            "min_samples": 100,
            "min_period": 5,
            "candidate_strength": 0.3,
            "min_strength": 0.7,
            "min_cycles": 2,
            "harmonic_tolerance": 0.1,
        },
        "dbscan": {
            "eps_sample_size": 100,
            "eps_percentile": 10,
            "min_samples_fraction": 0.05,
            "small_cluster_fraction": 0.1,
        },
    },
    "fingerprint": {
        "sample_records": 10,
        "entropy_bins": 10,
        "seasonal_periods": [7, 12, 24, 30, 365],
        "min_seasonal_samples": 24,
        "max_significant_lag": 50,
        "significant_autocorrelation": 0.3,
        "max_reported_lags": 10,
        "max_frequency_lag": 100,
        "min_stationarity_window": 10,
        "iqr_multiplier": 1.5,
        "anomaly_cluster_gap": 5,
        "anomaly_cluster_severity": 1.5,
        "normalization": {
            "mean": [-10.0, 10.0],
            "std": [0.0, 10.0],
            "skewness": [-3.0, 3.0],
            "kurtosis": [-3.0, 3.0],
            "entropy": [0.0, 4.0],
        },
        "indicator_types": ["trend", "seasonal", "correlation", "cluster", "anomaly"],
    },
    "similarity": {
        "default_threshold": 0.7,
        "cluster_threshold": 0.8,
        "feature_cutoff": 0.7,
        "very_similar": 0.8,
        "moderately_similar": 0.5,
        "trend_divergence": 0.3,
        "anomaly_density_divergence": 0.1,
        "max_recommendations": 5,
        "dominant_patterns": 3,
    },
    "logging": {
        "level": "INFO",
        "file": None,
    },
}


class Settings:
    """
    Layered settings for patternscope.

    Lookups use dot notation ("detectors.trend.min_slope"). Each layer is a
    nested dict; the highest-priority layer holding a non-None value wins.
    """

    def __init__(
        self,
        config_path: Optional[Union[str, Path]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize settings.

        Args:
            config_path: YAML settings file. Falls back to $PATTERNSCOPE_CONFIG.
            overrides: Runtime overrides (nested dict)
        """
        self._defaults: Dict[str, Any] = copy.deepcopy(BUILTIN_DEFAULTS)
        self._settings: Dict[str, Any] = {}
        self._overrides: Dict[str, Any] = copy.deepcopy(overrides) if overrides else {}

        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR) or None

        self.config_path = Path(config_path) if config_path else None
        if self.config_path is not None:
            self._settings = self._load_file(self.config_path)

    def _load_file(self, path: Path) -> Dict[str, Any]:
        """Load a YAML settings file."""
        if not path.exists():
            raise ConfigurationError(f"Settings file not found: {path}")

        try:
            with open(path) as f:
                loaded = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            logger.error(f"Failed to parse settings {path}: {e}")
            raise ConfigurationError(f"Invalid YAML in {path}: {e}")

        if not isinstance(loaded, dict):
            raise ConfigurationError(f"Settings file {path} must contain a mapping")

        logger.info(f"Loaded settings from {path}")
        return loaded

    def _merge_dict(self, base: Dict, overlay: Dict) -> None:
        """Recursively merge overlay into base."""
        for key, value in overlay.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_dict(base[key], value)
            else:
                base[key] = copy.deepcopy(value)

    def _get_nested(self, d: Dict, key: str) -> Any:
        """Get nested dictionary value using dot notation."""
        value = d
        for k in key.split("."):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return None
        return value

    def _set_nested(self, d: Dict, key: str, value: Any) -> None:
        """Set nested dictionary value using dot notation."""
        keys = key.split(".")
        for k in keys[:-1]:
            d = d.setdefault(k, {})
        d[keys[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value.

        Args:
            key: Dot-notation key (e.g., "similarity.default_threshold")
            default: Default value if not found

        Returns:
            Setting value
        """
        for layer in [self._overrides, self._settings, self._defaults]:
            value = self._get_nested(layer, key)
            if value is not None:
                return value
        return default

    def section(self, key: str) -> Dict[str, Any]:
        """Merged copy of a settings section (all layers)."""
        result: Dict[str, Any] = {}
        for layer in [self._defaults, self._settings, self._overrides]:
            value = self._get_nested(layer, key)
            if isinstance(value, dict):
                self._merge_dict(result, value)
        return result

    def set(self, key: str, value: Any) -> None:
        """Set a runtime override."""
        self._set_nested(self._overrides, key, value)

    def get_all(self) -> Dict[str, Any]:
        """Get all effective settings."""
        result = copy.deepcopy(self._defaults)
        self._merge_dict(result, self._settings)
        self._merge_dict(result, self._overrides)
        return result

    def reset(self) -> None:
        """Drop runtime overrides."""
        self._overrides = {}


# Module-level convenience

_settings: Optional[Settings] = None


def get_settings(reload: bool = False) -> Settings:
    """Get the process-wide default Settings instance."""
    global _settings
    if _settings is None or reload:
        _settings = Settings()
    return _settings


def configure(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> Settings:
    """Replace the process-wide default Settings instance."""
    global _settings
    _settings = Settings(config_path=config_path, overrides=overrides)
    return _settings


__all__ = [
    "BUILTIN_DEFAULTS",
    "CONFIG_ENV_VAR",
    "Settings",
    "get_settings",
    "configure",
]
