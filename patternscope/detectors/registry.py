"""
Detector Registry

Registry of all pattern detectors, keyed by name. The name doubles as the
settings section (detectors.<name>).

Usage:
    from patternscope.detectors import get_detector, list_detectors

    trend = get_detector("trend")
    patterns = trend.detect(frame)

    for name, info in list_detectors(stage="advanced").items():
        print(f"{name}: {info['description']}")
"""

from typing import Any, Dict, List, Optional, Type

from patternscope.config import Settings

from .anomaly import AnomalyDetector
from .autoregressive import AutoregressiveDetector
from .base import BaseDetector
from .changepoint import ChangePointDetector
from .clustering import DBSCANOutlierDetector, HierarchicalClusterDetector, KMeansClusterDetector
from .correlation import CorrelationDetector, NonlinearCorrelationDetector, PolynomialDetector
from .distribution import DistributionDetector
from .periodicity import FrequencyDetector, MultiCycleDetector, SeasonalityDetector
from .trend import TrendDetector


# Detector registry
DETECTOR_REGISTRY: Dict[str, Type[BaseDetector]] = {
    "trend": TrendDetector,
    "anomaly": AnomalyDetector,
    "correlation": CorrelationDetector,
    "cluster": KMeansClusterDetector,
    "seasonality": SeasonalityDetector,
    "distribution": DistributionDetector,
    "nonlinear_correlation": NonlinearCorrelationDetector,
    "polynomial": PolynomialDetector,
    "hierarchical": HierarchicalClusterDetector,
    "frequency": FrequencyDetector,
    "autoregressive": AutoregressiveDetector,
    "change_point": ChangePointDetector,
    "cycles": MultiCycleDetector,
    "dbscan": DBSCANOutlierDetector,
}


# Detector metadata
DETECTOR_INFO: Dict[str, Dict[str, Any]] = {
    "trend": {
        "stage": "baseline",
        "pattern_type": "trend",
        "description": "Linear regression against row index",
    },
    "anomaly": {
        "stage": "baseline",
        "pattern_type": "anomaly",
        "description": "Z-score outliers (population std)",
    },
    "correlation": {
        "stage": "baseline",
        "pattern_type": "correlation",
        "description": "Pairwise Pearson correlation",
    },
    "cluster": {
        "stage": "baseline",
        "pattern_type": "cluster",
        "description": "k-means clustering with silhouette gate",
    },
    "seasonality": {
        "stage": "baseline",
        "pattern_type": "seasonal",
        "description": "Best positive autocorrelation lag",
    },
    "distribution": {
        "stage": "advanced",
        "pattern_type": "distribution",
        "description": "Skewness/kurtosis distribution family",
    },
    "nonlinear_correlation": {
        "stage": "advanced",
        "pattern_type": "correlation",
        "description": "Spearman rank correlation well above Pearson",
    },
    "polynomial": {
        "stage": "advanced",
        "pattern_type": "correlation",
        "description": "Polynomial relationship of degree 2 or more",
    },
    "hierarchical": {
        "stage": "advanced",
        "pattern_type": "cluster",
        "description": "Ward hierarchical clustering",
    },
    "frequency": {
        "stage": "advanced",
        "pattern_type": "seasonal",
        "description": "Peak spacing frequency and multi-peak analysis",
    },
    "autoregressive": {
        "stage": "advanced",
        "pattern_type": "trend",
        "description": "Least-squares AR(1..3) fit",
    },
    "change_point": {
        "stage": "advanced",
        "pattern_type": "anomaly",
        "description": "CUSUM mean shifts",
    },
    "cycles": {
        "stage": "advanced",
        "pattern_type": "seasonal",
        "description": "Multiple overlapping autocorrelation cycles",
    },
    "dbscan": {
        "stage": "advanced",
        "pattern_type": "anomaly",
        "description": "DBSCAN outlier clusters",
    },
}


def get_detector(name: str, settings: Optional[Settings] = None) -> BaseDetector:
    """
    Get a detector instance by name.
    """
    if name not in DETECTOR_REGISTRY:
        available = list(DETECTOR_REGISTRY.keys())
        raise ValueError(f"Unknown detector: {name}. Available: {available}")

    detector_class = DETECTOR_REGISTRY[name]
    return detector_class(settings=settings)


def list_detectors(stage: Optional[str] = None) -> Dict[str, Dict[str, Any]]:
    """List detectors with metadata, optionally for one stage."""
    if stage is None:
        return {name: dict(info) for name, info in DETECTOR_INFO.items()}
    return {name: dict(info) for name, info in DETECTOR_INFO.items() if info["stage"] == stage}


def get_detectors_by_stage(stage: str) -> List[str]:
    """Detector names for a stage ('baseline' or 'advanced'), in registry order."""
    return [name for name, info in DETECTOR_INFO.items() if info["stage"] == stage]
