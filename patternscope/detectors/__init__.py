"""
patternscope Detectors Module

Baseline and advanced pattern detectors, their registry and the two
detection pipelines.

Usage:
    from patternscope.detectors import detect_patterns, get_detector

    patterns = detect_patterns(records)
    polynomial = get_detector("polynomial")
"""

from .base import BaseDetector, FieldDetector, PairDetector
from .enrichment import PatternEnricher
from .pipeline import (
    AdvancedPatternDetector,
    PatternDetector,
    detect_advanced_patterns,
    detect_patterns,
)
from .registry import (
    DETECTOR_INFO,
    DETECTOR_REGISTRY,
    get_detector,
    get_detectors_by_stage,
    list_detectors,
)

__all__ = [
    "BaseDetector",
    "FieldDetector",
    "PairDetector",
    "PatternEnricher",
    "PatternDetector",
    "AdvancedPatternDetector",
    "detect_patterns",
    "detect_advanced_patterns",
    "DETECTOR_REGISTRY",
    "DETECTOR_INFO",
    "get_detector",
    "list_detectors",
    "get_detectors_by_stage",
]
