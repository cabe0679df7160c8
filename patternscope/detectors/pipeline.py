"""
Pattern Detection Pipelines

PatternDetector runs the baseline detectors. AdvancedPatternDetector holds a
PatternDetector, enriches its output with PatternEnricher and adds the
advanced detectors.

Both accept any dataset form understood by patternscope.dataset and return
patterns sorted by confidence, highest first. Empty datasets, datasets
without numeric fields and degenerate series give fewer (or no) patterns,
never an exception.

Usage:
    from patternscope.detectors import detect_patterns, detect_advanced_patterns

    patterns = detect_patterns(records)
    advanced = detect_advanced_patterns(df)
"""

import logging
from typing import List, Optional, Sequence

import pandas as pd

from patternscope.config import Settings, get_settings
from patternscope.dataset import DatasetLike, numeric_frame
from patternscope.patterns import AdvancedPattern, DataPattern, sort_by_confidence

from .base import BaseDetector
from .enrichment import PatternEnricher
from .registry import get_detector, get_detectors_by_stage

logger = logging.getLogger(__name__)


class PatternDetector:
    """Baseline detection: trend, anomaly, correlation, cluster, seasonality."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        detectors: Optional[Sequence[str]] = None,
    ):
        self.settings = settings or get_settings()
        names = detectors if detectors is not None else get_detectors_by_stage("baseline")
        self.detectors: List[BaseDetector] = [get_detector(n, self.settings) for n in names]

    def detect_frame(self, frame: pd.DataFrame) -> List[DataPattern]:
        """Run every detector over an already-extracted numeric frame."""
        patterns: List[DataPattern] = []
        if frame.empty:
            return patterns
        for detector in self.detectors:
            patterns.extend(detector.detect(frame))
        return sort_by_confidence(patterns)

    def detect_patterns(self, data: Optional[DatasetLike]) -> List[DataPattern]:
        frame = numeric_frame(data)
        patterns = self.detect_frame(frame)
        logger.info(f"Baseline detection: {len(patterns)} pattern(s) over {len(frame)} records")
        return patterns


class AdvancedPatternDetector:
    """Baseline detection plus the advanced strategies, all annotated."""

    def __init__(
        self,
        base: Optional[PatternDetector] = None,
        settings: Optional[Settings] = None,
        detectors: Optional[Sequence[str]] = None,
    ):
        self.settings = settings or (base.settings if base is not None else get_settings())
        self.base = base or PatternDetector(settings=self.settings)
        self.enricher = PatternEnricher()
        names = detectors if detectors is not None else get_detectors_by_stage("advanced")
        self.detectors: List[BaseDetector] = [get_detector(n, self.settings) for n in names]

    def detect_frame(self, frame: pd.DataFrame) -> List[AdvancedPattern]:
        if frame.empty:
            return []

        n = len(frame)
        patterns: List[AdvancedPattern] = [
            self.enricher.enrich(p, n) for p in self.base.detect_frame(frame)
        ]
        for detector in self.detectors:
            patterns.extend(detector.detect(frame))
        return sort_by_confidence(patterns)

    def detect_advanced_patterns(self, data: Optional[DatasetLike]) -> List[AdvancedPattern]:
        frame = numeric_frame(data)
        patterns = self.detect_frame(frame)
        logger.info(f"Advanced detection: {len(patterns)} pattern(s) over {len(frame)} records")
        return patterns


# =============================================================================
# Module-level convenience
# =============================================================================

def detect_patterns(
    data: Optional[DatasetLike],
    settings: Optional[Settings] = None,
) -> List[DataPattern]:
    """Baseline patterns of a dataset, highest confidence first."""
    return PatternDetector(settings=settings).detect_patterns(data)


def detect_advanced_patterns(
    data: Optional[DatasetLike],
    settings: Optional[Settings] = None,
) -> List[AdvancedPattern]:
    """Baseline and advanced patterns of a dataset, highest confidence first."""
    return AdvancedPatternDetector(settings=settings).detect_advanced_patterns(data)
