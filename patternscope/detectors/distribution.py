"""
Distribution Detector

Classifies each numeric field's shape from its sample skewness and excess
kurtosis. The goodness of fit is a closed-form heuristic, not a test.

Shape rules (first match wins):
    normal        |s| < 0.5 and |k| < 1        fit = 1 - (|s| + |k|) / 2
    exponential   s > 1.5                      fit = min(1, s / 3)
    uniform       |s| < 0.3 and |k + 1.2| < .5 fit = 1 - |k + 1.2|
    bimodal       k < -1                       fit = max(0, 1 + k)
    skewed        |s| > 1                      fit = min(1, |s| / 3)
    heavy_tailed  k > 3                        fit = min(1, k / 10)
    otherwise     normal                       fit = 0.5
"""

from typing import Dict, List, Tuple

import numpy as np

from patternscope.core.statistics import clip_unit, kurtosis, skewness
from patternscope.detectors.base import FieldDetector
from patternscope.patterns import AdvancedPattern, DataPattern, PatternMetadata, PatternType


def classify_shape(s: float, k: float) -> Tuple[str, float]:
    """(distribution type, goodness of fit in [0, 1])"""
    if abs(s) < 0.5 and abs(k) < 1:
        return "normal", clip_unit(1 - (abs(s) + abs(k)) / 2)
    if s > 1.5:
        return "exponential", clip_unit(s / 3)
    if abs(s) < 0.3 and abs(k + 1.2) < 0.5:
        return "uniform", clip_unit(1 - abs(k + 1.2))
    if k < -1:
        return "bimodal", clip_unit(1 + k)
    if abs(s) > 1:
        return "skewed", clip_unit(abs(s) / 3)
    if k > 3:
        return "heavy_tailed", clip_unit(k / 10)
    return "normal", 0.5


def normality_scores(s: float, k: float) -> Dict[str, float]:
    """Moment-based stand-ins for Shapiro-Wilk / Kolmogorov-Smirnov."""
    return {
        "shapiro_wilk": max(0.0, 1 - (abs(s) + abs(k)) / 4),
        "kolmogorov_smirnov": max(0.0, 1 - abs(s) / 2),
    }


class DistributionDetector(FieldDetector):
    """Distribution family per field."""

    name = "distribution"
    pattern_type = PatternType.DISTRIBUTION.value
    algorithm = "distribution_fitting"
    min_samples = 4

    def detect_field(self, column: str, values: np.ndarray) -> List[DataPattern]:
        s = skewness(values)
        k = kurtosis(values)
        shape, fit = classify_shape(s, k)

        if fit <= self.params.get("min_goodness_of_fit", 0.7):
            return []

        moments = {
            "mean": float(np.mean(values)),
            "std": float(np.std(values)),
            "skewness": s,
            "kurtosis": k,
        }
        tests = normality_scores(s, k)

        return [AdvancedPattern(
            type=self.pattern_type,
            confidence=fit,
            description=f"{column} follows a {shape} distribution",
            parameters={
                "distribution_type": shape,
                "parameters": moments,
                "goodness_of_fit": fit,
                "normality_tests": tests,
            },
            affected_fields=[column],
            algorithm=self.algorithm,
            statistical_significance=max(tests.values()),
            effect_size=fit,
            metadata=PatternMetadata(
                sample_size=len(values),
                algorithm_params=moments,
            ),
        )]
