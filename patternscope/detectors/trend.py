"""
Trend Detector

Linear regression of each numeric field against its row index.

Emits a trend pattern when |slope| > min_slope and R² > min_r_squared.
Confidence is R².
"""

from typing import List

import numpy as np

from patternscope.core.statistics import clip_unit, linear_regression
from patternscope.detectors.base import FieldDetector
from patternscope.patterns import DataPattern, PatternType


class TrendDetector(FieldDetector):
    """Linear trend per field."""

    name = "trend"
    pattern_type = PatternType.TREND.value
    algorithm = "linear_regression"
    min_samples = 2

    def detect_field(self, column: str, values: np.ndarray) -> List[DataPattern]:
        fit = linear_regression(values)

        min_slope = self.params.get("min_slope", 0.1)
        min_r_squared = self.params.get("min_r_squared", 0.5)
        if abs(fit.slope) <= min_slope or fit.r_squared <= min_r_squared:
            return []

        direction = "increasing" if fit.slope > 0 else "decreasing"
        return [DataPattern(
            type=self.pattern_type,
            confidence=clip_unit(fit.r_squared),
            description=f"{direction.capitalize()} trend in {column}",
            parameters={
                "slope": fit.slope,
                "intercept": fit.intercept,
                "r_squared": fit.r_squared,
                "direction": direction,
            },
            affected_fields=[column],
        )]
