"""
Anomaly Detector

Z-score outliers per field, using the population standard deviation.

A value is anomalous when |value - mean| > z_threshold * std.
Confidence grows with anomaly density:
    min(max_confidence, count / n * density_multiplier)
"""

from typing import List

import numpy as np

from patternscope.detectors.base import FieldDetector
from patternscope.patterns import DataPattern, PatternType


class AnomalyDetector(FieldDetector):
    """Z-score outliers per field."""

    name = "anomaly"
    pattern_type = PatternType.ANOMALY.value
    algorithm = "statistical_outlier_detection"

    def detect_field(self, column: str, values: np.ndarray) -> List[DataPattern]:
        n = len(values)
        mean = float(np.mean(values))
        std = float(np.std(values))
        threshold = float(self.params.get("z_threshold", 2.0))

        positions = np.flatnonzero(np.abs(values - mean) > threshold * std)
        count = len(positions)
        if count == 0:
            return []

        confidence = min(
            self.params.get("max_confidence", 0.9),
            count / n * self.params.get("density_multiplier", 5.0),
        )

        return [DataPattern(
            type=self.pattern_type,
            confidence=float(confidence),
            description=f"{count} anomalous values detected in {column}",
            parameters={
                "count": count,
                "percentage": count / n * 100,
                "threshold": threshold,
                "mean": mean,
                "std": std,
                "positions": [int(p) for p in positions],
            },
            affected_fields=[column],
        )]
