"""
Change Point Detector

CUSUM of the mean-centred series. Wherever |cusum| exceeds
sigma_threshold * std the series has drifted away from its overall mean;
each contiguous excursion is reported once, at its peak.

    magnitude    = |cusum| / threshold
    significance = min(1, magnitude - 1)

Excursions with significance > keep_significance are kept; a pattern is
emitted when any kept point exceeds min_significance.
"""

from dataclasses import dataclass
from typing import List

import numpy as np

from patternscope.detectors.base import FieldDetector
from patternscope.patterns import AdvancedPattern, DataPattern, PatternMetadata, PatternType


@dataclass(frozen=True)
class ChangePoint:
    position: int
    magnitude: float
    significance: float
    direction: str


def _runs(mask: np.ndarray) -> List[np.ndarray]:
    """Index arrays of the contiguous True runs of a boolean mask."""
    indices = np.flatnonzero(mask)
    if len(indices) == 0:
        return []
    breaks = np.flatnonzero(np.diff(indices) > 1) + 1
    return np.split(indices, breaks)


def find_change_points(
    values: np.ndarray,
    sigma_threshold: float = 3.0,
    keep_significance: float = 0.5,
) -> List[ChangePoint]:
    """CUSUM change points, one per contiguous excursion."""
    std = float(np.std(values))
    if std == 0:
        return []

    threshold = sigma_threshold * std
    cusum = np.cumsum(values - np.mean(values))
    magnitude = np.abs(cusum) / threshold
    significance = np.minimum(1.0, magnitude - 1.0)

    points = []
    for run in _runs((magnitude > 1.0) & (significance > keep_significance)):
        position = int(run[np.argmax(magnitude[run])])
        before = values[:position + 1]
        after = values[position + 1:]
        if len(after):
            rising = np.mean(after) > np.mean(before)
        else:
            rising = cusum[position] > 0
        points.append(ChangePoint(
            position=position,
            magnitude=float(magnitude[position]),
            significance=float(significance[position]),
            direction="increase" if rising else "decrease",
        ))
    return points


class ChangePointDetector(FieldDetector):
    """Mean shifts per field."""

    name = "change_point"
    pattern_type = PatternType.ANOMALY.value
    algorithm = "change_point_detection"
    min_samples = 20

    def detect_field(self, column: str, values: np.ndarray) -> List[DataPattern]:
        points = find_change_points(
            values,
            sigma_threshold=self.params.get("sigma_threshold", 3.0),
            keep_significance=self.params.get("keep_significance", 0.5),
        )
        min_significance = self.params.get("min_significance", 0.8)
        significant = [p for p in points if p.significance > min_significance]
        if not significant:
            return []

        strongest = max(p.significance for p in significant)
        return [AdvancedPattern(
            type=self.pattern_type,
            confidence=strongest,
            description=f"{len(significant)} significant change point(s) detected in {column}",
            parameters={
                "change_points": [p.position for p in significant],
                "change_magnitudes": [p.magnitude for p in significant],
                "change_directions": [p.direction for p in significant],
                "detection_method": "cumulative_sum",
            },
            affected_fields=[column],
            algorithm=self.algorithm,
            statistical_significance=strongest,
            effect_size=max(p.magnitude for p in significant),
            metadata=PatternMetadata(
                sample_size=len(values),
                algorithm_params={"method": "cusum", "threshold": min_significance},
            ),
        )]
