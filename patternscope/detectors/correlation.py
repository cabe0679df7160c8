"""
Correlation Detectors

Pairwise relationships between numeric fields.

Detectors:
- correlation: sample Pearson r, emitted when |r| > min_abs_correlation
- nonlinear_correlation: Spearman rho well above Pearson r (monotonic but
  not linear)
- polynomial: least-squares polynomial of degree 1..max_degree, emitted when
  a degree > 1 fits with R² > min_r_squared
"""

import math
from typing import List

import numpy as np

from patternscope.core.statistics import EPSILON, pearson, r_squared, spearman
from patternscope.detectors.base import PairDetector
from patternscope.patterns import AdvancedPattern, DataPattern, PatternMetadata, PatternType


def correlation_strength(value: float) -> str:
    """Verbal strength label for |r|."""
    magnitude = abs(value)
    if magnitude >= 0.9:
        return "very_strong"
    if magnitude >= 0.7:
        return "strong"
    if magnitude >= 0.5:
        return "moderate"
    if magnitude >= 0.3:
        return "weak"
    return "very_weak"


def correlation_significance(correlation: float, sample_size: int) -> float:
    """t statistic of r, scaled so that t >= 3 maps to 1."""
    denominator = 1.0 - correlation * correlation
    if denominator < EPSILON or sample_size <= 2:
        return 1.0 if sample_size > 2 else 0.0
    t = abs(correlation) * math.sqrt((sample_size - 2) / denominator)
    return min(1.0, t / 3.0)


class CorrelationDetector(PairDetector):
    """Linear (Pearson) correlation between field pairs."""

    name = "correlation"
    pattern_type = PatternType.CORRELATION.value
    algorithm = "pearson_correlation"
    min_samples = 2

    def detect_pair(self, first, second, x, y) -> List[DataPattern]:
        r = pearson(x, y)
        if abs(r) <= self.params.get("min_abs_correlation", 0.7):
            return []

        very_strong = abs(r) > self.params.get("very_strong", 0.9)
        direction = "positive" if r > 0 else "negative"
        return [DataPattern(
            type=self.pattern_type,
            confidence=abs(r),
            description=f"{direction.capitalize()} correlation between {first} and {second}",
            parameters={
                "correlation": r,
                "strength": "very strong" if very_strong else "strong",
                "direction": direction,
            },
            affected_fields=[first, second],
        )]


class NonlinearCorrelationDetector(PairDetector):
    """Monotonic relationships that Pearson r underrates."""

    name = "nonlinear_correlation"
    pattern_type = PatternType.CORRELATION.value
    algorithm = "spearman_correlation"
    min_samples = 3

    def detect_pair(self, first, second, x, y) -> List[DataPattern]:
        rho = spearman(x, y)
        r = pearson(x, y)

        if abs(rho) <= self.params.get("min_abs_spearman", 0.7):
            return []
        if abs(rho - r) <= self.params.get("min_rank_gap", 0.2):
            return []

        n = len(x)
        direction = "positive" if rho > 0 else "negative"
        return [AdvancedPattern(
            type=self.pattern_type,
            confidence=abs(rho),
            description=f"Non-linear {direction} correlation between {first} and {second}",
            parameters={
                "spearman_correlation": rho,
                "pearson_correlation": r,
                "relationship_type": "non_linear",
                "strength": correlation_strength(rho),
            },
            affected_fields=[first, second],
            algorithm=self.algorithm,
            statistical_significance=correlation_significance(rho, n),
            effect_size=abs(rho),
            metadata=PatternMetadata(
                sample_size=n,
                test_statistic=rho,
                algorithm_params={"method": "spearman"},
            ),
        )]


class PolynomialDetector(PairDetector):
    """Polynomial relationship of the second field on the first."""

    name = "polynomial"
    pattern_type = PatternType.CORRELATION.value
    algorithm = "polynomial_regression"
    min_samples = 3

    def detect_pair(self, first, second, x, y) -> List[DataPattern]:
        if np.std(x) < EPSILON or np.std(y) < EPSILON:
            return []

        max_degree = int(self.params.get("max_degree", 3))
        min_improvement = self.params.get("min_improvement", 0.02)
        distinct_x = len(np.unique(x))

        best_degree, best_r_squared, best_coefficients = 0, 0.0, []
        for degree in range(1, max_degree + 1):
            if distinct_x <= degree:
                break
            coefficients = np.polyfit(x, y, degree)
            fit = r_squared(y, np.polyval(coefficients, x))

            # Higher degree must earn its keep
            if best_degree == 0 or fit > best_r_squared + min_improvement:
                best_degree = degree
                best_r_squared = fit
                best_coefficients = [float(c) for c in coefficients[::-1]]

        if best_degree <= 1 or best_r_squared <= self.params.get("min_r_squared", 0.8):
            return []

        return [AdvancedPattern(
            type=self.pattern_type,
            confidence=min(1.0, best_r_squared),
            description=f"Polynomial relationship (degree {best_degree}) between {first} and {second}",
            parameters={
                "degree": best_degree,
                "r_squared": best_r_squared,
                "coefficients": best_coefficients,
                "relationship_type": "polynomial",
            },
            affected_fields=[first, second],
            algorithm=self.algorithm,
            statistical_significance=min(1.0, best_r_squared),
            effect_size=min(1.0, best_r_squared),
            metadata=PatternMetadata(
                sample_size=len(x),
                algorithm_params={"degree": best_degree},
            ),
        )]
