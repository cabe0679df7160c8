"""
Pattern Enrichment

Turns baseline DataPatterns into AdvancedPatterns by attaching an algorithm
tag, a sample-size adjusted significance and an effect size.

    significance = clip(confidence * min(1, sqrt(n / 30)))

Effect size by type:
    trend        |slope| / 10
    correlation  |correlation|
    anomaly      count / n
    otherwise    confidence
"""

import math

from patternscope.core.statistics import clip_unit
from patternscope.patterns import AdvancedPattern, DataPattern, PatternMetadata, PatternType

ALGORITHM_BY_TYPE = {
    PatternType.TREND.value: "linear_regression",
    PatternType.SEASONAL.value: "autocorrelation_analysis",
    PatternType.CORRELATION.value: "pearson_correlation",
    PatternType.CLUSTER.value: "k_means_clustering",
    PatternType.ANOMALY.value: "statistical_outlier_detection",
}

# Sample size at which significance is no longer discounted
FULL_SIGNIFICANCE_SAMPLES = 30


class PatternEnricher:
    """Decorates baseline patterns with advanced annotations."""

    def algorithm_for(self, pattern_type: str) -> str:
        return ALGORITHM_BY_TYPE.get(pattern_type, "unknown")

    def significance(self, pattern: DataPattern, sample_size: int) -> float:
        if sample_size <= 0:
            return 0.0
        factor = min(1.0, math.sqrt(sample_size / FULL_SIGNIFICANCE_SAMPLES))
        return clip_unit(pattern.confidence * factor)

    def effect_size(self, pattern: DataPattern, sample_size: int) -> float:
        params = pattern.parameters
        if pattern.type == PatternType.TREND.value:
            return abs(params.get("slope", 0.0)) / 10
        if pattern.type == PatternType.CORRELATION.value:
            return abs(params.get("correlation", pattern.confidence))
        if pattern.type == PatternType.ANOMALY.value:
            return params.get("count", 0) / sample_size if sample_size else 0.0
        return pattern.confidence

    def enrich(self, pattern: DataPattern, sample_size: int) -> AdvancedPattern:
        """AdvancedPattern for a baseline pattern over sample_size records."""
        return AdvancedPattern.from_pattern(
            pattern,
            algorithm=self.algorithm_for(pattern.type),
            statistical_significance=self.significance(pattern, sample_size),
            effect_size=float(self.effect_size(pattern, sample_size)),
            metadata=PatternMetadata(
                sample_size=sample_size,
                algorithm_params=dict(pattern.parameters),
            ),
        )
