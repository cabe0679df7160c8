"""
Periodicity Detectors

Repeating structure in the row order of each numeric field.

Detectors:
- seasonality: best positive autocorrelation over lags min_lag..min(n/4, max_lag)
- frequency: local peaks and valleys; significant peak spacing stands in
  for a spectral estimate of the dominant frequency
- cycles: several strong autocorrelation periods at once, with a harmonic
  interaction score

All three need a long series (see min_samples in settings).
"""

from dataclasses import dataclass
from typing import Dict, List

import numpy as np

from patternscope.core.statistics import autocorrelations, histogram_entropy
from patternscope.detectors.base import FieldDetector
from patternscope.patterns import AdvancedPattern, DataPattern, PatternMetadata, PatternType


class SeasonalityDetector(FieldDetector):
    """Autocorrelation seasonality."""

    name = "seasonality"
    pattern_type = PatternType.SEASONAL.value
    algorithm = "autocorrelation_analysis"
    min_samples = 50

    def detect_field(self, column: str, values: np.ndarray) -> List[DataPattern]:
        n = len(values)
        max_lag = min(n // 4, int(self.params.get("max_lag", 50)))
        lags = list(range(int(self.params.get("min_lag", 2)), max_lag + 1))

        best_period, best_correlation = 0, 0.0
        for lag, correlation in zip(lags, autocorrelations(values, lags)):
            if correlation > best_correlation:
                best_period, best_correlation = lag, correlation

        if best_correlation <= self.params.get("min_autocorrelation", 0.6):
            return []

        return [DataPattern(
            type=self.pattern_type,
            confidence=min(1.0, best_correlation),
            description=f"Seasonal pattern detected in {column} with period {best_period}",
            parameters={
                "period": best_period,
                "amplitude": float(np.std(values)),
            },
            affected_fields=[column],
        )]


# =============================================================================
# Peak analysis
# =============================================================================

@dataclass(frozen=True)
class Extremum:
    """Local maximum or minimum."""
    position: int
    magnitude: float
    significance: float


def peak_significance(values: np.ndarray, position: int) -> float:
    """
    Height of a point over its neighbourhood, in units of 2 local std.

    Window is [position - w, position + w) with w = min(10, n // 10).
    """
    n = len(values)
    width = min(10, n // 10)
    window = values[max(0, position - width):min(n, position + width)]
    std = float(np.std(window)) if len(window) else 0.0
    if std == 0:
        return 0.0
    return min(1.0, abs(values[position] - float(np.mean(window))) / (2 * std))


def find_extrema(values: np.ndarray):
    """Strict local maxima and minima (endpoints excluded)."""
    peaks: List[Extremum] = []
    valleys: List[Extremum] = []
    for i in range(1, len(values) - 1):
        if values[i] > values[i - 1] and values[i] > values[i + 1]:
            peaks.append(Extremum(i, float(values[i]), peak_significance(values, i)))
        elif values[i] < values[i - 1] and values[i] < values[i + 1]:
            valleys.append(Extremum(i, float(values[i]), peak_significance(values, i)))
    return peaks, valleys


class FrequencyDetector(FieldDetector):
    """Peak-spacing frequency analysis."""

    name = "frequency"
    pattern_type = PatternType.SEASONAL.value
    algorithm = "frequency_domain_analysis"
    min_samples = 50

    def analyze(self, values: np.ndarray) -> Dict:
        peaks, valleys = find_extrema(values)
        threshold = self.params.get("peak_significance", 0.5)
        significant = [p for p in peaks if p.significance > threshold]

        spacings = np.diff([p.position for p in significant])
        dominant = float(1.0 / np.mean(spacings)) if len(spacings) else 0.0
        harmonics = [dominant * k for k in (2, 3, 4)] if dominant > 0 else []

        return {
            "peaks": peaks,
            "valleys": valleys,
            "significant_peaks": significant,
            "dominant_frequency": dominant,
            "harmonic_frequencies": harmonics,
            "spectral_entropy": histogram_entropy(
                values, bins=int(self.params.get("entropy_bins", 20)), normalize=True,
            ),
            "periodicity_strength": min(1.0, len(significant) / 10),
        }

    def detect_field(self, column: str, values: np.ndarray) -> List[DataPattern]:
        analysis = self.analyze(values)
        n = len(values)
        patterns = []

        strength = analysis["periodicity_strength"]
        if strength > self.params.get("min_periodicity", 0.6):
            patterns.append(AdvancedPattern(
                type=PatternType.SEASONAL.value,
                confidence=strength,
                description=(
                    f"Strong periodic pattern in {column} with dominant frequency "
                    f"{analysis['dominant_frequency']:.3f}"
                ),
                parameters={
                    "dominant_frequency": analysis["dominant_frequency"],
                    "harmonic_frequencies": analysis["harmonic_frequencies"],
                    "spectral_entropy": analysis["spectral_entropy"],
                    "peak_count": len(analysis["peaks"]),
                    "periodicity_strength": strength,
                },
                affected_fields=[column],
                algorithm=self.algorithm,
                statistical_significance=strength,
                effect_size=strength,
                metadata=PatternMetadata(
                    sample_size=n,
                    algorithm_params={"method": "peak_spacing"},
                ),
            ))

        min_significance = self.params.get("multi_peak_significance", 0.7)
        strong_peaks = [p for p in analysis["peaks"] if p.significance > min_significance]
        if len(strong_peaks) >= int(self.params.get("min_multi_peaks", 3)):
            weakest = min(p.significance for p in strong_peaks)
            patterns.append(AdvancedPattern(
                type=PatternType.CYCLICAL.value,
                confidence=weakest,
                description=f"Multiple significant peaks detected in {column} indicating complex cyclical behavior",
                parameters={
                    "peak_count": len(strong_peaks),
                    "peak_positions": [p.position for p in strong_peaks],
                    "peak_magnitudes": [p.magnitude for p in strong_peaks],
                    "pattern_complexity": analysis["spectral_entropy"],
                },
                affected_fields=[column],
                algorithm="peak_detection",
                statistical_significance=weakest,
                effect_size=analysis["spectral_entropy"],
                metadata=PatternMetadata(
                    sample_size=n,
                    algorithm_params={"min_significance": min_significance},
                ),
            ))

        return patterns


# =============================================================================
# Multiple cycles
# =============================================================================

@dataclass(frozen=True)
class Cycle:
    period: int
    strength: float
    phase: float


def cycle_phase(values: np.ndarray, period: int) -> float:
    """Shift of the peak between the first two cycles, as a fraction of period."""
    if len(values) // period < 2:
        return 0.0
    first_peak = int(np.argmax(values[:period]))
    second_peak = int(np.argmax(values[period:2 * period]))
    return (second_peak - first_peak) / period


def cycle_interaction(cycles: List[Cycle], tolerance: float = 0.1) -> float:
    """Summed strength products of near-harmonic period pairs, capped at 1."""
    interaction = 0.0
    for i in range(len(cycles) - 1):
        for j in range(i + 1, len(cycles)):
            long_period = max(cycles[i].period, cycles[j].period)
            short_period = min(cycles[i].period, cycles[j].period)
            ratio = long_period / short_period
            if abs(ratio - round(ratio)) < tolerance:
                interaction += cycles[i].strength * cycles[j].strength
    return min(1.0, interaction)


class MultiCycleDetector(FieldDetector):
    """Several simultaneous autocorrelation cycles."""

    name = "cycles"
    pattern_type = PatternType.SEASONAL.value
    algorithm = "multiple_cycle_detection"
    min_samples = 100

    def find_cycles(self, values: np.ndarray) -> List[Cycle]:
        """Candidate cycles, strongest first."""
        periods = list(range(int(self.params.get("min_period", 5)), len(values) // 4 + 1))
        candidate_strength = self.params.get("candidate_strength", 0.3)

        cycles = [
            Cycle(period, abs(acf), cycle_phase(values, period))
            for period, acf in zip(periods, autocorrelations(values, periods))
            if abs(acf) > candidate_strength
        ]
        return sorted(cycles, key=lambda c: c.strength, reverse=True)

    def detect_field(self, column: str, values: np.ndarray) -> List[DataPattern]:
        cycles = self.find_cycles(values)
        significant = [c for c in cycles if c.strength > self.params.get("min_strength", 0.7)]
        if len(significant) < int(self.params.get("min_cycles", 2)):
            return []

        interaction = cycle_interaction(significant, self.params.get("harmonic_tolerance", 0.1))
        strongest = significant[0].strength
        periods = [c.period for c in significant]

        return [AdvancedPattern(
            type=self.pattern_type,
            confidence=min(1.0, strongest),
            description=(
                f"Multiple overlapping cycles detected in {column}: "
                f"{', '.join(str(p) for p in periods)} period cycles"
            ),
            parameters={
                "cycle_count": len(significant),
                "cycle_periods": periods,
                "cycle_strengths": [c.strength for c in significant],
                "cycle_phases": [c.phase for c in significant],
                "dominant_cycle": periods[0],
                "interaction_strength": interaction,
            },
            affected_fields=[column],
            algorithm=self.algorithm,
            statistical_significance=min(1.0, strongest),
            effect_size=interaction,
            metadata=PatternMetadata(
                sample_size=len(values),
                algorithm_params={
                    "min_period": int(self.params.get("min_period", 5)),
                    "max_period": len(values) // 4,
                },
            ),
        )]
