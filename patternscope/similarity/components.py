"""
Component similarities between two fingerprints.

Each component is a mean of closeness scores in [0, 1]:

- statistical: per shared field, mean of mean/std/skewness/kurtosis
  closeness and distribution-family match (1, else 0.5); averaged over fields
- temporal: seasonality, trend, periodicity, stationarity and dominant
  frequency closeness
- relational: dependency closeness, matrix hash match, mutual-information
  key overlap
- anomaly: density closeness, mean severity closeness, signature match

Identical fingerprints score 1 on every component.
"""

from typing import Dict

from patternscope.fingerprint.models import Fingerprint


def _relative_closeness(a: float, b: float) -> float:
    """1 - |a - b| / (|a| + |b| + 1)"""
    return 1.0 - abs(a - b) / (abs(a) + abs(b) + 1.0)


def statistical_similarity(first: Fingerprint, second: Fingerprint) -> float:
    shared = [name for name in first.statistical if name in second.statistical]
    if not shared:
        return 0.0

    total = 0.0
    for name in shared:
        a = first.statistical[name]
        b = second.statistical[name]
        scores = [
            _relative_closeness(a.mean, b.mean),
            _relative_closeness(a.std, b.std),
            1.0 - abs(a.skewness - b.skewness) / 6.0,
            1.0 - abs(a.kurtosis - b.kurtosis) / 6.0,
            1.0 if a.distribution_type == b.distribution_type else 0.5,
        ]
        total += max(0.0, sum(scores) / len(scores))
    return total / len(shared)


def frequency_closeness(a: float, b: float) -> float:
    """Relative closeness of two dominant frequencies; 0 means "none found"."""
    if a == b:
        return 1.0
    if a > 0 and b > 0:
        return 1.0 - abs(a - b) / max(a, b)
    return 0.5


def temporal_similarity(first: Fingerprint, second: Fingerprint) -> float:
    a = first.temporal
    b = second.temporal
    scores = [
        1.0 - abs(a.seasonality_strength - b.seasonality_strength),
        1.0 - abs(a.trend_strength - b.trend_strength),
        1.0 - abs(a.periodicity_score - b.periodicity_score),
        1.0 - abs(a.stationarity_score - b.stationarity_score),
        frequency_closeness(a.dominant_frequency, b.dominant_frequency),
    ]
    return sum(scores) / len(scores)


def relational_similarity(first: Fingerprint, second: Fingerprint) -> float:
    a = first.relational
    b = second.relational

    keys_a = set(a.mutual_information)
    keys_b = set(b.mutual_information)
    if not keys_a and not keys_b:
        overlap = 1.0
    elif not keys_a or not keys_b:
        overlap = 0.5
    else:
        overlap = len(keys_a & keys_b) / max(len(keys_a), len(keys_b))

    scores = [
        1.0 - abs(a.dependency_strength - b.dependency_strength),
        1.0 if a.correlation_matrix_hash == b.correlation_matrix_hash else 0.0,
        overlap,
    ]
    return sum(scores) / len(scores)


def anomaly_similarity(first: Fingerprint, second: Fingerprint) -> float:
    a = first.anomaly
    b = second.anomaly

    severity_a = a.mean_severity
    severity_b = b.mean_severity
    if severity_a > 0 or severity_b > 0:
        severity = 1.0 - abs(severity_a - severity_b) / max(severity_a, severity_b, 1.0)
    else:
        severity = 1.0

    scores = [
        1.0 - abs(a.anomaly_density - b.anomaly_density),
        severity,
        1.0 if a.anomaly_signature == b.anomaly_signature else 0.0,
    ]
    return sum(scores) / len(scores)


def component_similarities(first: Fingerprint, second: Fingerprint) -> Dict[str, float]:
    """All four components, keyed statistical/temporal/relational/anomaly."""
    return {
        "statistical": statistical_similarity(first, second),
        "temporal": temporal_similarity(first, second),
        "relational": relational_similarity(first, second),
        "anomaly": anomaly_similarity(first, second),
    }
