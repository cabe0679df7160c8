"""
Statistical signature of a single numeric field.

Distribution family (first match wins):
    normal       |s| < 0.5 and |k| < 1
    uniform      |s| < 0.2 and |k + 1.2| < 0.5
    exponential  s > 1 and k > 2
    bimodal      k < -1
    unknown      otherwise
"""

import numpy as np

from patternscope.core.statistics import histogram_entropy, kurtosis, quartiles, skewness
from patternscope.fingerprint.models import StatisticalSignature


def distribution_family(s: float, k: float) -> str:
    if abs(s) < 0.5 and abs(k) < 1:
        return "normal"
    if abs(s) < 0.2 and abs(k + 1.2) < 0.5:
        return "uniform"
    if s > 1 and k > 2:
        return "exponential"
    if k < -1:
        return "bimodal"
    return "unknown"


def statistical_signature(values: np.ndarray, entropy_bins: int = 10) -> StatisticalSignature:
    s = skewness(values)
    k = kurtosis(values)
    return StatisticalSignature(
        mean=float(np.mean(values)),
        std=float(np.std(values)),
        skewness=s,
        kurtosis=k,
        entropy=histogram_entropy(values, bins=entropy_bins),
        quantiles=quartiles(values),
        distribution_type=distribution_family(s, k),
    )
