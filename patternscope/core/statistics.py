"""
Statistical primitives

numpy in, floats out. Shared by the detectors and the fingerprint
signatures so that "autocorrelation", "skewness" etc. mean exactly one
thing across the package.

Conventions:
    - standard deviation is the population std (ddof=0) unless noted
    - correlation is the sample Pearson r
    - degenerate inputs (too few samples, zero variance) raise
      DegenerateComputationError where the caller must skip, and return 0.0
      where a neutral score is the documented result
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence

import numpy as np
from scipy import stats

from patternscope.errors import DegenerateComputationError

EPSILON = 1e-12


def as_array(values: Iterable[float]) -> np.ndarray:
    """1D float array."""
    return np.asarray(values, dtype=float).ravel()


def population_std(values: Sequence[float]) -> float:
    y = as_array(values)
    if len(y) == 0:
        return 0.0
    return float(np.std(y))


def pearson(x: Sequence[float], y: Sequence[float]) -> float:
    """
    Sample Pearson correlation.

    Raises:
        DegenerateComputationError: fewer than 2 samples, length mismatch
            or zero variance in either series
    """
    a = as_array(x)
    b = as_array(y)
    if len(a) != len(b) or len(a) < 2:
        raise DegenerateComputationError("pearson: need two equal-length series of n >= 2")

    da = a - a.mean()
    db = b - b.mean()
    denom = np.sqrt(np.sum(da * da) * np.sum(db * db))
    if denom < EPSILON:
        raise DegenerateComputationError("pearson: zero variance")

    r = float(np.sum(da * db) / denom)
    return max(-1.0, min(1.0, r))


def spearman(x: Sequence[float], y: Sequence[float]) -> float:
    """Spearman rank correlation (Pearson r of average ranks)."""
    return pearson(stats.rankdata(as_array(x)), stats.rankdata(as_array(y)))


def correlation_matrix(frame_values: np.ndarray) -> np.ndarray:
    """
    Pairwise Pearson matrix of the columns of a 2D array.

    Degenerate pairs are 0; the diagonal is always 1.
    """
    n_fields = frame_values.shape[1]
    matrix = np.eye(n_fields)
    for i in range(n_fields):
        for j in range(i + 1, n_fields):
            try:
                r = pearson(frame_values[:, i], frame_values[:, j])
            except DegenerateComputationError:
                r = 0.0
            matrix[i, j] = matrix[j, i] = r
    return matrix


def autocorrelation(values: Sequence[float], lag: int) -> float:
    """
    Autocorrelation at one lag, normalised by the full-series sum of squares.

    Returns 0.0 when lag >= n or the series is constant.
    """
    y = as_array(values)
    n = len(y)
    if lag >= n or lag < 0:
        return 0.0

    centered = y - y.mean()
    denominator = float(np.sum(centered * centered))
    if denominator < EPSILON:
        return 0.0

    numerator = float(np.sum(centered[: n - lag] * centered[lag:]))
    return numerator / denominator


def autocorrelations(values: Sequence[float], lags: Iterable[int]) -> List[float]:
    """autocorrelation() for several lags, sharing the centring work."""
    y = as_array(values)
    n = len(y)
    centered = y - y.mean() if n else y
    denominator = float(np.sum(centered * centered)) if n else 0.0

    result = []
    for lag in lags:
        if lag >= n or lag < 0 or denominator < EPSILON:
            result.append(0.0)
        else:
            result.append(float(np.sum(centered[: n - lag] * centered[lag:])) / denominator)
    return result


@dataclass(frozen=True)
class LinearFit:
    """Least-squares line y = slope * x + intercept."""
    slope: float
    intercept: float
    r_squared: float


def linear_regression(values: Sequence[float]) -> LinearFit:
    """
    Regress values on their row index.

    Raises:
        DegenerateComputationError: fewer than 2 samples
    """
    y = as_array(values)
    n = len(y)
    if n < 2:
        raise DegenerateComputationError("linear_regression: need n >= 2")

    x = np.arange(n, dtype=float)
    dx = x - x.mean()
    slope = float(np.sum(dx * (y - y.mean())) / np.sum(dx * dx))
    intercept = float(y.mean() - slope * x.mean())

    predicted = slope * x + intercept
    return LinearFit(slope=slope, intercept=intercept, r_squared=r_squared(y, predicted))


def r_squared(actual: Sequence[float], predicted: Sequence[float]) -> float:
    """Coefficient of determination; 0.0 when actual is constant."""
    y = as_array(actual)
    p = as_array(predicted)
    if len(y) == 0:
        return 0.0
    total = float(np.sum((y - y.mean()) ** 2))
    if total < EPSILON:
        return 0.0
    residual = float(np.sum((y - p) ** 2))
    return 1.0 - residual / total


def skewness(values: Sequence[float]) -> float:
    """Adjusted Fisher-Pearson sample skewness; 0.0 when undefined."""
    y = as_array(values)
    if len(y) < 3 or np.std(y) < EPSILON:
        return 0.0
    return float(stats.skew(y, bias=False))


def kurtosis(values: Sequence[float]) -> float:
    """Adjusted sample excess kurtosis; 0.0 when undefined."""
    y = as_array(values)
    if len(y) < 4 or np.std(y) < EPSILON:
        return 0.0
    return float(stats.kurtosis(y, fisher=True, bias=False))


def histogram_entropy(values: Sequence[float], bins: int = 10, normalize: bool = False) -> float:
    """
    Shannon entropy (bits) of an equal-width histogram over [min, max].

    With normalize=True the result is divided by log2(bins), giving [0, 1].
    A constant series has entropy 0.
    """
    y = as_array(values)
    if len(y) == 0:
        return 0.0
    lo, hi = float(np.min(y)), float(np.max(y))
    if hi - lo < EPSILON:
        return 0.0

    counts, _ = np.histogram(y, bins=bins, range=(lo, hi))
    p = counts[counts > 0] / len(y)
    entropy = float(-np.sum(p * np.log2(p)))
    if normalize:
        entropy /= np.log2(bins)
    return entropy


def quartiles(values: Sequence[float]) -> List[float]:
    """[Q1, Q2, Q3, Q4] where Q4 is the maximum."""
    y = as_array(values)
    if len(y) == 0:
        return [0.0, 0.0, 0.0, 0.0]
    return [float(q) for q in np.quantile(y, [0.25, 0.5, 0.75, 1.0])]


def min_max(value: float, lower: float, upper: float) -> float:
    """Map value from [lower, upper] into [0, 1], clipped."""
    if upper - lower < EPSILON:
        return 0.0
    return float(max(0.0, min(1.0, (value - lower) / (upper - lower))))


def clip_unit(value: float) -> float:
    return float(max(0.0, min(1.0, value)))
