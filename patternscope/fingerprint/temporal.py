"""
Temporal signature of the primary field.

Measures (all from autocorrelation and regression on the row order):
- seasonality_strength: max |acf| over candidate periods below n / 2
- trend_strength: R² of the linear fit against row index
- autocorrelation_lags: first lags in 1..min(50, n/4) with |acf| > 0.3
- dominant_frequency: 1 / lag of the strongest |acf| over 2..min(n/2, 100)
- periodicity_score: regularity of the significant-lag spacing
- stationarity_score: 1 / (1 + var(rolling means) / var(values))
"""

from typing import Any, Dict, List

import numpy as np
import pandas as pd

from patternscope.core.statistics import autocorrelations, linear_regression
from patternscope.fingerprint.models import TemporalSignature


def seasonality_strength(values: np.ndarray, periods: List[int], min_samples: int = 24) -> float:
    n = len(values)
    if n < min_samples:
        return 0.0
    candidates = [p for p in periods if p < n / 2]
    if not candidates:
        return 0.0
    return float(max(abs(acf) for acf in autocorrelations(values, candidates)))


def trend_strength(values: np.ndarray) -> float:
    if len(values) < 3:
        return 0.0
    return max(0.0, linear_regression(values).r_squared)


def significant_lags(
    values: np.ndarray,
    max_lag: int = 50,
    threshold: float = 0.3,
    limit: int = 10,
) -> List[int]:
    lags = list(range(1, min(max_lag, len(values) // 4) + 1))
    found = [lag for lag, acf in zip(lags, autocorrelations(values, lags)) if abs(acf) > threshold]
    return found[:limit]


def dominant_frequency(values: np.ndarray, max_lag: int = 100) -> float:
    upper = min(len(values) / 2, max_lag)
    lags = [lag for lag in range(2, max_lag) if lag < upper]
    best_lag, best_strength = 0, 0.0
    for lag, acf in zip(lags, autocorrelations(values, lags)):
        if abs(acf) > best_strength:
            best_lag, best_strength = lag, abs(acf)
    return 1.0 / best_lag if best_lag > 0 else 0.0


def periodicity_score(lags: List[int]) -> float:
    """1 / (1 + var(spacing) / mean(spacing)²); 0 with fewer than two lags."""
    if len(lags) < 2:
        return 0.0
    spacings = np.diff(lags).astype(float)
    mean_spacing = float(np.mean(spacings))
    if mean_spacing <= 0:
        return 0.0
    return 1.0 / (1.0 + float(np.var(spacings)) / mean_spacing ** 2)


def stationarity_score(values: np.ndarray, min_window: int = 10) -> float:
    """
    1 / (1 + var(rolling mean) / mean²).

    The rolling window is max(min_window, n / 10). A series whose overall
    mean is (near) zero is scaled by its own variance instead of mean².
    """
    n = len(values)
    window = max(min_window, n // 10)
    rolling = pd.Series(values).rolling(window).mean().dropna()
    if len(rolling) < 2:
        return 1.0

    rolling_variance = float(np.var(rolling.to_numpy()))
    scale = float(np.mean(values)) ** 2
    if scale < 1e-12:
        scale = float(np.var(values))
    if scale == 0:
        return 1.0
    return 1.0 / (1.0 + rolling_variance / scale)


def temporal_signature(values: np.ndarray, params: Dict[str, Any]) -> TemporalSignature:
    """TemporalSignature of one series; params is the fingerprint settings section."""
    if len(values) == 0:
        return TemporalSignature()

    lags = significant_lags(
        values,
        max_lag=int(params.get("max_significant_lag", 50)),
        threshold=params.get("significant_autocorrelation", 0.3),
        limit=int(params.get("max_reported_lags", 10)),
    )
    return TemporalSignature(
        seasonality_strength=seasonality_strength(
            values,
            params.get("seasonal_periods", [7, 12, 24, 30, 365]),
            int(params.get("min_seasonal_samples", 24)),
        ),
        trend_strength=trend_strength(values),
        autocorrelation_lags=lags,
        dominant_frequency=dominant_frequency(values, int(params.get("max_frequency_lag", 100))),
        periodicity_score=periodicity_score(lags),
        stationarity_score=stationarity_score(values, int(params.get("min_stationarity_window", 10))),
    )
