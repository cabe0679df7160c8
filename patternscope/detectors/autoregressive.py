"""
Autoregressive Detector

Fits AR(p) models by least squares (with intercept) for each order in
settings, lowest first, and reports the first order that explains the
series well.

Significance is approximated as max(0.001, 1 - R²); an order qualifies when
R² > min_r_squared and that approximation is below max_p_value.
"""

from dataclasses import dataclass
from typing import List

import numpy as np

from patternscope.core.statistics import r_squared
from patternscope.detectors.base import FieldDetector
from patternscope.patterns import AdvancedPattern, DataPattern, PatternMetadata, PatternType


@dataclass(frozen=True)
class ARFit:
    order: int
    coefficients: List[float]
    intercept: float
    r_squared: float
    residual_variance: float
    p_value: float


def fit_autoregressive(values: np.ndarray, order: int) -> ARFit:
    """
    Least-squares AR(order) fit.

    y[t] = c + a1 * y[t-1] + ... + ap * y[t-p]
    """
    n = len(values)
    y = values[order:]
    lagged = [values[order - lag:n - lag] for lag in range(1, order + 1)]
    design = np.column_stack([np.ones(len(y))] + lagged)

    solution, _, _, _ = np.linalg.lstsq(design, y, rcond=None)
    predicted = design @ solution
    residuals = y - predicted

    fit = r_squared(y, predicted)
    return ARFit(
        order=order,
        coefficients=[float(c) for c in solution[1:]],
        intercept=float(solution[0]),
        r_squared=fit,
        residual_variance=float(np.var(residuals, ddof=1)) if len(residuals) > 1 else 0.0,
        p_value=max(0.001, 1.0 - fit),
    )


class AutoregressiveDetector(FieldDetector):
    """Lowest qualifying AR order per field."""

    name = "autoregressive"
    pattern_type = PatternType.TREND.value
    algorithm = "autoregressive"
    min_samples = 30

    def detect_field(self, column: str, values: np.ndarray) -> List[DataPattern]:
        min_r_squared = self.params.get("min_r_squared", 0.6)
        max_p_value = self.params.get("max_p_value", 0.05)

        for order in self.params.get("orders", [1, 2, 3]):
            model = fit_autoregressive(values, int(order))
            if model.r_squared <= min_r_squared or model.p_value >= max_p_value:
                continue

            return [AdvancedPattern(
                type=self.pattern_type,
                confidence=min(1.0, model.r_squared),
                description=(
                    f"{column} shows AR({model.order}) autoregressive behavior "
                    f"(R² = {model.r_squared:.3f})"
                ),
                parameters={
                    "order": model.order,
                    "coefficients": model.coefficients,
                    "intercept": model.intercept,
                    "r_squared": model.r_squared,
                    "residual_variance": model.residual_variance,
                    "model_type": "autoregressive",
                },
                affected_fields=[column],
                algorithm=f"ar_{model.order}",
                statistical_significance=1.0 - model.p_value,
                effect_size=min(1.0, model.r_squared),
                metadata=PatternMetadata(
                    sample_size=len(values) - model.order,
                    p_value=model.p_value,
                    algorithm_params={"order": model.order},
                ),
            )]

        return []
