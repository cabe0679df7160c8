"""
Tests for the statistical primitives.

Run with: pytest tests/test_statistics.py -v
"""

import numpy as np
import pytest

from patternscope.core.statistics import (
    autocorrelation,
    autocorrelations,
    correlation_matrix,
    histogram_entropy,
    kurtosis,
    linear_regression,
    min_max,
    pearson,
    quartiles,
    r_squared,
    skewness,
    spearman,
)
from patternscope.errors import DegenerateComputationError


class TestCorrelation:
    """Pearson / Spearman."""

    def test_perfect_linear(self):
        """Scaled copy has r = 1."""
        x = np.arange(20, dtype=float)
        assert pearson(x, 2 * x + 1) == pytest.approx(1.0)
        assert pearson(x, -x) == pytest.approx(-1.0)

    def test_zero_variance_raises(self):
        """Constant series has no correlation."""
        with pytest.raises(DegenerateComputationError):
            pearson([1.0, 2.0, 3.0], [5.0, 5.0, 5.0])

    def test_too_few_samples_raises(self):
        with pytest.raises(DegenerateComputationError):
            pearson([1.0], [2.0])

    def test_length_mismatch_raises(self):
        with pytest.raises(DegenerateComputationError):
            pearson([1.0, 2.0, 3.0], [1.0, 2.0])

    def test_spearman_monotonic(self):
        """Monotonic but curved relationship has rho = 1."""
        x = np.linspace(0, 5, 50)
        assert spearman(x, np.exp(x)) == pytest.approx(1.0)
        assert pearson(x, np.exp(x)) < 0.95

    def test_matrix_degenerate_pairs(self):
        """Constant column correlates 0 with others; diagonal stays 1."""
        values = np.column_stack([np.arange(10.0), np.ones(10), np.arange(10.0) * 3])
        matrix = correlation_matrix(values)

        assert np.allclose(np.diag(matrix), 1.0)
        assert matrix[0, 1] == 0.0
        assert matrix[0, 2] == pytest.approx(1.0)
        assert np.allclose(matrix, matrix.T)


class TestAutocorrelation:
    """Autocorrelation normalised by the full sum of squares."""

    def test_constant_is_zero(self):
        assert autocorrelation(np.ones(30), 3) == 0.0

    def test_lag_beyond_length(self):
        assert autocorrelation([1.0, 2.0, 3.0], 5) == 0.0

    def test_sine_period(self):
        """Sine correlates with itself one period later."""
        t = np.arange(200)
        values = np.sin(2 * np.pi * t / 20)
        assert autocorrelation(values, 20) == pytest.approx(0.9, abs=0.01)
        assert autocorrelation(values, 10) == pytest.approx(-0.95, abs=0.01)

    def test_batch_matches_single(self):
        np.random.seed(42)
        values = np.random.randn(100)
        lags = [1, 2, 5, 10]
        batch = autocorrelations(values, lags)
        assert batch == pytest.approx([autocorrelation(values, lag) for lag in lags])


class TestRegression:
    """Linear regression against row index."""

    def test_exact_line(self):
        fit = linear_regression([3.0 * i + 5.0 for i in range(50)])
        assert fit.slope == pytest.approx(3.0)
        assert fit.intercept == pytest.approx(5.0)
        assert fit.r_squared == pytest.approx(1.0)

    def test_single_value_raises(self):
        with pytest.raises(DegenerateComputationError):
            linear_regression([1.0])

    def test_constant_r_squared_zero(self):
        """Flat series: slope 0 and R² 0."""
        fit = linear_regression(np.full(10, 4.0))
        assert fit.slope == 0.0
        assert fit.r_squared == 0.0
        assert r_squared(np.full(5, 1.0), np.zeros(5)) == 0.0


class TestMoments:
    """Skewness, kurtosis, entropy, quartiles."""

    def test_constant_moments_zero(self):
        assert skewness(np.ones(10)) == 0.0
        assert kurtosis(np.ones(10)) == 0.0

    def test_small_samples(self):
        """Skewness needs 3 samples, kurtosis needs 4."""
        assert skewness([1.0, 2.0]) == 0.0
        assert kurtosis([1.0, 2.0, 4.0]) == 0.0

    def test_exponential_is_right_skewed(self):
        np.random.seed(42)
        values = np.random.exponential(size=2000)
        assert skewness(values) > 1.5
        assert kurtosis(values) > 2

    def test_entropy_uniform_bins(self):
        """One value per bin gives log2(bins) bits."""
        values = np.arange(10, dtype=float)
        assert histogram_entropy(values, bins=10) == pytest.approx(np.log2(10))
        assert histogram_entropy(values, bins=10, normalize=True) == pytest.approx(1.0)

    def test_entropy_constant(self):
        assert histogram_entropy(np.full(10, 2.0)) == 0.0

    def test_quartiles(self):
        q = quartiles(np.arange(1, 6, dtype=float))
        assert q == pytest.approx([2.0, 3.0, 4.0, 5.0])
        assert quartiles([]) == [0.0, 0.0, 0.0, 0.0]

    def test_min_max_clipped(self):
        assert min_max(5.0, 0.0, 10.0) == 0.5
        assert min_max(-20.0, -10.0, 10.0) == 0.0
        assert min_max(20.0, -10.0, 10.0) == 1.0
        assert min_max(3.0, 1.0, 1.0) == 0.0
