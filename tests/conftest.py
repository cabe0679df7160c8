"""
Shared fixtures for patternscope tests.

Every generator is seeded (np.random.seed(42)) so pattern outcomes are
reproducible.
"""

import numpy as np
import pandas as pd
import pytest

from patternscope.config import get_settings
from patternscope.dataset import DataRecord, records_from_columns


@pytest.fixture(autouse=True)
def default_settings():
    """Each test starts from built-in defaults."""
    return get_settings(reload=True)


# =============================================================================
# Single-field series
# =============================================================================

@pytest.fixture
def linear_records():
    """y = 3x + 5, n = 50."""
    return [DataRecord(id=str(i), values={"value": 3.0 * i + 5.0}) for i in range(50)]


@pytest.fixture
def outlier_frame():
    """100 N(0,1) samples followed by three values at 10."""
    np.random.seed(42)
    base = np.random.randn(100)
    return pd.DataFrame({"value": np.concatenate([base, [10.0, 10.0, 10.0]])})


@pytest.fixture
def sine_frame():
    """Pure sine, period 20, n = 200."""
    t = np.arange(200)
    return pd.DataFrame({"signal": np.sin(2 * np.pi * t / 20)})


@pytest.fixture
def normal_frame():
    np.random.seed(42)
    return pd.DataFrame({"value": np.random.randn(2000)})


@pytest.fixture
def ramp_frame():
    """Linear ramp with small noise."""
    np.random.seed(42)
    return pd.DataFrame({"value": np.arange(100, dtype=float) + np.random.randn(100) * 0.1})


@pytest.fixture
def step_frame():
    """Mean shift from 0 to 10 after 60 samples."""
    return pd.DataFrame({"value": np.concatenate([np.zeros(60), np.full(60, 10.0)])})


# =============================================================================
# Multi-field data
# =============================================================================

@pytest.fixture
def correlated_frame():
    """field2 = 2 * field1."""
    np.random.seed(42)
    field1 = np.random.randn(100)
    return pd.DataFrame({"field1": field1, "field2": 2 * field1})


@pytest.fixture
def blob_frame():
    """Three well separated 2D blobs of 30 points."""
    np.random.seed(42)
    centers = [(0.0, 0.0), (20.0, 20.0), (40.0, 0.0)]
    points = np.vstack([np.random.randn(30, 2) * 0.5 + center for center in centers])
    return pd.DataFrame(points, columns=["x", "y"])


@pytest.fixture
def exponential_frame():
    x = np.linspace(0, 10, 200)
    return pd.DataFrame({"x": x, "growth": np.exp(x)})


@pytest.fixture
def square_frame():
    x = np.linspace(-5, 5, 101)
    return pd.DataFrame({"x": x, "square": x ** 2})


@pytest.fixture
def outlier_cluster_frame():
    """100-point blob followed by a tight far-away group of 8."""
    np.random.seed(42)
    blob = np.random.randn(100, 2)
    group = np.random.randn(8, 2) * 0.01 + 50.0
    return pd.DataFrame(np.vstack([blob, group]), columns=["x", "y"])


@pytest.fixture
def sales_records():
    """
    Mixed-type records: two numeric fields, one string, one boolean.
    Trend + weekly cycle + noise.
    """
    np.random.seed(42)
    n = 120
    t = np.arange(n)
    sales = 100 + 0.5 * t + 10 * np.sin(2 * np.pi * t / 7) + np.random.randn(n) * 2
    cost = 0.6 * sales + np.random.randn(n) * 3
    sales[[30, 31, 90]] += 80
    columns = {
        "sales": sales,
        "cost": cost,
        "region": ["north" if i % 2 else "south" for i in range(n)],
        "promo": [bool(i % 5 == 0) for i in range(n)],
    }
    return records_from_columns(columns)


@pytest.fixture
def noise_records():
    """Same schema as sales_records, no structure."""
    np.random.seed(7)
    n = 120
    columns = {
        "sales": np.random.randn(n) * 30 + 50,
        "cost": np.random.randn(n) * 5 + 20,
        "region": ["east"] * n,
        "promo": [False] * n,
    }
    return records_from_columns(columns)
