"""
Relational signature: correlation structure across numeric fields.

"principal_components" are the diagonal of the correlation matrix and
"mutual_information" is |r| per field pair; both are cheap stand-ins kept
for vector compatibility, not true PCA or MI.
"""

import hashlib
from typing import List

import numpy as np
import pandas as pd

from patternscope.core.statistics import correlation_matrix
from patternscope.fingerprint.models import RelationalSignature


def _format_entry(value: float) -> str:
    text = f"{value:.3f}"
    return "0.000" if text == "-0.000" else text


def hash_matrix(matrix: np.ndarray) -> str:
    """sha256 (16 hex) of the matrix printed with 3 decimals."""
    text = ";".join(",".join(_format_entry(v) for v in row) for row in matrix)
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]


def dependency_strength(matrix: np.ndarray) -> float:
    """Mean |r| over the upper triangle."""
    n = len(matrix)
    if n < 2:
        return 0.0
    upper = matrix[np.triu_indices(n, k=1)]
    return float(np.mean(np.abs(upper)))


def relational_signature(frame: pd.DataFrame) -> RelationalSignature:
    columns: List[str] = list(frame.columns)
    if len(columns) < 2:
        return RelationalSignature()

    matrix = correlation_matrix(frame.to_numpy(dtype=float))
    n = len(columns)

    mutual_information = {
        f"{columns[i]}-{columns[j]}": float(abs(matrix[i, j]))
        for i in range(n) for j in range(i + 1, n)
    }
    centrality = {
        columns[i]: float((np.sum(np.abs(matrix[i])) - abs(matrix[i, i])) / (n - 1))
        for i in range(n)
    }

    return RelationalSignature(
        correlation_matrix_hash=hash_matrix(matrix),
        principal_components=[float(v) for v in np.diag(matrix)],
        dependency_strength=dependency_strength(matrix),
        mutual_information=mutual_information,
        network_centrality=centrality,
    )
