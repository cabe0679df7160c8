"""
Anomaly signature of the primary field (IQR fences).

    lower = Q1 - k * IQR, upper = Q3 + k * IQR     (k = iqr_multiplier)
    severity = distance beyond the violated fence / IQR

Outliers within anomaly_cluster_gap positions of each other form a cluster;
clusters whose peak severity exceeds anomaly_cluster_severity are kept.
"""

import hashlib
import json
from typing import Any, Dict, List

import numpy as np

from patternscope.fingerprint.models import AnomalyCluster, AnomalySignature


def iqr_outliers(values: np.ndarray, multiplier: float = 1.5):
    """(positions, severities) of values outside the IQR fences."""
    if len(values) == 0:
        return [], []
    q1, q3 = (float(q) for q in np.percentile(values, [25, 75]))
    iqr = q3 - q1
    if iqr <= 0:
        return [], []

    lower = q1 - multiplier * iqr
    upper = q3 + multiplier * iqr

    positions: List[int] = []
    severities: List[float] = []
    for i, value in enumerate(values):
        if value < lower:
            positions.append(i)
            severities.append(float((lower - value) / iqr))
        elif value > upper:
            positions.append(i)
            severities.append(float((value - upper) / iqr))
    return positions, severities


def anomaly_clusters(
    positions: List[int],
    severities: List[float],
    max_gap: int = 5,
    min_severity: float = 1.5,
) -> List[AnomalyCluster]:
    if not positions:
        return []

    clusters = []
    start, end, severity = positions[0], positions[0], severities[0]
    for position, value in zip(positions[1:], severities[1:]):
        if position - end <= max_gap:
            end = position
            severity = max(severity, value)
        else:
            clusters.append(AnomalyCluster(start, end, severity))
            start, end, severity = position, position, value
    clusters.append(AnomalyCluster(start, end, severity))

    return [c for c in clusters if c.severity > min_severity]


def signature_hash(severities: List[float], clusters: List[AnomalyCluster]) -> str:
    """md5 (12 hex) of the outlier summary, values rounded to 6 decimals."""
    summary: Dict[str, Any] = {
        "total_anomalies": len(severities),
        "max_severity": round(max(severities, default=0.0), 6),
        "avg_severity": round(sum(severities) / len(severities), 6) if severities else 0.0,
        "cluster_count": len(clusters),
        "max_cluster_severity": round(max((c.severity for c in clusters), default=0.0), 6),
    }
    encoded = json.dumps(summary, sort_keys=True).encode("utf-8")
    return hashlib.md5(encoded).hexdigest()[:12]


def anomaly_signature(values: np.ndarray, params: Dict[str, Any]) -> AnomalySignature:
    positions, severities = iqr_outliers(values, params.get("iqr_multiplier", 1.5))
    clusters = anomaly_clusters(
        positions,
        severities,
        max_gap=int(params.get("anomaly_cluster_gap", 5)),
        min_severity=params.get("anomaly_cluster_severity", 1.5),
    )
    return AnomalySignature(
        outlier_positions=positions,
        outlier_severity=severities,
        anomaly_density=len(positions) / len(values) if len(values) else 0.0,
        temporal_anomaly_clusters=clusters,
        anomaly_signature=signature_hash(severities, clusters),
    )
