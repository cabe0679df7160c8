"""
Fingerprint Models

Immutable signature records that make up a Fingerprint, each with a
JSON-compatible to_dict() / from_dict() pair. Fingerprint.from_dict(
fp.to_dict()) == fp.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List


@dataclass(frozen=True)
class StatisticalSignature:
    """Moments, entropy and quartiles of one numeric field."""
    mean: float = 0.0
    std: float = 0.0
    skewness: float = 0.0
    kurtosis: float = 0.0
    entropy: float = 0.0
    quantiles: List[float] = field(default_factory=list)
    distribution_type: str = "unknown"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StatisticalSignature":
        return cls(
            mean=float(data.get("mean", 0.0)),
            std=float(data.get("std", 0.0)),
            skewness=float(data.get("skewness", 0.0)),
            kurtosis=float(data.get("kurtosis", 0.0)),
            entropy=float(data.get("entropy", 0.0)),
            quantiles=[float(q) for q in data.get("quantiles", [])],
            distribution_type=data.get("distribution_type", "unknown"),
        )


@dataclass(frozen=True)
class TemporalSignature:
    """Row-order behaviour of the primary field. Scores are in [0, 1]."""
    seasonality_strength: float = 0.0
    trend_strength: float = 0.0
    autocorrelation_lags: List[int] = field(default_factory=list)
    dominant_frequency: float = 0.0
    periodicity_score: float = 0.0
    stationarity_score: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TemporalSignature":
        return cls(
            seasonality_strength=float(data.get("seasonality_strength", 0.0)),
            trend_strength=float(data.get("trend_strength", 0.0)),
            autocorrelation_lags=[int(lag) for lag in data.get("autocorrelation_lags", [])],
            dominant_frequency=float(data.get("dominant_frequency", 0.0)),
            periodicity_score=float(data.get("periodicity_score", 0.0)),
            stationarity_score=float(data.get("stationarity_score", 0.0)),
        )


@dataclass(frozen=True)
class RelationalSignature:
    """Correlation structure across numeric fields."""
    correlation_matrix_hash: str = ""
    principal_components: List[float] = field(default_factory=list)
    dependency_strength: float = 0.0
    mutual_information: Dict[str, float] = field(default_factory=dict)
    network_centrality: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RelationalSignature":
        return cls(
            correlation_matrix_hash=data.get("correlation_matrix_hash", ""),
            principal_components=[float(v) for v in data.get("principal_components", [])],
            dependency_strength=float(data.get("dependency_strength", 0.0)),
            mutual_information={k: float(v) for k, v in data.get("mutual_information", {}).items()},
            network_centrality={k: float(v) for k, v in data.get("network_centrality", {}).items()},
        )


@dataclass(frozen=True)
class AnomalyCluster:
    """Run of nearby outliers (inclusive index range)."""
    start: int
    end: int
    severity: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnomalyCluster":
        return cls(int(data["start"]), int(data["end"]), float(data["severity"]))


@dataclass(frozen=True)
class AnomalySignature:
    """IQR outliers of the primary field."""
    outlier_positions: List[int] = field(default_factory=list)
    outlier_severity: List[float] = field(default_factory=list)
    anomaly_density: float = 0.0
    temporal_anomaly_clusters: List[AnomalyCluster] = field(default_factory=list)
    anomaly_signature: str = ""

    @property
    def mean_severity(self) -> float:
        if not self.outlier_severity:
            return 0.0
        return sum(self.outlier_severity) / len(self.outlier_severity)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnomalySignature":
        return cls(
            outlier_positions=[int(p) for p in data.get("outlier_positions", [])],
            outlier_severity=[float(s) for s in data.get("outlier_severity", [])],
            anomaly_density=float(data.get("anomaly_density", 0.0)),
            temporal_anomaly_clusters=[
                AnomalyCluster.from_dict(c) for c in data.get("temporal_anomaly_clusters", [])
            ],
            anomaly_signature=data.get("anomaly_signature", ""),
        )


@dataclass(frozen=True)
class Fingerprint:
    """
    Fixed-structure summary of one dataset.

    similarity_vector has length 5 * len(statistical) + 13; fingerprints are
    only comparable when their vector lengths match.
    """
    id: str
    timestamp: float
    data_hash: str
    statistical: Dict[str, StatisticalSignature] = field(default_factory=dict)
    temporal: TemporalSignature = field(default_factory=TemporalSignature)
    relational: RelationalSignature = field(default_factory=RelationalSignature)
    anomaly: AnomalySignature = field(default_factory=AnomalySignature)
    pattern_types: List[str] = field(default_factory=list)
    confidence_scores: Dict[str, float] = field(default_factory=dict)
    similarity_vector: List[float] = field(default_factory=list)

    @property
    def average_confidence(self) -> float:
        """Mean pattern confidence; 0.5 when no patterns were recorded."""
        if not self.confidence_scores:
            return 0.5
        return sum(self.confidence_scores.values()) / len(self.confidence_scores)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Fingerprint":
        return cls(
            id=str(data["id"]),
            timestamp=float(data.get("timestamp", 0.0)),
            data_hash=data.get("data_hash", ""),
            statistical={
                name: StatisticalSignature.from_dict(sig)
                for name, sig in data.get("statistical", {}).items()
            },
            temporal=TemporalSignature.from_dict(data.get("temporal", {})),
            relational=RelationalSignature.from_dict(data.get("relational", {})),
            anomaly=AnomalySignature.from_dict(data.get("anomaly", {})),
            pattern_types=list(data.get("pattern_types", [])),
            confidence_scores={k: float(v) for k, v in data.get("confidence_scores", {}).items()},
            similarity_vector=[float(v) for v in data.get("similarity_vector", [])],
        )
