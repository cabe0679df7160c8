"""
Fingerprint Generator

Compresses a dataset and its detected patterns into a Fingerprint:
per-field statistical signatures, temporal and anomaly signatures of the
primary field, a relational signature across fields, pattern summaries, a
sampled content hash and a fixed-length similarity vector.

Generation is pure: the same records, patterns, id and timestamp always
give an equal Fingerprint.

Usage:
    from patternscope.fingerprint import FingerprintGenerator

    generator = FingerprintGenerator()
    fp = generator.generate_fingerprint(records, patterns, "sales_2024")
    score = generator.calculate_similarity(fp, other_fp)
"""

import hashlib
import json
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from patternscope.config import Settings, get_settings
from patternscope.core.statistics import min_max
from patternscope.dataset import DataRecord, DatasetLike, as_records, field_names, numeric_frame
from patternscope.patterns import DataPattern

from .anomaly import anomaly_signature
from .models import AnomalySignature, Fingerprint, TemporalSignature
from .relational import relational_signature
from .statistical import statistical_signature
from .temporal import temporal_signature

logger = logging.getLogger(__name__)

# Statistical features per field, in vector order
STATISTICAL_FEATURES = ("mean", "std", "skewness", "kurtosis", "entropy")

# Fixed (non per-field) vector entries: 4 temporal, 2 relational, 2 anomaly, 5 indicators
FIXED_VECTOR_LENGTH = 13


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def content_hash(records: Sequence[DataRecord], sample_size: int = 10) -> str:
    """sha256 (16 hex) of record count, sorted field names and the leading records."""
    payload = {
        "length": len(records),
        "columns": sorted(field_names(records)),
        "sample_checksums": [
            "|".join(_format_value(v) for v in record.values.values())
            for record in records[:sample_size]
        ],
    }
    encoded = json.dumps(payload, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()[:16]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of two vectors; 0 for length mismatch or a zero vector."""
    if len(a) != len(b) or len(a) == 0:
        return 0.0
    va = np.asarray(a, dtype=float)
    vb = np.asarray(b, dtype=float)
    denominator = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if denominator == 0:
        return 0.0
    return min(1.0, float(np.dot(va, vb)) / denominator)


class FingerprintGenerator:
    """Builds and compares fingerprints."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.params: Dict[str, Any] = self.settings.section("fingerprint")

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    def generate_fingerprint(
        self,
        data: Optional[DatasetLike],
        patterns: Sequence[DataPattern],
        fingerprint_id: str,
        primary_field: Optional[str] = None,
        timestamp: Optional[float] = None,
    ) -> Fingerprint:
        """
        Fingerprint a dataset.

        Args:
            data: Records, mappings or DataFrame
            patterns: Patterns detected on the same data
            fingerprint_id: Caller-chosen id (the store key)
            primary_field: Field for temporal/anomaly signatures
                (default: first numeric field in schema order)
            timestamp: Defaults to the latest record timestamp, else 0.0

        Raises:
            ValueError: primary_field is not a numeric field
        """
        records = as_records(data)
        frame = numeric_frame(records)
        columns = list(frame.columns)

        if primary_field is not None and primary_field not in columns:
            raise ValueError(f"Primary field '{primary_field}' is not numeric. Numeric: {columns}")
        primary = primary_field or (columns[0] if columns else None)

        bins = int(self.params.get("entropy_bins", 10))
        statistical = {
            name: statistical_signature(frame[name].to_numpy(), entropy_bins=bins)
            for name in columns
        }

        if primary is not None:
            primary_values = frame[primary].to_numpy()
            temporal = temporal_signature(primary_values, self.params)
            anomaly = anomaly_signature(primary_values, self.params)
        else:
            temporal = TemporalSignature()
            anomaly = anomaly_signature(np.array([]), self.params)

        pattern_types, confidence_scores = self.summarize_patterns(patterns)

        fingerprint = Fingerprint(
            id=fingerprint_id,
            timestamp=self._timestamp(records) if timestamp is None else float(timestamp),
            data_hash=content_hash(records, int(self.params.get("sample_records", 10))),
            statistical=statistical,
            temporal=temporal,
            relational=relational_signature(frame),
            anomaly=anomaly,
            pattern_types=pattern_types,
            confidence_scores=confidence_scores,
            similarity_vector=[],
        )
        vector = self.similarity_vector(fingerprint)

        logger.debug(
            f"Fingerprint '{fingerprint_id}': {len(records)} records, "
            f"{len(columns)} numeric fields, vector length {len(vector)}"
        )
        return replace(fingerprint, similarity_vector=vector)

    @staticmethod
    def _timestamp(records: Sequence[DataRecord]) -> float:
        stamps = [r.timestamp for r in records if r.timestamp is not None]
        return float(max(stamps)) if stamps else 0.0

    @staticmethod
    def summarize_patterns(patterns: Sequence[DataPattern]) -> Tuple[List[str], Dict[str, float]]:
        """Distinct types (first-seen order) and the highest confidence per type."""
        types: List[str] = []
        scores: Dict[str, float] = {}
        for pattern in patterns:
            if pattern.type not in scores:
                types.append(pattern.type)
                scores[pattern.type] = float(pattern.confidence)
            else:
                scores[pattern.type] = max(scores[pattern.type], float(pattern.confidence))
        return types, scores

    def similarity_vector(self, fingerprint: Fingerprint) -> List[float]:
        """5 scaled statistics per field, then FIXED_VECTOR_LENGTH summary entries."""
        bounds = self.params.get("normalization", {})
        vector: List[float] = []

        for signature in fingerprint.statistical.values():
            for feature in STATISTICAL_FEATURES:
                lower, upper = bounds.get(feature, [0.0, 1.0])
                vector.append(min_max(getattr(signature, feature), lower, upper))

        temporal = fingerprint.temporal
        vector.extend([
            temporal.seasonality_strength,
            temporal.trend_strength,
            temporal.periodicity_score,
            temporal.stationarity_score,
        ])

        components = fingerprint.relational.principal_components
        vector.extend([
            fingerprint.relational.dependency_strength,
            float(np.mean(components)) if components else 0.0,
        ])

        anomaly: AnomalySignature = fingerprint.anomaly
        vector.extend([anomaly.anomaly_density, anomaly.mean_severity])

        indicator_types = self.params.get(
            "indicator_types", ["trend", "seasonal", "correlation", "cluster", "anomaly"],
        )
        present = set(fingerprint.pattern_types)
        vector.extend(1.0 if t in present else 0.0 for t in indicator_types)

        return [float(v) for v in vector]

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def calculate_similarity(self, first: Fingerprint, second: Fingerprint) -> float:
        """Cosine similarity of the similarity vectors (0 when not comparable)."""
        return cosine_similarity(first.similarity_vector, second.similarity_vector)

    def find_similar(
        self,
        target: Fingerprint,
        candidates: Sequence[Fingerprint],
        threshold: float = 0.7,
    ) -> List[Tuple[Fingerprint, float]]:
        """Candidates with similarity >= threshold, most similar first."""
        scored = [(c, self.calculate_similarity(target, c)) for c in candidates]
        return sorted(
            (item for item in scored if item[1] >= threshold),
            key=lambda item: item[1],
            reverse=True,
        )
