"""
patternscope Similarity Module

Fingerprint store, component similarities and the similarity engine.
"""

from .components import (
    anomaly_similarity,
    component_similarities,
    relational_similarity,
    statistical_similarity,
    temporal_similarity,
)
from .engine import SimilarityEngine
from .models import (
    AnalyzedDataset,
    ClusterCharacteristics,
    DatasetComparison,
    PatternCluster,
    SimilarityMatch,
)
from .store import FingerprintStore

__all__ = [
    "SimilarityEngine",
    "FingerprintStore",
    "AnalyzedDataset",
    "SimilarityMatch",
    "PatternCluster",
    "ClusterCharacteristics",
    "DatasetComparison",
    "component_similarities",
    "statistical_similarity",
    "temporal_similarity",
    "relational_similarity",
    "anomaly_similarity",
]
