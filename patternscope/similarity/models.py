"""
Similarity result records. Computed on demand, never stored.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from patternscope.dataset import DatasetLike
from patternscope.fingerprint.models import Fingerprint
from patternscope.patterns import DataPattern


@dataclass(frozen=True)
class SimilarityMatch:
    """A stored fingerprint similar to a target."""
    fingerprint: Fingerprint
    similarity: float
    matching_features: List[str] = field(default_factory=list)
    differing_features: List[str] = field(default_factory=list)
    confidence: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fingerprint_id": self.fingerprint.id,
            "similarity": self.similarity,
            "matching_features": list(self.matching_features),
            "differing_features": list(self.differing_features),
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class ClusterCharacteristics:
    dominant_patterns: List[str]
    avg_confidence: float
    size: int
    variance: float


@dataclass(frozen=True)
class PatternCluster:
    """Group of mutually similar stored fingerprints, seeded by centroid."""
    id: str
    centroid: Fingerprint
    members: List[Fingerprint]
    characteristics: ClusterCharacteristics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "centroid_id": self.centroid.id,
            "member_ids": [m.id for m in self.members],
            "characteristics": asdict(self.characteristics),
        }


@dataclass(frozen=True)
class DatasetComparison:
    """Side-by-side comparison of two datasets."""
    overall_similarity: float
    statistical_similarity: float
    temporal_similarity: float
    relational_similarity: float
    anomaly_similarity: float
    pattern_overlap: List[str]
    unique_to_dataset1: List[str]
    unique_to_dataset2: List[str]
    recommendations: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AnalyzedDataset:
    """A dataset with its detected patterns, as input to a comparison."""
    dataset_id: str
    data: DatasetLike
    patterns: Sequence[DataPattern] = field(default_factory=list)
    primary_field: Optional[str] = None
