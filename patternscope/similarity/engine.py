"""
Similarity Engine

Stores fingerprints and compares, ranks and clusters them.

Operations:
- find_similar_patterns: fingerprint + store a dataset, rank the other
  stored fingerprints by 4-component similarity
- find_similar_to: the same ranking for an already-stored fingerprint
- compare_dataset_patterns / compare_stored: component breakdown, pattern
  overlap and recommendations for two datasets
- cluster_similar_patterns: greedy single-pass cosine clustering of the store
- export_fingerprints / import_fingerprints: JSON snapshot and restore

Usage:
    from patternscope.similarity import SimilarityEngine

    engine = SimilarityEngine()
    matches = engine.find_similar_patterns(records, patterns, "sales_2024", threshold=0.8)
    clusters = engine.cluster_similar_patterns()
"""

import logging
from collections import Counter
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from patternscope.config import Settings, get_settings
from patternscope.dataset import DatasetLike
from patternscope.fingerprint.generator import FingerprintGenerator
from patternscope.fingerprint.models import Fingerprint
from patternscope.patterns import DataPattern

from .components import component_similarities
from .models import (
    AnalyzedDataset,
    ClusterCharacteristics,
    DatasetComparison,
    PatternCluster,
    SimilarityMatch,
)
from .store import FingerprintStore

logger = logging.getLogger(__name__)

# Feature label per component, in report order
COMPONENT_FEATURES = {
    "statistical": "statistical_distribution",
    "temporal": "temporal_patterns",
    "relational": "correlations",
    "anomaly": "anomaly_patterns",
}


class SimilarityEngine:
    """Fingerprint repository with similarity queries."""

    def __init__(
        self,
        store: Optional[FingerprintStore] = None,
        generator: Optional[FingerprintGenerator] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.params: Dict[str, Any] = self.settings.section("similarity")
        self.store = store if store is not None else FingerprintStore()
        self.generator = generator or FingerprintGenerator(settings=self.settings)

    # -------------------------------------------------------------------------
    # Detailed similarity
    # -------------------------------------------------------------------------

    def detailed_similarity(self, first: Fingerprint, second: Fingerprint) -> Dict[str, Any]:
        """
        Component scores, overall score and feature lists.

        overall is the unweighted mean of the four components.
        """
        components = component_similarities(first, second)
        cutoff = self.params.get("feature_cutoff", 0.7)

        matching: List[str] = []
        differing: List[str] = []
        for component in ("statistical", "temporal"):
            target = matching if components[component] > cutoff else differing
            target.append(COMPONENT_FEATURES[component])

        shared_types = set(first.pattern_types) & set(second.pattern_types)
        (matching if shared_types else differing).append("pattern_types")

        for component in ("relational", "anomaly"):
            target = matching if components[component] > cutoff else differing
            target.append(COMPONENT_FEATURES[component])

        return {
            "components": components,
            "overall": sum(components.values()) / len(components),
            "matching": matching,
            "differing": differing,
            "confidence": min(first.average_confidence, second.average_confidence),
        }

    def _rank(self, target: Fingerprint, exclude_key: str, threshold: float) -> List[SimilarityMatch]:
        matches = []
        for key, candidate in self.store.items():
            if key == exclude_key:
                continue
            detail = self.detailed_similarity(target, candidate)
            if detail["overall"] >= threshold:
                matches.append(SimilarityMatch(
                    fingerprint=candidate,
                    similarity=detail["overall"],
                    matching_features=detail["matching"],
                    differing_features=detail["differing"],
                    confidence=detail["confidence"],
                ))
        return sorted(matches, key=lambda m: m.similarity, reverse=True)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def find_similar_patterns(
        self,
        data: Optional[DatasetLike],
        patterns: Sequence[DataPattern],
        dataset_id: str,
        threshold: Optional[float] = None,
        primary_field: Optional[str] = None,
    ) -> List[SimilarityMatch]:
        """
        Fingerprint and store a dataset, then rank every other stored
        fingerprint with similarity >= threshold, most similar first.
        """
        if threshold is None:
            threshold = self.params.get("default_threshold", 0.7)

        target = self.generator.generate_fingerprint(
            data, patterns, dataset_id, primary_field=primary_field,
        )
        self.store.put(target)

        matches = self._rank(target, dataset_id, threshold)
        logger.info(f"'{dataset_id}': {len(matches)} similar fingerprint(s) at threshold {threshold}")
        return matches

    def find_similar_to(self, fingerprint_id: str, threshold: Optional[float] = None) -> List[SimilarityMatch]:
        """
        Rank stored fingerprints against one already stored.

        Raises:
            FingerprintNotFoundError: fingerprint_id is not stored
        """
        if threshold is None:
            threshold = self.params.get("default_threshold", 0.7)
        target = self.store.get(fingerprint_id)
        return self._rank(target, fingerprint_id, threshold)

    def compare_fingerprints(self, first: Fingerprint, second: Fingerprint) -> DatasetComparison:
        detail = self.detailed_similarity(first, second)
        components = detail["components"]

        types_1 = list(dict.fromkeys(first.pattern_types))
        types_2 = list(dict.fromkeys(second.pattern_types))
        overlap = [t for t in types_1 if t in types_2]

        return DatasetComparison(
            overall_similarity=detail["overall"],
            statistical_similarity=components["statistical"],
            temporal_similarity=components["temporal"],
            relational_similarity=components["relational"],
            anomaly_similarity=components["anomaly"],
            pattern_overlap=overlap,
            unique_to_dataset1=[t for t in types_1 if t not in types_2],
            unique_to_dataset2=[t for t in types_2 if t not in types_1],
            recommendations=self.recommendations(first, second, detail["overall"], overlap),
        )

    def compare_dataset_patterns(self, first: AnalyzedDataset, second: AnalyzedDataset) -> DatasetComparison:
        """
        Compare two datasets. Fingerprints are regenerated and not stored.
        """
        fp1 = self.generator.generate_fingerprint(
            first.data, first.patterns, first.dataset_id, primary_field=first.primary_field,
        )
        fp2 = self.generator.generate_fingerprint(
            second.data, second.patterns, second.dataset_id, primary_field=second.primary_field,
        )
        return self.compare_fingerprints(fp1, fp2)

    def compare_stored(self, first_id: str, second_id: str) -> DatasetComparison:
        """
        Compare two stored fingerprints.

        Raises:
            FingerprintNotFoundError: either id is not stored
        """
        return self.compare_fingerprints(self.store.get(first_id), self.store.get(second_id))

    def recommendations(
        self,
        first: Fingerprint,
        second: Fingerprint,
        similarity: float,
        shared_patterns: List[str],
    ) -> List[str]:
        notes: List[str] = []

        if similarity > self.params.get("very_similar", 0.8):
            notes.append("These datasets show very similar patterns - consider combining them for analysis")
            if shared_patterns:
                notes.append(f"Both datasets share {', '.join(shared_patterns)} patterns")
        elif similarity > self.params.get("moderately_similar", 0.5):
            notes.append("Moderate similarity detected - useful for comparative analysis")
            notes.append("Consider investigating what causes the differences")
        else:
            notes.append("These datasets have different characteristics")
            notes.append("Analyze them separately or investigate the root causes of differences")

        trend_gap = abs(first.temporal.trend_strength - second.temporal.trend_strength)
        if trend_gap > self.params.get("trend_divergence", 0.3):
            notes.append("Significant difference in trend strength - investigate temporal factors")

        density_gap = abs(first.anomaly.anomaly_density - second.anomaly.anomaly_density)
        if density_gap > self.params.get("anomaly_density_divergence", 0.1):
            notes.append("Different anomaly patterns - review data quality and external factors")

        return notes[:int(self.params.get("max_recommendations", 5))]

    # -------------------------------------------------------------------------
    # Clustering
    # -------------------------------------------------------------------------

    def cluster_similar_patterns(self, threshold: Optional[float] = None) -> List[PatternCluster]:
        """
        Greedy single-pass clustering of stored fingerprints.

        Each unassigned fingerprint (insertion order) seeds a cluster and
        absorbs every later unassigned fingerprint with cosine similarity >=
        threshold. Singletons are dropped; largest clusters first.
        """
        if threshold is None:
            threshold = self.params.get("cluster_threshold", 0.8)

        fingerprints = self.store.values()
        if len(fingerprints) < 2:
            return []

        clusters: List[PatternCluster] = []
        assigned = set()

        for i, seed in enumerate(fingerprints):
            if i in assigned:
                continue
            assigned.add(i)
            members = [seed]

            for j in range(i + 1, len(fingerprints)):
                if j in assigned:
                    continue
                if self.generator.calculate_similarity(seed, fingerprints[j]) >= threshold:
                    members.append(fingerprints[j])
                    assigned.add(j)

            if len(members) > 1:
                clusters.append(PatternCluster(
                    id=f"cluster_{seed.id}",
                    centroid=seed,
                    members=members,
                    characteristics=self.cluster_characteristics(members),
                ))

        logger.info(f"Clustered {len(fingerprints)} fingerprints into {len(clusters)} cluster(s)")
        return sorted(clusters, key=lambda c: c.characteristics.size, reverse=True)

    def cluster_characteristics(self, members: List[Fingerprint]) -> ClusterCharacteristics:
        counts = Counter(t for fp in members for t in fp.pattern_types)
        dominant = [t for t, _ in counts.most_common(int(self.params.get("dominant_patterns", 3)))]

        avg_confidence = sum(fp.average_confidence for fp in members) / len(members)

        # Spread about the mean vector, over members comparable with the seed
        length = len(members[0].similarity_vector)
        vectors = [fp.similarity_vector for fp in members if len(fp.similarity_vector) == length]
        if length and vectors:
            matrix = np.asarray(vectors, dtype=float)
            variance = float(np.sum((matrix - matrix.mean(axis=0)) ** 2) / matrix.size)
        else:
            variance = 0.0

        return ClusterCharacteristics(
            dominant_patterns=dominant,
            avg_confidence=avg_confidence,
            size=len(members),
            variance=variance,
        )

    # -------------------------------------------------------------------------
    # Store management
    # -------------------------------------------------------------------------

    def store_fingerprint(self, fingerprint: Fingerprint) -> None:
        self.store.put(fingerprint)

    def get_fingerprint(self, fingerprint_id: str) -> Fingerprint:
        return self.store.get(fingerprint_id)

    def get_stored_fingerprints(self) -> List[Fingerprint]:
        return self.store.values()

    def remove_fingerprint(self, fingerprint_id: str) -> bool:
        return self.store.remove(fingerprint_id)

    def clear_stored_fingerprints(self) -> None:
        self.store.clear()

    def export_fingerprints(self) -> Dict[str, Dict[str, Any]]:
        """JSON-compatible snapshot: id -> fingerprint dict."""
        return {key: fp.to_dict() for key, fp in self.store.items()}

    def import_fingerprints(self, fingerprints: Mapping[str, Union[Fingerprint, Dict[str, Any]]]) -> None:
        """Upsert fingerprints (objects or exported dicts) by id."""
        self.store.update({
            key: value if isinstance(value, Fingerprint) else Fingerprint.from_dict(value)
            for key, value in fingerprints.items()
        })
