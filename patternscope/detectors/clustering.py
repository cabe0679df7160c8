"""
Clustering Detectors

Groups records by their numeric values (rows of the numeric frame).

Detectors:
- cluster: k-means (random init, seeded), emitted when silhouette > min_silhouette
- hierarchical: Ward linkage cut at several cluster counts; first count with
  silhouette > min_silhouette wins
- dbscan: density clustering; small clusters and noise points are reported
  as outlier clusters

Metrics:
- Silhouette score (sklearn, euclidean)
"""

import logging
import warnings
from typing import List

import numpy as np
import pandas as pd
from scipy.cluster.hierarchy import fcluster, linkage
from scipy.spatial.distance import pdist
from sklearn.cluster import DBSCAN, KMeans
from sklearn.exceptions import ConvergenceWarning
from sklearn.metrics import silhouette_score

from patternscope.detectors.base import BaseDetector
from patternscope.patterns import AdvancedPattern, DataPattern, PatternMetadata, PatternType

logger = logging.getLogger(__name__)


def _cluster_sizes(labels: np.ndarray) -> List[int]:
    """Sizes per label, in label order."""
    return [int(c) for c in pd.Series(labels).value_counts().sort_index().values]


class KMeansClusterDetector(BaseDetector):
    """k-means over all numeric fields."""

    name = "cluster"
    pattern_type = PatternType.CLUSTER.value
    algorithm = "k_means_clustering"
    min_samples = 10
    min_fields = 2

    def run(self, frame: pd.DataFrame) -> List[DataPattern]:
        X = frame.to_numpy(dtype=float)
        k = int(self.params.get("n_clusters", 3))

        model = KMeans(
            n_clusters=k,
            init="random",
            n_init=int(self.params.get("n_init", 10)),
            max_iter=int(self.params.get("max_iter", 100)),
            random_state=self.params.get("random_state", 42),
        )
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", ConvergenceWarning)
            labels = model.fit_predict(X)

        if len(np.unique(labels)) < 2:
            return []

        silhouette = float(silhouette_score(X, labels))
        logger.debug(f"k-means k={k}: silhouette={silhouette:.3f}")
        if silhouette <= self.params.get("min_silhouette", 0.5):
            return []

        return [DataPattern(
            type=self.pattern_type,
            confidence=min(1.0, silhouette),
            description=f"{k} distinct clusters found in the data",
            parameters={
                "k": k,
                "silhouette_score": silhouette,
                "cluster_sizes": _cluster_sizes(labels),
            },
            affected_fields=list(frame.columns),
        )]


class HierarchicalClusterDetector(BaseDetector):
    """Agglomerative clustering, cut at increasing cluster counts."""

    name = "hierarchical"
    pattern_type = PatternType.CLUSTER.value
    algorithm = "hierarchical_clustering"
    min_samples = 10
    min_fields = 2

    def run(self, frame: pd.DataFrame) -> List[DataPattern]:
        X = frame.to_numpy(dtype=float)
        n = len(X)
        method = self.params.get("linkage", "ward")
        tree = linkage(X, method=method)

        for level in self.params.get("levels", [2, 3, 4, 5]):
            labels = fcluster(tree, t=level, criterion="maxclust")
            n_clusters = len(np.unique(labels))
            if n_clusters < 2 or n_clusters >= n:
                continue

            silhouette = float(silhouette_score(X, labels))
            if silhouette <= self.params.get("min_silhouette", 0.6):
                continue

            return [AdvancedPattern(
                type=self.pattern_type,
                confidence=min(1.0, silhouette),
                description=f"Hierarchical clustering reveals {n_clusters} distinct groups with high cohesion",
                parameters={
                    "num_clusters": n_clusters,
                    "silhouette_score": silhouette,
                    "cluster_sizes": _cluster_sizes(labels),
                    "method": "hierarchical",
                    "linkage": method,
                },
                affected_fields=list(frame.columns),
                algorithm=self.algorithm,
                statistical_significance=min(1.0, silhouette),
                effect_size=min(1.0, silhouette),
                metadata=PatternMetadata(
                    sample_size=n,
                    algorithm_params={"method": method, "distance": "euclidean"},
                ),
            )]

        return []


class DBSCANOutlierDetector(BaseDetector):
    """Small density clusters and noise points as outlier groups."""

    name = "dbscan"
    pattern_type = PatternType.ANOMALY.value
    algorithm = "dbscan_outlier_detection"
    min_samples = 3
    min_fields = 2

    def estimate_eps(self, X: np.ndarray) -> float:
        """Percentile of pairwise distances over the leading rows."""
        sample = X[: int(self.params.get("eps_sample_size", 100))]
        if len(sample) < 2:
            return 0.0
        distances = np.sort(pdist(sample))
        index = int(len(distances) * self.params.get("eps_percentile", 10) / 100)
        return float(distances[min(index, len(distances) - 1)])

    def run(self, frame: pd.DataFrame) -> List[DataPattern]:
        X = frame.to_numpy(dtype=float)
        n = len(X)

        eps = self.estimate_eps(X)
        if eps <= 0:
            return []

        # Neighbour count excludes the point itself; sklearn's includes it
        min_neighbours = max(2, int(n * self.params.get("min_samples_fraction", 0.05)))
        labels = DBSCAN(eps=eps, min_samples=min_neighbours + 1).fit_predict(X)

        total_outliers = int(np.sum(labels == -1))
        small_limit = n * self.params.get("small_cluster_fraction", 0.1)

        outlier_clusters = []
        for label in sorted(set(labels) - {-1}):
            members = X[labels == label]
            if len(members) < small_limit:
                outlier_clusters.append({
                    "centroid": [float(v) for v in members.mean(axis=0)],
                    "size": int(len(members)),
                })

        if not outlier_clusters:
            return []

        confidence = min(1.0, total_outliers / (n * 0.1)) if total_outliers > 0 else 0.0

        return [AdvancedPattern(
            type=self.pattern_type,
            confidence=confidence,
            description=f"{len(outlier_clusters)} outlier clusters detected using DBSCAN",
            parameters={
                "cluster_count": len(outlier_clusters),
                "outlier_count": total_outliers,
                "outlier_percentage": total_outliers / n * 100,
                "cluster_sizes": [c["size"] for c in outlier_clusters],
                "centroids": [c["centroid"] for c in outlier_clusters],
                "detection_method": "dbscan",
            },
            affected_fields=list(frame.columns),
            algorithm=self.algorithm,
            statistical_significance=confidence,
            effect_size=total_outliers / n,
            metadata=PatternMetadata(
                sample_size=n,
                algorithm_params={"eps": eps, "min_samples": min_neighbours},
            ),
        )]
