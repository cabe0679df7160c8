"""
patternscope - pattern detection, fingerprinting and similarity for tabular data

Architecture:
    - detectors: Baseline and advanced pattern detectors (registry + pipelines)
    - fingerprint: Fixed-structure dataset summaries and cosine comparison
    - similarity: Fingerprint store, component similarity, clustering
    - config: Layered settings (defaults -> YAML -> overrides)

Quick Start:
    from patternscope import detect_advanced_patterns, SimilarityEngine

    patterns = detect_advanced_patterns(records)

    engine = SimilarityEngine()
    matches = engine.find_similar_patterns(records, patterns, "sales_2024")
    for match in matches:
        print(match.fingerprint.id, f"{match.similarity:.3f}")
"""

__version__ = "0.1.0"

from patternscope.config import Settings, configure, get_settings
from patternscope.dataset import DataRecord
from patternscope.detectors import (
    AdvancedPatternDetector,
    PatternDetector,
    detect_advanced_patterns,
    detect_patterns,
    get_detector,
    list_detectors,
)
from patternscope.errors import (
    ConfigurationError,
    DegenerateComputationError,
    FingerprintNotFoundError,
    PatternScopeError,
)
from patternscope.fingerprint import (
    Fingerprint,
    FingerprintGenerator,
    calculate_similarity,
    generate_fingerprint,
)
from patternscope.patterns import AdvancedPattern, DataPattern, PatternType
from patternscope.similarity import (
    AnalyzedDataset,
    DatasetComparison,
    FingerprintStore,
    PatternCluster,
    SimilarityEngine,
    SimilarityMatch,
)

__all__ = [
    "__version__",
    "Settings",
    "configure",
    "get_settings",
    "DataRecord",
    "DataPattern",
    "AdvancedPattern",
    "PatternType",
    "PatternDetector",
    "AdvancedPatternDetector",
    "detect_patterns",
    "detect_advanced_patterns",
    "get_detector",
    "list_detectors",
    "Fingerprint",
    "FingerprintGenerator",
    "generate_fingerprint",
    "calculate_similarity",
    "SimilarityEngine",
    "FingerprintStore",
    "AnalyzedDataset",
    "SimilarityMatch",
    "PatternCluster",
    "DatasetComparison",
    "PatternScopeError",
    "DegenerateComputationError",
    "FingerprintNotFoundError",
    "ConfigurationError",
]
