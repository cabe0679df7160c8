"""
patternscope Fingerprint Module

Fixed-structure dataset summaries and their cosine comparison.

Usage:
    from patternscope.fingerprint import FingerprintGenerator, generate_fingerprint

    fp = generate_fingerprint(records, patterns, "sales_2024")
"""

from typing import Optional, Sequence

from patternscope.config import Settings
from patternscope.dataset import DatasetLike
from patternscope.patterns import DataPattern

from .generator import (
    FIXED_VECTOR_LENGTH,
    FingerprintGenerator,
    content_hash,
    cosine_similarity,
)
from .models import (
    AnomalyCluster,
    AnomalySignature,
    Fingerprint,
    RelationalSignature,
    StatisticalSignature,
    TemporalSignature,
)


def generate_fingerprint(
    data: Optional[DatasetLike],
    patterns: Sequence[DataPattern],
    fingerprint_id: str,
    primary_field: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> Fingerprint:
    """Fingerprint a dataset with a default-configured generator."""
    generator = FingerprintGenerator(settings=settings)
    return generator.generate_fingerprint(data, patterns, fingerprint_id, primary_field=primary_field)


def calculate_similarity(first: Fingerprint, second: Fingerprint) -> float:
    """Cosine similarity of two fingerprints' similarity vectors."""
    return cosine_similarity(first.similarity_vector, second.similarity_vector)


__all__ = [
    "FingerprintGenerator",
    "generate_fingerprint",
    "calculate_similarity",
    "content_hash",
    "cosine_similarity",
    "FIXED_VECTOR_LENGTH",
    "Fingerprint",
    "StatisticalSignature",
    "TemporalSignature",
    "RelationalSignature",
    "AnomalySignature",
    "AnomalyCluster",
]
