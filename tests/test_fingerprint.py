"""
Tests for fingerprint generation and cosine comparison.

Run with: pytest tests/test_fingerprint.py -v
"""

import json
from dataclasses import replace

import numpy as np
import pytest

from patternscope.dataset import DataRecord
from patternscope.detectors import detect_patterns
from patternscope.fingerprint import (
    FIXED_VECTOR_LENGTH,
    Fingerprint,
    FingerprintGenerator,
    calculate_similarity,
    content_hash,
    cosine_similarity,
    generate_fingerprint,
)
from patternscope.fingerprint.anomaly import anomaly_clusters, iqr_outliers
from patternscope.fingerprint.models import AnomalyCluster
from patternscope.fingerprint.statistical import distribution_family
from patternscope.fingerprint.temporal import periodicity_score, stationarity_score
from patternscope.patterns import DataPattern


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def sales_fingerprint(sales_records):
    return generate_fingerprint(sales_records, detect_patterns(sales_records), "sales")


@pytest.fixture
def noise_fingerprint(noise_records):
    return generate_fingerprint(noise_records, detect_patterns(noise_records), "noise")


# =============================================================================
# Generation
# =============================================================================

class TestGeneration:
    """Fingerprint structure."""

    def test_deterministic(self, sales_records):
        """Same input, same fingerprint."""
        patterns = detect_patterns(sales_records)
        first = generate_fingerprint(sales_records, patterns, "sales")
        second = generate_fingerprint(sales_records, patterns, "sales")
        assert first == second

    def test_vector_length(self, sales_fingerprint):
        """5 entries per numeric field plus the fixed block."""
        assert set(sales_fingerprint.statistical) == {"sales", "cost"}
        assert len(sales_fingerprint.similarity_vector) == 5 * 2 + FIXED_VECTOR_LENGTH

    def test_vector_entries_non_negative(self, sales_fingerprint):
        assert all(v >= 0.0 for v in sales_fingerprint.similarity_vector)

    def test_pattern_indicators(self, sales_fingerprint):
        """Last five entries flag trend/seasonal/correlation/cluster/anomaly."""
        indicators = sales_fingerprint.similarity_vector[-5:]
        expected = [
            1.0 if t in sales_fingerprint.pattern_types else 0.0
            for t in ["trend", "seasonal", "correlation", "cluster", "anomaly"]
        ]
        assert indicators == expected
        assert "correlation" in sales_fingerprint.pattern_types

    def test_relational(self, sales_fingerprint):
        relational = sales_fingerprint.relational
        assert list(relational.mutual_information) == ["sales-cost"]
        assert relational.principal_components == pytest.approx([1.0, 1.0])
        assert relational.dependency_strength > 0.5
        assert len(relational.correlation_matrix_hash) == 16

    def test_single_field(self):
        records = [DataRecord(id=str(i), values={"v": float(i % 7)}) for i in range(40)]
        fp = generate_fingerprint(records, [], "single")

        assert fp.relational.mutual_information == {}
        assert fp.relational.dependency_strength == 0.0
        assert len(fp.similarity_vector) == 5 + FIXED_VECTOR_LENGTH

    def test_empty_dataset(self):
        fp = generate_fingerprint([], [], "empty")

        assert fp.statistical == {}
        assert fp.anomaly.anomaly_density == 0.0
        assert fp.timestamp == 0.0
        assert len(fp.similarity_vector) == FIXED_VECTOR_LENGTH

    def test_no_numeric_fields(self):
        records = [DataRecord(id=str(i), values={"name": "x", "ok": True}) for i in range(10)]
        fp = generate_fingerprint(records, [], "text")
        assert fp.statistical == {}
        assert len(fp.similarity_vector) == FIXED_VECTOR_LENGTH

    def test_primary_field(self, sales_records, sales_fingerprint):
        """Temporal signature follows the chosen field."""
        by_cost = generate_fingerprint(sales_records, [], "sales", primary_field="cost")
        assert by_cost.temporal != sales_fingerprint.temporal

    def test_primary_field_must_be_numeric(self, sales_records):
        with pytest.raises(ValueError, match="region"):
            generate_fingerprint(sales_records, [], "sales", primary_field="region")

    def test_timestamp_from_records(self):
        records = [DataRecord(id=str(i), values={"v": float(i)}, timestamp=1000.0 + i) for i in range(5)]
        assert generate_fingerprint(records, [], "ts").timestamp == 1004.0

    def test_summarize_patterns(self):
        patterns = [
            DataPattern(type="trend", confidence=0.6, description=""),
            DataPattern(type="anomaly", confidence=0.5, description=""),
            DataPattern(type="trend", confidence=0.8, description=""),
        ]
        types, scores = FingerprintGenerator.summarize_patterns(patterns)
        assert types == ["trend", "anomaly"]
        assert scores == {"trend": 0.8, "anomaly": 0.5}


class TestContentHash:
    """Sampled content hash."""

    def test_only_leading_records_sampled(self, sales_records):
        """Edits past the sample leave the hash unchanged."""
        edited = list(sales_records)
        edited[50] = DataRecord(id="50", values={**edited[50].values, "sales": -1.0})
        assert content_hash(edited) == content_hash(sales_records)

    def test_leading_edit_changes_hash(self, sales_records):
        edited = list(sales_records)
        edited[0] = DataRecord(id="0", values={**edited[0].values, "sales": -1.0})
        assert content_hash(edited) != content_hash(sales_records)

    def test_length_changes_hash(self, sales_records):
        assert content_hash(sales_records[:-1]) != content_hash(sales_records)


# =============================================================================
# Serialization
# =============================================================================

class TestSerialization:

    def test_round_trip(self, sales_fingerprint):
        assert Fingerprint.from_dict(sales_fingerprint.to_dict()) == sales_fingerprint

    def test_json_round_trip(self, sales_fingerprint):
        payload = json.loads(json.dumps(sales_fingerprint.to_dict()))
        assert Fingerprint.from_dict(payload) == sales_fingerprint


# =============================================================================
# Signatures
# =============================================================================

class TestSignatures:

    def test_iqr_outliers(self):
        """Severity is measured beyond the fence, in IQR units."""
        values = np.array([float(v) for v in range(1, 21)] + [100.0])
        positions, severities = iqr_outliers(values)

        assert positions == [20]
        assert severities == pytest.approx([6.9])

    def test_iqr_zero_spread(self):
        assert iqr_outliers(np.ones(20)) == ([], [])

    def test_anomaly_clusters(self):
        clusters = anomaly_clusters([1, 3, 20], [2.0, 1.0, 1.0])
        assert clusters == [AnomalyCluster(1, 3, 2.0)]

    def test_periodicity_score(self):
        assert periodicity_score([2, 4, 6, 8]) == 1.0
        assert periodicity_score([5]) == 0.0
        assert 0.0 < periodicity_score([1, 2, 5, 6]) < 1.0

    def test_stationarity_constant(self):
        assert stationarity_score(np.full(50, 2.0)) == 1.0

    def test_stationarity_drift(self):
        """A ramp drifts much more than noise around a level."""
        np.random.seed(42)
        assert stationarity_score(np.arange(200.0)) < stationarity_score(np.random.randn(200) + 100)

    def test_stationarity_scaled_by_mean_squared(self):
        """Step 10 -> 20: rolling-mean variance 2110/91 over mean² = 225."""
        values = np.concatenate([np.full(50, 10.0), np.full(50, 20.0)])
        expected = 1.0 / (1.0 + (2110 / 91) / 225.0)
        assert stationarity_score(values) == pytest.approx(expected)

    def test_stationarity_noise_around_level(self):
        """Noise around a large level scores close to 1."""
        np.random.seed(0)
        assert stationarity_score(np.random.randn(200) + 100) > 0.999

    def test_stationarity_zero_mean_uses_variance(self):
        """Step -5 -> 5 has mean 0 and falls back to var(values) = 25."""
        values = np.concatenate([np.full(50, -5.0), np.full(50, 5.0)])
        expected = 1.0 / (1.0 + (2110 / 91) / 25.0)
        assert stationarity_score(values) == pytest.approx(expected)

    def test_distribution_family(self):
        assert distribution_family(0.0, 0.0) == "normal"
        assert distribution_family(0.1, -1.2) == "uniform"
        assert distribution_family(2.0, 5.0) == "exponential"
        assert distribution_family(0.8, -1.5) == "bimodal"
        assert distribution_family(1.2, 0.0) == "unknown"


# =============================================================================
# Similarity
# =============================================================================

class TestCosineSimilarity:

    def test_self_similarity(self, sales_fingerprint):
        assert calculate_similarity(sales_fingerprint, sales_fingerprint) == pytest.approx(1.0)

    def test_symmetric(self, sales_fingerprint, noise_fingerprint):
        forward = calculate_similarity(sales_fingerprint, noise_fingerprint)
        backward = calculate_similarity(noise_fingerprint, sales_fingerprint)
        assert forward == pytest.approx(backward)
        assert 0.0 <= forward <= 1.0

    def test_incomparable_lengths(self, sales_fingerprint):
        shorter = replace(sales_fingerprint, similarity_vector=sales_fingerprint.similarity_vector[:-5])
        assert calculate_similarity(sales_fingerprint, shorter) == 0.0

    def test_zero_vector(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0
        assert cosine_similarity([], []) == 0.0

    def test_find_similar_ordering(self, sales_fingerprint, noise_fingerprint):
        copy = replace(sales_fingerprint, id="copy")
        ranked = FingerprintGenerator().find_similar(
            sales_fingerprint, [noise_fingerprint, copy], threshold=0.0,
        )
        assert [fp.id for fp, _ in ranked] == ["copy", "noise"]
        assert ranked[0][1] >= ranked[1][1]

    def test_find_similar_threshold(self, sales_fingerprint, noise_fingerprint):
        ranked = FingerprintGenerator().find_similar(sales_fingerprint, [noise_fingerprint], threshold=1.1)
        assert ranked == []
