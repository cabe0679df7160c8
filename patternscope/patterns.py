"""
Pattern value objects

DataPattern is what every detector emits. AdvancedPattern adds the
algorithm tag, significance, effect size and sample metadata attached by
the advanced detector. Both are immutable and created per detection call.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple


class PatternType(str, Enum):
    """Pattern categories."""
    TREND = "trend"
    SEASONAL = "seasonal"
    CYCLICAL = "cyclical"
    ANOMALY = "anomaly"
    CORRELATION = "correlation"
    CLUSTER = "cluster"
    DISTRIBUTION = "distribution"


@dataclass(frozen=True)
class DataPattern:
    """A detected pattern."""
    type: str
    confidence: float
    description: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    affected_fields: List[str] = field(default_factory=list)
    time_range: Optional[Tuple[float, float]] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PatternMetadata:
    """Sample and test details behind an advanced pattern."""
    sample_size: int = 0
    test_statistic: Optional[float] = None
    p_value: Optional[float] = None
    algorithm_params: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AdvancedPattern(DataPattern):
    """DataPattern annotated with algorithm, significance and effect size."""
    algorithm: str = "unknown"
    statistical_significance: float = 0.0
    effect_size: float = 0.0
    metadata: PatternMetadata = field(default_factory=PatternMetadata)

    @classmethod
    def from_pattern(
        cls,
        pattern: DataPattern,
        algorithm: str,
        statistical_significance: float,
        effect_size: float,
        metadata: PatternMetadata,
    ) -> "AdvancedPattern":
        return cls(
            type=pattern.type,
            confidence=pattern.confidence,
            description=pattern.description,
            parameters=dict(pattern.parameters),
            affected_fields=list(pattern.affected_fields),
            time_range=pattern.time_range,
            algorithm=algorithm,
            statistical_significance=statistical_significance,
            effect_size=effect_size,
            metadata=metadata,
        )


def sort_by_confidence(patterns: List[DataPattern]) -> List[DataPattern]:
    """Descending by confidence; stable for ties."""
    return sorted(patterns, key=lambda p: p.confidence, reverse=True)


__all__ = [
    "PatternType",
    "DataPattern",
    "PatternMetadata",
    "AdvancedPattern",
    "sort_by_confidence",
]
