"""
Detector Base Classes

All pattern detectors inherit from BaseDetector.
Provides common handling for:
- Settings section lookup (detectors.<name>)
- Minimum sample / field gates
- Degenerate computations (skipped, never raised)

Detectors work on the numeric frame (see patternscope.dataset.numeric_frame):
one float column per numeric field, one row per record.

Usage:
    class TrendDetector(FieldDetector):
        name = "trend"
        pattern_type = PatternType.TREND

        def detect_field(self, column, values):
            ...
            return [DataPattern(...)]
"""

import logging
from abc import ABC, abstractmethod
from itertools import combinations
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from patternscope.config import Settings, get_settings
from patternscope.errors import DegenerateComputationError
from patternscope.patterns import DataPattern

logger = logging.getLogger(__name__)

# Failures that mean "no pattern here", not "bug"
SKIPPABLE_ERRORS = (
    DegenerateComputationError,
    np.linalg.LinAlgError,
    FloatingPointError,
    ValueError,
)


class BaseDetector(ABC):
    """
    Abstract base class for all pattern detectors.

    Subclasses must define:
        - name: Registry key, also the settings section under "detectors"
        - pattern_type: Pattern type emitted
        - run(): Detection over the whole numeric frame
    """

    name: str = "base"
    pattern_type: str = "unknown"
    algorithm: str = "unknown"

    # Gates (min_samples may be overridden from settings)
    min_samples: int = 1
    min_fields: int = 1

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.params: Dict[str, Any] = self.settings.section(f"detectors.{self.name}")
        self.min_samples = int(self.params.get("min_samples", self.min_samples))

    def detect(self, frame: pd.DataFrame) -> List[DataPattern]:
        """
        Run detection, honouring the sample and field gates.

        Returns an empty list for insufficient data or degenerate input.
        """
        n_rows, n_fields = frame.shape
        if n_rows < self.min_samples or n_fields < self.min_fields:
            return []

        try:
            patterns = self.run(frame)
        except SKIPPABLE_ERRORS as e:
            logger.debug(f"{self.name}: skipped ({e})")
            return []

        logger.debug(f"{self.name}: {len(patterns)} pattern(s)")
        return patterns

    @abstractmethod
    def run(self, frame: pd.DataFrame) -> List[DataPattern]:
        """Detect patterns in a frame that passed the gates."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


class FieldDetector(BaseDetector):
    """Detector applied to each numeric field independently."""

    def run(self, frame: pd.DataFrame) -> List[DataPattern]:
        patterns = []
        for column in frame.columns:
            values = frame[column].to_numpy(dtype=float)
            try:
                patterns.extend(self.detect_field(column, values))
            except SKIPPABLE_ERRORS as e:
                logger.debug(f"{self.name}: skipped field {column} ({e})")
        return patterns

    @abstractmethod
    def detect_field(self, column: str, values: np.ndarray) -> List[DataPattern]:
        pass


class PairDetector(BaseDetector):
    """Detector applied to each pair of numeric fields (i < j, schema order)."""

    min_fields = 2

    def run(self, frame: pd.DataFrame) -> List[DataPattern]:
        patterns = []
        for first, second in combinations(frame.columns, 2):
            x = frame[first].to_numpy(dtype=float)
            y = frame[second].to_numpy(dtype=float)
            try:
                patterns.extend(self.detect_pair(first, second, x, y))
            except SKIPPABLE_ERRORS as e:
                logger.debug(f"{self.name}: skipped pair {first}/{second} ({e})")
        return patterns

    @abstractmethod
    def detect_pair(
        self,
        first: str,
        second: str,
        x: np.ndarray,
        y: np.ndarray,
    ) -> List[DataPattern]:
        pass
