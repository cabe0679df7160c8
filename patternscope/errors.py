"""
patternscope exceptions

Only FingerprintNotFoundError and ConfigurationError ever reach callers.
DegenerateComputationError is raised by the numeric primitives and caught
at the detector / signature boundary, where the affected pattern or score
is skipped or replaced by a neutral value.
"""


class PatternScopeError(Exception):
    """Base class for all patternscope errors."""


class DegenerateComputationError(PatternScopeError, ArithmeticError):
    """Zero variance, zero denominator or too few samples for a statistic."""


class FingerprintNotFoundError(PatternScopeError, KeyError):
    """A stored fingerprint was requested by an id the store does not hold."""

    def __init__(self, fingerprint_id: str):
        self.fingerprint_id = fingerprint_id
        super().__init__(fingerprint_id)

    def __str__(self) -> str:
        return f"No fingerprint stored under id '{self.fingerprint_id}'"


class ConfigurationError(PatternScopeError, ValueError):
    """Settings file could not be read or parsed."""
