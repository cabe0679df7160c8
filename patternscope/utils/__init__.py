"""
patternscope Utilities

Common utilities used across patternscope modules.
"""

from .logging import setup_logging

__all__ = [
    "setup_logging",
]
