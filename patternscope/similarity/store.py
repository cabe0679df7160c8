"""
Fingerprint Store

In-memory, id-keyed fingerprint repository. Insertion order is preserved
(it drives greedy clustering); re-storing an id replaces the fingerprint
without moving it. No eviction, no persistence.

Individual operations are guarded by a re-entrant lock.
"""

import logging
import threading
from typing import Dict, List, Mapping, Optional

from patternscope.errors import FingerprintNotFoundError
from patternscope.fingerprint.models import Fingerprint

logger = logging.getLogger(__name__)


class FingerprintStore:
    """Thread-safe id -> Fingerprint map."""

    def __init__(self):
        self._fingerprints: Dict[str, Fingerprint] = {}
        self._lock = threading.RLock()

    def put(self, fingerprint: Fingerprint, key: Optional[str] = None) -> None:
        """Upsert under key (default: the fingerprint id)."""
        key = key if key is not None else fingerprint.id
        with self._lock:
            replaced = key in self._fingerprints
            self._fingerprints[key] = fingerprint
        logger.debug(f"{'Replaced' if replaced else 'Stored'} fingerprint '{key}'")

    def get(self, key: str) -> Fingerprint:
        """
        Raises:
            FingerprintNotFoundError: nothing stored under key
        """
        with self._lock:
            try:
                return self._fingerprints[key]
            except KeyError:
                raise FingerprintNotFoundError(key) from None

    def remove(self, key: str) -> bool:
        """Delete key; False when it was not stored."""
        with self._lock:
            return self._fingerprints.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._fingerprints.clear()
        logger.debug("Cleared fingerprint store")

    def values(self) -> List[Fingerprint]:
        """Snapshot of stored fingerprints, insertion order."""
        with self._lock:
            return list(self._fingerprints.values())

    def items(self) -> List[tuple]:
        with self._lock:
            return list(self._fingerprints.items())

    def update(self, fingerprints: Mapping[str, Fingerprint]) -> None:
        """Upsert many under their mapping keys."""
        with self._lock:
            for key, fingerprint in fingerprints.items():
                self._fingerprints[key] = fingerprint
        logger.info(f"Imported {len(fingerprints)} fingerprint(s)")

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._fingerprints

    def __len__(self) -> int:
        with self._lock:
            return len(self._fingerprints)
