"""
Suggestion Cache — Content-addressed, process-wide store of suggestions.

Keys are derived from an issue's (fileName, lineNumber, description). Once a
key is published, every lookup returns that same Suggestion object until the
cache is cleared.
"""

from __future__ import annotations

import struct
import threading
from collections import Counter
from typing import Any

from vulnlens.models.issue_models import Issue
from vulnlens.models.suggestion_models import Suggestion


def stable_hash(text: str) -> str:
    """
    Deterministic 32-bit string hash (h = h * 31 + code, wrapped to int32).

    Codes are UTF-16 code units, so characters outside the BMP contribute
    their surrogate pair. Not cryptographic; keys are already scoped by file
    and line.
    """
    value = 0
    data = text.encode("utf-16-le", "surrogatepass")
    for (unit,) in struct.iter_unpack("<H", data):
        value = (value * 31 + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return str(abs(value))


def suggestion_key(issue: Issue) -> str:
    """fileName:lineNumber:stableHash(description)"""
    return f"{issue.fileName}:{issue.lineNumber}:{stable_hash(issue.description)}"


class SuggestionCache:
    """
    Thread-safe in-memory suggestion store.

    Share one instance per session; pass it to the SuggestionGenerator.
    """

    def __init__(self) -> None:
        self._store: dict[str, Suggestion] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Suggestion | None:
        with self._lock:
            return self._store.get(key)

    def put_if_absent(self, suggestion: Suggestion) -> Suggestion:
        """Publish a suggestion unless its key is taken. Returns the stored object."""
        with self._lock:
            existing = self._store.get(suggestion.id)
            if existing is not None:
                return existing
            self._store[suggestion.id] = suggestion
            return suggestion

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._store

    def clear(self) -> int:
        """Clear all entries. Returns count removed."""
        with self._lock:
            count = len(self._store)
            self._store.clear()
            return count

    @property
    def size(self) -> int:
        with self._lock:
            return len(self._store)

    def stats(self) -> dict[str, Any]:
        """Cache statistics."""
        with self._lock:
            by_source = Counter(s.source for s in self._store.values())
            return {"count": len(self._store), "by_source": dict(by_source)}
