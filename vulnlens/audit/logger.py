"""
Audit Logger — JSON-lines trail of analyses, suggestion batches, and fix applies.

One line per event. Appends are serialized so concurrent requests never
interleave partial records.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from collections import Counter, deque
from pathlib import Path

from vulnlens.config import settings
from vulnlens.models.scan_models import AuditEntry

logger = logging.getLogger("vulnlens.audit")


class AuditLogger:
    """Append-only audit trail backed by a JSON-lines file."""

    def __init__(self, log_path: str | Path | None = None) -> None:
        self.log_path = Path(log_path or settings.audit_log_path)
        self._lock = threading.Lock()

    def log(self, entry: AuditEntry) -> None:
        """Append one entry. A failed write is logged, never raised."""
        record = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime()),
            **entry.model_dump(exclude_none=True),
        }

        with self._lock:
            try:
                with open(self.log_path, "a", encoding="utf-8") as f:
                    f.write(json.dumps(record) + "\n")
            except OSError as e:
                logger.error(f"Failed to write audit entry for {entry.file_name or '<buffer>'}: {e}")

    def recent(self, count: int = 50, event: str | None = None) -> list[dict]:
        """Last `count` entries, oldest first, optionally only one event type."""
        tail: deque[dict] = deque(maxlen=max(count, 0))
        for record in self._records():
            if event is None or record.get("event") == event:
                tail.append(record)
        return list(tail)

    def summary(self) -> dict[str, dict[str, int]]:
        """Entry counts by event type and by apply outcome."""
        events: Counter[str] = Counter()
        outcomes: Counter[str] = Counter()
        for record in self._records():
            events[record.get("event", "unknown")] += 1
            if record.get("event") == "apply_fix":
                outcomes[record.get("outcome", "unknown")] += 1
        return {"events": dict(events), "apply_outcomes": dict(outcomes)}

    def _records(self):
        if not self.log_path.exists():
            return
        try:
            with open(self.log_path, encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        yield json.loads(line)
                    except json.JSONDecodeError:
                        logger.warning(f"Skipping malformed audit line in {self.log_path}")
        except OSError as e:
            logger.error(f"Failed to read audit log {self.log_path}: {e}")
