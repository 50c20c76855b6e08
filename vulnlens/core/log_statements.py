"""
Logging-call signatures shared by the sensitive-logging detectors.
"""

from __future__ import annotations

import re

# Matched case-insensitively
LOGGER_NAME = r"log(?:ger)?"
LOG_LEVEL = r"(?:info|debug|warn|error|trace|severe|warning)"

LOGGING_CALL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(rf"{LOGGER_NAME}\s*\.\s*{LOG_LEVEL}\s*\(", re.IGNORECASE),
    re.compile(r"System\s*\.\s*out\s*\.\s*print(?:ln|f)?\s*\(", re.IGNORECASE),
    re.compile(r"System\s*\.\s*err\s*\.\s*print(?:ln|f)?\s*\(", re.IGNORECASE),
)


def is_logging_line(line: str) -> bool:
    """True if the line contains a logging or print call."""
    return any(pattern.search(line) for pattern in LOGGING_CALL_PATTERNS)


def split_lines(source: str) -> list[str]:
    """Split on '\\n' and drop a trailing '\\r' so CRLF sources report the same lines."""
    return [line.rstrip("\r") for line in source.split("\n")]
