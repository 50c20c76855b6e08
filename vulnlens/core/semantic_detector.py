"""
Semantic Similarity Detector — Embedding-based classification of logged content.

For each logging line, candidate substrings (string literals, getXxx()
accessors, identifiers built on sensitive root words, and exact keyword hits)
are embedded and compared with a fixed keyword catalog by cosine similarity.
A candidate is classified into a category when its best similarity reaches the
threshold.

The embedding backend moves through UNINITIALIZED → INITIALIZING → READY or
FAILED. Initialization is attempted once, on a background thread started at
construction. Until the backend is READY every call degrades to keyword-only
matching. An embedding error on one line degrades that line only. Embeddings
are never reused across calls.
"""

from __future__ import annotations

import logging
import re
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from vulnlens.config import settings
from vulnlens.core.embeddings import EmbeddingBackend, cosine_similarity
from vulnlens.core.log_statements import is_logging_line, split_lines
from vulnlens.core.logging_sensitivity import (
    API_CREDENTIALS,
    CATEGORY_SEVERITY,
    CREDENTIALS,
    FINANCIAL,
    PII,
    SESSION,
    suggested_fix,
)
from vulnlens.models.issue_models import Issue, IssueSeverity, SemanticMatch

logger = logging.getLogger("vulnlens.semantic")

SEMANTIC_MESSAGE = "Potential sensitive information detected in logging"


class BackendState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class KeywordGroup:
    category: str
    severity: IssueSeverity
    keywords: tuple[str, ...]


SENSITIVE_KEYWORDS: tuple[KeywordGroup, ...] = (
    KeywordGroup(CREDENTIALS, "high", ("password", "secret", "token", "auth", "credential", "login")),
    KeywordGroup(API_CREDENTIALS, "high", ("api", "apikey", "bearer", "oauth", "authorization")),
    KeywordGroup(FINANCIAL, "high", ("payment", "card", "account number", "billing", "transaction", "money")),
    KeywordGroup(PII, "high", ("email", "phone", "address", "ssn", "social security", "pii")),
    KeywordGroup(PII, "medium", ("user", "customer", "userdetails", "profile", "personal", "individual")),
    KeywordGroup(SESSION, CATEGORY_SEVERITY[SESSION], ("session", "cookie", "sessionid")),
)

_STRING_LITERAL = re.compile(r'"([^"]+)"|\'([^\']+)\'')
_GETTER_CALL = re.compile(r"\.\s*(get\w+\(\))", re.IGNORECASE)
_SENSITIVE_IDENTIFIER = re.compile(
    r"\b\w*(?:user|customer|pass|secret|token|key|auth|account|payment)\w*\b",
    re.IGNORECASE,
)
MIN_CANDIDATE_LENGTH = 3


def _keyword_regex(keyword: str) -> re.Pattern[str]:
    return re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)


def extract_candidates(
    line: str, keyword_groups: Sequence[KeywordGroup] = SENSITIVE_KEYWORDS
) -> list[str]:
    """Substrings of a logging line worth classifying, in first-seen order."""
    found: list[str] = []

    for match in _STRING_LITERAL.finditer(line):
        found.append(match.group(1) or match.group(2))
    found.extend(m.group(1) for m in _GETTER_CALL.finditer(line))
    found.extend(m.group(0) for m in _SENSITIVE_IDENTIFIER.finditer(line))
    for group in keyword_groups:
        for keyword in group.keywords:
            found.extend(m.group(0) for m in _keyword_regex(keyword).finditer(line))

    candidates: list[str] = []
    for text in found:
        if len(text) >= MIN_CANDIDATE_LENGTH and text not in candidates:
            candidates.append(text)
    return candidates


def keyword_line_analysis(
    line: str,
    line_number: int,
    keyword_groups: Sequence[KeywordGroup] = SENSITIVE_KEYWORDS,
) -> list[Issue]:
    """Keyword-only classification of one logging line."""
    issues: list[Issue] = []
    for group in keyword_groups:
        for keyword in group.keywords:
            for match in _keyword_regex(keyword).finditer(line):
                text = match.group(0)
                issues.append(
                    Issue(
                        lineNumber=line_number,
                        description=(
                            f"Potential sensitive {group.category} keyword detected "
                            f'in logging: "{text}" (keyword matching)'
                        ),
                        severity=group.severity,
                        message=SEMANTIC_MESSAGE,
                        suggestedFix=suggested_fix(group.category, text),
                        category=group.category,
                        detector="keyword",
                    )
                )
    return issues


class SemanticLoggingDetector:
    """
    Embedding-backed logging analyzer with keyword-only degraded mode.

    Usage:
        detector = SemanticLoggingDetector(backend)
        issues = detector.analyze(source)   # never blocks on initialization
    """

    def __init__(
        self,
        backend: EmbeddingBackend | None = None,
        threshold: float | None = None,
        keyword_groups: Sequence[KeywordGroup] = SENSITIVE_KEYWORDS,
        auto_initialize: bool = True,
    ) -> None:
        self._backend = backend
        self.threshold = threshold if threshold is not None else settings.similarity_threshold
        self.keyword_groups = tuple(keyword_groups)
        self._state = BackendState.UNINITIALIZED
        self._state_lock = threading.Lock()
        self._settled = threading.Event()

        if auto_initialize:
            threading.Thread(
                target=self.initialize, name="embedding-init", daemon=True
            ).start()

    @property
    def state(self) -> BackendState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is BackendState.READY

    def initialize(self) -> BackendState:
        """Bring the backend up. Only the first call does any work."""
        with self._state_lock:
            if self._state is not BackendState.UNINITIALIZED:
                return self._state
            self._state = BackendState.INITIALIZING

        if self._backend is None:
            logger.warning("No embedding backend configured, using keyword matching")
            return self._settle(BackendState.FAILED)

        try:
            logger.info("Initializing embedding backend...")
            self._backend.load()
        except Exception as e:
            logger.error(f"Failed to initialize embedding backend: {e}")
            return self._settle(BackendState.FAILED)

        logger.info("Embedding backend initialized")
        return self._settle(BackendState.READY)

    def wait_until_settled(self, timeout: float | None = None) -> BackendState:
        """Block until initialization finished (READY or FAILED) or timeout."""
        self._settled.wait(timeout)
        return self._state

    def _settle(self, state: BackendState) -> BackendState:
        with self._state_lock:
            self._state = state
        self._settled.set()
        return state

    # ── Analysis ──

    def analyze(self, source: str) -> list[Issue]:
        """Classify sensitive content in every logging line of a document."""
        if not self.is_ready:
            logger.debug(f"Embedding backend {self._state.value}, keyword matching only")
            return self.keyword_analysis(source)

        issues: list[Issue] = []
        keyword_vectors: list[tuple[KeywordGroup, str, Sequence[float]]] | None = None

        for index, line in enumerate(split_lines(source)):
            if not is_logging_line(line):
                continue
            line_number = index + 1
            try:
                if keyword_vectors is None:
                    keyword_vectors = self._embed_keywords()
                issues.extend(self._analyze_line(line, line_number, keyword_vectors))
            except Exception as e:
                logger.warning(
                    f"Semantic analysis failed on line {line_number}, "
                    f"falling back to keyword matching: {e}"
                )
                issues.extend(keyword_line_analysis(line, line_number, self.keyword_groups))

        return issues

    def keyword_analysis(self, source: str) -> list[Issue]:
        """Degraded mode: keyword matching over every logging line."""
        issues: list[Issue] = []
        for index, line in enumerate(split_lines(source)):
            if is_logging_line(line):
                issues.extend(keyword_line_analysis(line, index + 1, self.keyword_groups))
        return issues

    def find_matches(
        self,
        text: str,
        keyword_vectors: list[tuple[KeywordGroup, str, Sequence[float]]],
    ) -> list[tuple[SemanticMatch, IssueSeverity]]:
        """Best above-threshold keyword per category for one candidate."""
        vector = self._backend.embed(text)
        best: dict[str, tuple[SemanticMatch, IssueSeverity]] = {}

        for group, keyword, keyword_vector in keyword_vectors:
            similarity = cosine_similarity(vector, keyword_vector)
            if similarity < self.threshold:
                continue
            current = best.get(group.category)
            if current is None or similarity > current[0].similarity:
                best[group.category] = (
                    SemanticMatch(
                        keyword=keyword,
                        similarity=min(1.0, max(0.0, similarity)),
                        matched_text=text,
                        category=group.category,
                    ),
                    group.severity,
                )

        return list(best.values())

    def _embed_keywords(self) -> list[tuple[KeywordGroup, str, Sequence[float]]]:
        return [
            (group, keyword, self._backend.embed(keyword))
            for group in self.keyword_groups
            for keyword in group.keywords
        ]

    def _analyze_line(
        self,
        line: str,
        line_number: int,
        keyword_vectors: list[tuple[KeywordGroup, str, Sequence[float]]],
    ) -> list[Issue]:
        issues: list[Issue] = []
        for text in extract_candidates(line, self.keyword_groups):
            for match, severity in self.find_matches(text, keyword_vectors):
                issues.append(
                    Issue(
                        lineNumber=line_number,
                        description=(
                            f"Potential sensitive {match.category} detected in logging: "
                            f'"{match.matched_text}" (similarity: {match.similarity * 100:.1f}%)'
                        ),
                        severity=severity,
                        message=SEMANTIC_MESSAGE,
                        suggestedFix=suggested_fix(match.category, match.matched_text),
                        category=match.category,
                        detector="semantic",
                    )
                )
        return issues
