"""
FastAPI Dependencies — Shared singletons injected via Depends().
"""

from __future__ import annotations

from functools import lru_cache

from vulnlens.audit.logger import AuditLogger
from vulnlens.core.embeddings import build_embedding_backend
from vulnlens.core.rule_store import RuleStore
from vulnlens.core.scanner import VulnerabilityScanner
from vulnlens.core.semantic_detector import SemanticLoggingDetector
from vulnlens.engine.fix_applicator import FixApplicator
from vulnlens.suggestions.cache import SuggestionCache
from vulnlens.config import settings
from vulnlens.suggestions.generator import SuggestionGenerator, workspace_reader


@lru_cache
def get_rule_store() -> RuleStore:
    """Shared rule store singleton."""
    store = RuleStore()
    store.load()
    return store


@lru_cache
def get_semantic_detector() -> SemanticLoggingDetector:
    """Shared semantic detector; backend initialization starts in the background."""
    return SemanticLoggingDetector(backend=build_embedding_backend())


@lru_cache
def get_scanner() -> VulnerabilityScanner:
    """Shared scanner singleton."""
    return VulnerabilityScanner(
        rule_store=get_rule_store(),
        semantic_detector=get_semantic_detector(),
    )


@lru_cache
def get_suggestion_cache() -> SuggestionCache:
    """Process-wide suggestion cache."""
    return SuggestionCache()


@lru_cache
def get_suggestion_generator() -> SuggestionGenerator:
    """Shared suggestion generator singleton."""
    return SuggestionGenerator(
        cache=get_suggestion_cache(),
        source_provider=workspace_reader(settings.workspace_root),
        fix_applicator=FixApplicator(workspace_root=settings.workspace_root),
    )


@lru_cache
def get_audit_logger() -> AuditLogger:
    """Shared audit logger singleton."""
    return AuditLogger()
