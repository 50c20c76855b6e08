"""
Suggestion Generator — Cached, per-issue remediation suggestions.

Issues are processed one at a time. Each issue's key is looked up in the shared
SuggestionCache first; on a miss the source context is fetched, replacement
code is produced (generative capability if configured, else the template
engine) and the result is published to the cache. Any failure while building
a suggestion yields a cached fallback suggestion instead of an error.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Callable, Protocol

from vulnlens.config import settings
from vulnlens.engine.fix_applicator import FixApplicator
from vulnlens.models.issue_models import Issue
from vulnlens.models.suggestion_models import FixResult, Suggestion
from vulnlens.suggestions.cache import SuggestionCache, suggestion_key
from vulnlens.suggestions.templates import TemplateEngine
from vulnlens.utils.workspace import resolve_in_workspace

logger = logging.getLogger("vulnlens.suggestions")

SourceProvider = Callable[[str], str]

UNAVAILABLE_ORIGINAL = "Unable to retrieve original code"


class GenerativeFixer(Protocol):
    """Optional external capability producing replacement code for an issue."""

    def generate_fix(self, issue: Issue, original_code: str) -> str | None:
        ...


def read_source_file(file_name: str) -> str:
    """Default source provider: read the document from disk."""
    return Path(file_name).read_text(encoding="utf-8")


def workspace_reader(root: str | Path) -> SourceProvider:
    """Source provider that only reads documents under the given root."""

    def read(file_name: str) -> str:
        return resolve_in_workspace(file_name, root).read_text(encoding="utf-8")

    return read


class SourceContext:
    """The issue's own line plus a bounded window around it."""

    def __init__(self, source: str, line_number: int, window: int) -> None:
        lines = source.split("\n")
        if line_number < 1 or line_number > len(lines):
            raise IndexError(
                f"Line {line_number} out of range (document has {len(lines)} lines)"
            )
        index = line_number - 1
        start = max(0, index - window)
        end = min(len(lines), index + window + 1)

        self.line = lines[index].rstrip("\r")
        self.window = "\n".join(line.rstrip("\r") for line in lines[start:end])
        self.line_count = len(lines)


class SuggestionGenerator:
    """
    Builds and caches one Suggestion per issue.

    Usage:
        generator = SuggestionGenerator(cache=SuggestionCache())
        suggestions = generator.generate(result.issues)
        generator.apply_suggestion(suggestions[0].id)
    """

    def __init__(
        self,
        cache: SuggestionCache | None = None,
        source_provider: SourceProvider | None = None,
        template_engine: TemplateEngine | None = None,
        generative_fixer: GenerativeFixer | None = None,
        fix_applicator: FixApplicator | None = None,
        context_lines: int | None = None,
    ) -> None:
        self.cache = cache or SuggestionCache()
        self.source_provider = source_provider or read_source_file
        self.template_engine = template_engine or TemplateEngine()
        self.generative_fixer = generative_fixer
        self.fix_applicator = fix_applicator or FixApplicator()
        self.context_lines = (
            context_lines if context_lines is not None else settings.context_window_lines
        )
        self._key_locks: dict[str, threading.Lock] = {}
        self._key_locks_guard = threading.Lock()

    def generate(self, issues: list[Issue]) -> list[Suggestion]:
        """
        Return one suggestion per issue, in order.

        Sequential on purpose: bounds load on any external capability.
        """
        logger.info(f"Generating suggestions for {len(issues)} issues")
        return [self.get_or_create(issue) for issue in issues]

    def get_or_create(self, issue: Issue) -> Suggestion:
        """Cached suggestion for the issue, building it on first request."""
        key = suggestion_key(issue)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f"Using cached suggestion {key}")
            return cached

        # One in-flight computation per key
        with self._lock_for(key):
            cached = self.cache.get(key)
            if cached is not None:
                return cached
            context = None
            try:
                context = SourceContext(
                    self.source_provider(issue.fileName), issue.lineNumber, self.context_lines
                )
                suggestion = self._build(key, issue, context)
            except Exception as e:
                logger.error(f"Error generating suggestion for {key}: {e}")
                suggestion = self._fallback(key, issue, context)
            stored = self.cache.put_if_absent(suggestion)

        with self._key_locks_guard:
            self._key_locks.pop(key, None)
        return stored

    def get_suggestion(self, suggestion_id: str) -> Suggestion | None:
        return self.cache.get(suggestion_id)

    def apply_suggestion(self, suggestion_id: str) -> FixResult:
        """Apply a cached suggestion's generated code to its line."""
        suggestion = self.cache.get(suggestion_id)
        if suggestion is None:
            logger.error(f"Suggestion not found: {suggestion_id}")
            return FixResult(
                success=False,
                status="not_found",
                message="Suggestion not found. Please generate a new suggestion.",
            )

        if suggestion.document_line_count is None:
            # The document was never read, so there is nothing to validate the target against
            logger.error(f"Refusing to apply {suggestion_id}: document state unknown")
            return FixResult(
                success=False,
                status="stale_document",
                fileName=suggestion.fileName,
                lineNumber=suggestion.lineNumber,
                message="Source was unavailable when the suggestion was built. Re-run the analysis.",
            )

        return self.fix_applicator.apply(
            suggestion.fileName,
            suggestion.lineNumber,
            suggestion.generatedCode,
            expected_line_count=suggestion.document_line_count,
            expected_line=suggestion.originalCode,
        )

    def clear_cache(self) -> int:
        count = self.cache.clear()
        logger.info(f"Suggestion cache cleared ({count} entries)")
        return count

    def _lock_for(self, key: str) -> threading.Lock:
        with self._key_locks_guard:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = self._key_locks[key] = threading.Lock()
            return lock

    def _build(self, key: str, issue: Issue, context: SourceContext) -> Suggestion:
        source = "template"
        code = None
        if self.generative_fixer is not None:
            try:
                code = self.generative_fixer.generate_fix(issue, context.line)
            except Exception as e:
                logger.warning(f"Generative fix failed for {key}, using template: {e}")
                code = None
            if code:
                source = "generative"

        if not code:
            code = self.template_engine.render(issue, context.line)

        return Suggestion(
            id=key,
            issueDescription=issue.description,
            suggestedFix=issue.suggestedFix or "No specific fix provided",
            generatedCode=code,
            lineNumber=issue.lineNumber,
            fileName=issue.fileName,
            originalCode=context.line,
            source=source,
            context=context.window,
            document_line_count=context.line_count,
        )

    def _fallback(
        self, key: str, issue: Issue, context: SourceContext | None = None
    ) -> Suggestion:
        """
        Explanatory comment in place of generated code.

        When the document was read the original line is kept below the comment
        and the line count is recorded, so applying it is still stale-checked.
        """
        fix = issue.suggestedFix or "Manual review required"
        code = f"// Suggestion unavailable\n// Please manually fix: {fix}"
        if context is None:
            return Suggestion(
                id=key,
                issueDescription=issue.description,
                suggestedFix=fix,
                generatedCode=code,
                lineNumber=issue.lineNumber,
                fileName=issue.fileName,
                originalCode=UNAVAILABLE_ORIGINAL,
                source="fallback",
            )

        indent = context.line[: len(context.line) - len(context.line.lstrip())]
        return Suggestion(
            id=key,
            issueDescription=issue.description,
            suggestedFix=fix,
            generatedCode="\n".join(
                [indent + part for part in code.split("\n")] + [context.line]
            ),
            lineNumber=issue.lineNumber,
            fileName=issue.fileName,
            originalCode=context.line,
            source="fallback",
            context=context.window,
            document_line_count=context.line_count,
        )
