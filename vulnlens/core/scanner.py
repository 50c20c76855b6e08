"""
Vulnerability Scanner — Runs every detector over one document.

Detector order is fixed: pattern rules (with structural checks for
pattern-less rules), sensitive-logging catalog, then semantic classification.
Outputs are concatenated in that order without cross-detector deduplication;
the same line may carry findings from several detectors.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path

from vulnlens.core.logging_sensitivity import check_logging_sensitivity
from vulnlens.core.pattern_detector import apply_rules
from vulnlens.core.rule_store import RuleStore
from vulnlens.core.semantic_detector import SemanticLoggingDetector
from vulnlens.core.structural_checks import STRUCTURAL_CHECKS
from vulnlens.models.issue_models import AnalysisResult, Issue
from vulnlens.models.rule_models import ISSUE_SEVERITY, RawFinding, Rule, RuleSet

logger = logging.getLogger("vulnlens.scanner")

RULE_FIX_HINTS: dict[str, str] = {
    "naming-convention": "Rename the constant to UPPER_CASE_WITH_UNDERSCORES.",
    "excessive-nesting": "Extract nested blocks into methods or use early returns to flatten control flow.",
    "hardcoded-sensitive-info": "Move the secret to an environment variable or a secrets manager.",
}

# Rules whose captured group is the secret itself; it never reaches an Issue.
MASKED_RULES = {"hardcoded-sensitive-info"}


def _mask(value: str) -> str:
    return value[:2] + "***" if len(value) > 2 else "***"


def finding_to_issue(finding: RawFinding, rule: Rule | None, detector: str) -> Issue:
    """Normalize a rule finding into the canonical Issue shape."""
    name = rule.name if rule and rule.name else finding.rule_id
    hint = RULE_FIX_HINTS.get(finding.rule_id, f"Review the code flagged by rule '{name}'.")
    if finding.rule_id in MASKED_RULES and finding.captured:
        subject = finding.matched_text.replace(finding.captured, _mask(finding.captured))
    else:
        subject = finding.captured or finding.matched_text
    return Issue(
        lineNumber=finding.line,
        description=f'{finding.description}: "{subject}"',
        severity=ISSUE_SEVERITY[finding.severity],
        message=f"Rule violation: {name}",
        suggestedFix=hint,
        category=name,
        detector=detector,
        rule_id=finding.rule_id,
    )


class VulnerabilityScanner:
    """
    Aggregates all detectors into one ordered Issue list.

    Detectors carry no per-document state, so one scanner can serve
    concurrent analyses of different documents.
    """

    def __init__(
        self,
        rule_store: RuleStore | None = None,
        semantic_detector: SemanticLoggingDetector | None = None,
        rule_set: RuleSet | None = None,
    ) -> None:
        self.rule_store = rule_store or RuleStore()
        self.semantic_detector = semantic_detector or SemanticLoggingDetector(backend=None)
        self._rule_set = rule_set

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set or self.rule_store.rule_set

    def analyze(self, source: str, file_name: str = "") -> AnalysisResult:
        """
        Run pattern, sensitive-logging, and semantic detection.

        Args:
            source: Document text.
            file_name: Identity stamped onto every issue (may be empty).

        Returns:
            AnalysisResult with issues in detector order.
        """
        start = time.monotonic()
        issues: list[Issue] = []

        issues.extend(self._rule_issues(source))
        issues.extend(check_logging_sensitivity(source))
        issues.extend(self.semantic_detector.analyze(source))

        stamped = [issue.model_copy(update={"fileName": file_name}) for issue in issues]

        elapsed = (time.monotonic() - start) * 1000
        logger.info(
            f"Analyzed {file_name or '<buffer>'}: {len(stamped)} issues "
            f"({elapsed:.1f}ms, semantic={self.semantic_detector.state.value})"
        )
        return AnalysisResult(fileName=file_name, issues=stamped)

    def analyze_file(self, path: str | Path) -> AnalysisResult:
        """
        Read and analyze a file on disk.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        file_path = Path(path)
        if not file_path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")
        source = file_path.read_text(encoding="utf-8", errors="replace")
        return self.analyze(source, str(file_path))

    def _rule_issues(self, source: str) -> list[Issue]:
        rule_set = self.rule_set
        issues = [
            finding_to_issue(finding, rule_set.get(finding.rule_id), "pattern")
            for finding in apply_rules(rule_set, source)
        ]

        for rule in rule_set.rules:
            if not rule.enabled or rule.pattern:
                continue
            check_fn = STRUCTURAL_CHECKS.get(rule.id)
            if check_fn is None:
                continue
            try:
                findings = check_fn(rule, source)
            except Exception as e:
                # Structural checks should not crash the scan
                logger.warning(f"Structural check '{rule.id}' failed: {e}")
                continue
            issues.extend(finding_to_issue(f, rule, "structural") for f in findings)

        return issues
