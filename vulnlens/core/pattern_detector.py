"""
Pattern Rule Detector — Applies regex-backed rules line by line.

Pure function of (rule set, source text). Each line is matched on its own;
there is no multi-line matching. Findings are ordered by line, then by rule
order, then by match position. A malformed pattern only disables its own rule.
"""

from __future__ import annotations

import logging

from vulnlens.core.rule_store import compile_pattern
from vulnlens.models.rule_models import RawFinding, RuleSet

logger = logging.getLogger("vulnlens.core.pattern_detector")


def apply_rules(rule_set: RuleSet, source: str) -> list[RawFinding]:
    """
    Run every enabled, pattern-backed rule against every line.

    Args:
        rule_set: Rules to apply, in order.
        source: Full document text.

    Returns:
        One RawFinding per regex match.
    """
    compiled = []
    for rule in rule_set.rules:
        if not rule.enabled or not rule.pattern:
            continue
        regex = compile_pattern(rule.pattern)
        if regex is None:
            logger.warning(f"Skipping rule '{rule.id}': malformed pattern {rule.pattern!r}")
            continue
        compiled.append((rule, regex))

    findings: list[RawFinding] = []
    for index, line in enumerate(source.split("\n")):
        line = line.rstrip("\r")
        for rule, regex in compiled:
            for match in regex.finditer(line):
                if not match.group(0):
                    continue
                findings.append(
                    RawFinding(
                        rule_id=rule.id,
                        line=index + 1,
                        description=rule.description or rule.name or rule.id,
                        severity=rule.severity,
                        matched_text=match.group(0),
                        captured=match.group(1) if regex.groups else None,
                    )
                )

    return findings
