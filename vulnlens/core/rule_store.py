"""
Rule Store — Loads the versioned rule set from a JSON rule file.

Missing, unreadable, or corrupt rule files never stop a scan: the built-in
default rule set is used instead. When no rule file exists the defaults are
written to it first, so later loads are reproducible and user-editable.
Rules whose pattern does not compile are quarantined (skipped with a warning).
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path

from pydantic import ValidationError

from vulnlens.config import settings
from vulnlens.models.rule_models import Rule, RuleSet, Severity
from vulnlens.utils.atomic_io import atomic_write_json

logger = logging.getLogger("vulnlens.rules")

NAMING_CONVENTION = "naming-convention"
EXCESSIVE_NESTING = "excessive-nesting"
HARDCODED_SENSITIVE_INFO = "hardcoded-sensitive-info"


def default_rule_set() -> RuleSet:
    """Built-in rules used when no usable rule file exists."""
    return RuleSet(
        version="1.0.0",
        rules=[
            Rule(
                id=NAMING_CONVENTION,
                name="Constant Naming Convention",
                description="Static final variables should be in UPPER_CASE_WITH_UNDERSCORES",
                severity=Severity.MEDIUM,
                pattern=r"static\s+final\s+\w+\s+([a-z][A-Za-z0-9_]*)",
                enabled=True,
            ),
            Rule(
                id=EXCESSIVE_NESTING,
                name="Excessive Nesting",
                description="Control structures should not be nested more than 4 levels deep",
                severity=Severity.HIGH,
                enabled=True,
            ),
            Rule(
                id=HARDCODED_SENSITIVE_INFO,
                name="Hardcoded Sensitive Information",
                description="API keys, passwords, and secrets should not be hardcoded",
                severity=Severity.CRITICAL,
                pattern=(
                    r"(?i)(?:api[_-]?key|apikey|secret|password|pwd|token)"
                    r"\s*=\s*[\"']([^\"']{8,})[\"']"
                ),
                enabled=True,
            ),
        ],
    )


def compile_pattern(pattern: str) -> re.Pattern[str] | None:
    """Compile a rule pattern, returning None when it is malformed."""
    try:
        return re.compile(pattern)
    except re.error:
        return None


class RuleStore:
    """
    Durable rule set holder.

    Usage:
        store = RuleStore("rules.json")
        rule_set = store.load()
        rule = store.get_rule("naming-convention")
    """

    def __init__(self, rules_path: str | Path | None = None) -> None:
        self.rules_path = Path(rules_path or settings.rules_path)
        self._rule_set: RuleSet | None = None
        self.quarantined: list[str] = []

    @property
    def rule_set(self) -> RuleSet:
        """The loaded rule set, loading on first access."""
        if self._rule_set is None:
            return self.load()
        return self._rule_set

    def load(self) -> RuleSet:
        """
        (Re)load the rule set from disk, replacing any previous one wholesale.

        Returns:
            The active RuleSet (defaults if the file is missing or corrupt).
        """
        if not self.rules_path.exists():
            self._persist_defaults()

        try:
            raw = json.loads(self.rules_path.read_text(encoding="utf-8"))
            loaded = RuleSet.model_validate(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            logger.warning(
                f"Failed to load rules from {self.rules_path}, using default rules: {e}"
            )
            loaded = default_rule_set()

        self._rule_set = self._quarantine_invalid(loaded)
        logger.info(
            f"Loaded rule set v{self._rule_set.version} "
            f"({len(self._rule_set.rules)} rules, {len(self.quarantined)} quarantined)"
        )
        return self._rule_set

    def get_rule(self, rule_id: str) -> Rule | None:
        """Get a rule by id, or None if no such rule is loaded."""
        return self.rule_set.get(rule_id)

    def _persist_defaults(self) -> None:
        defaults = default_rule_set()
        try:
            atomic_write_json(self.rules_path, defaults.model_dump(mode="json"))
            logger.info(f"Wrote default rules to {self.rules_path}")
        except OSError as e:
            logger.warning(f"Could not write default rules to {self.rules_path}: {e}")

    def _quarantine_invalid(self, rule_set: RuleSet) -> RuleSet:
        valid: list[Rule] = []
        self.quarantined = []
        for rule in rule_set.rules:
            if rule.pattern and compile_pattern(rule.pattern) is None:
                logger.warning(f"Quarantined rule '{rule.id}': invalid pattern {rule.pattern!r}")
                self.quarantined.append(rule.id)
                continue
            valid.append(rule)
        return RuleSet(version=rule_set.version, rules=valid)
