"""
Rule Data Models — Rules, rule sets, and raw pattern findings.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Issues only carry low/medium/high; critical rules surface as high.
ISSUE_SEVERITY: dict[Severity, str] = {
    Severity.CRITICAL: "high",
    Severity.HIGH: "high",
    Severity.MEDIUM: "medium",
    Severity.LOW: "low",
}


class Rule(BaseModel):
    """A single named detection rule, optionally backed by a regex."""

    id: str = Field(..., min_length=1, description="Unique rule identifier, e.g. 'naming-convention'")
    name: str = Field(default="", description="Short human-readable rule name")
    description: str = Field(default="", description="What the rule flags")
    severity: Severity = Severity.MEDIUM
    pattern: str | None = Field(
        default=None,
        description="Single-line regex. Rules without a pattern are structural.",
    )
    enabled: bool = True

    model_config = {"frozen": True}


class RuleSet(BaseModel):
    """Versioned, ordered collection of rules."""

    version: str = "1.0.0"
    rules: list[Rule] = Field(default_factory=list)

    model_config = {"frozen": True}

    def get(self, rule_id: str) -> Rule | None:
        """Look up a rule by id."""
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None


class RawFinding(BaseModel):
    """One regex match of a rule against one source line."""

    rule_id: str
    line: int = Field(..., ge=1, description="1-based line number")
    description: str
    severity: Severity
    matched_text: str = Field(..., description="Full text matched by the rule pattern")
    captured: str | None = Field(
        default=None, description="First capture group, when the pattern defines one"
    )
