"""
Issue Data Models — The canonical finding shape shared by every detector.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel, Field

IssueSeverity = Literal["high", "medium", "low"]
DetectorName = Literal["pattern", "structural", "sensitivity", "semantic", "keyword"]


class Issue(BaseModel):
    """A single detected finding tied to a file and line."""

    fileName: str = ""  # noqa: N815
    lineNumber: int = Field(..., ge=1)  # noqa: N815
    description: str = Field(..., min_length=1)
    severity: IssueSeverity
    message: str = ""
    suggestedFix: str = ""  # noqa: N815
    diagnosticRef: Any = None  # noqa: N815  opaque, owned by the diagnostics collaborator
    range: Any = None
    category: str | None = Field(default=None, description="e.g. 'Credentials', 'PII'")
    detector: DetectorName | None = None
    rule_id: str | None = None


class AnalysisResult(BaseModel):
    """Issues found in one document, in detector order."""

    fileName: str = ""  # noqa: N815
    issues: list[Issue] = Field(default_factory=list)

    @property
    def total_issues(self) -> int:
        return len(self.issues)


@dataclass
class SemanticMatch:
    """A candidate substring that scored above threshold against a keyword."""

    keyword: str
    similarity: float
    matched_text: str
    category: str
