"""
Suggestion Data Models — Cached remediations and fix application results.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from vulnlens.models.issue_models import Issue

FixStatus = Literal[
    "applied",
    "not_found",
    "file_missing",
    "line_out_of_range",
    "stale_document",
    "write_failed",
    "outside_workspace",
]


class Suggestion(BaseModel):
    """A generated remediation for one Issue, keyed by a content-derived id."""

    id: str = Field(..., description="fileName:lineNumber:stableHash(description)")
    issueDescription: str  # noqa: N815
    suggestedFix: str  # noqa: N815
    generatedCode: str  # noqa: N815
    lineNumber: int  # noqa: N815
    fileName: str = ""  # noqa: N815
    originalCode: str = ""  # noqa: N815
    source: Literal["template", "generative", "fallback"] = "template"
    context: str = Field(default="", description="Source window around the issue's line")
    document_line_count: int | None = Field(
        default=None, description="Line count of the document when the suggestion was built"
    )


class FixResult(BaseModel):
    """Outcome of a single-line fix application."""

    success: bool
    status: FixStatus
    fileName: str = ""  # noqa: N815
    lineNumber: int = 0  # noqa: N815
    message: str = ""


class SuggestionRequest(BaseModel):
    """Request body for POST /suggestions."""

    issues: list[Issue] = Field(default_factory=list)


class CacheStats(BaseModel):
    count: int = 0
    by_source: dict[str, int] = Field(default_factory=dict)
