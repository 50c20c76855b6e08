"""
Scan Request/Response Models — API contract schemas.

These are the public-facing Pydantic models used by FastAPI endpoints.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    """Request body for /analyze and /report."""

    code: str = Field(..., description="Source text to analyze")
    file_name: str = Field(default="", description="Identity stamped on every issue")


class AnalyzeFileRequest(BaseModel):
    """Request body for /analyze/file."""

    path: str = Field(..., min_length=1, description="Path of a file on the server")


class AuditEntry(BaseModel):
    """Audit metadata for one analysis or fix application."""

    event: Literal["analysis", "apply_fix", "suggestions"]
    file_name: str = ""
    issues_found: int = 0
    suggestions: int = 0
    line_number: int | None = None
    outcome: str = ""
    semantic_state: str = ""
    duration_ms: float = 0.0
