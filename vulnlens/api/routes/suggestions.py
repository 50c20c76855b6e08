"""
Suggestion Routes — generate, look up, apply, and clear cached suggestions.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from vulnlens.api.dependencies import get_audit_logger, get_suggestion_generator
from vulnlens.audit.logger import AuditLogger
from vulnlens.models.scan_models import AuditEntry
from vulnlens.models.suggestion_models import (
    CacheStats,
    FixResult,
    Suggestion,
    SuggestionRequest,
)
from vulnlens.suggestions.generator import SuggestionGenerator
from vulnlens.utils.workspace import OutsideWorkspaceError, resolve_in_workspace

logger = logging.getLogger("vulnlens.api.suggestions")

router = APIRouter(prefix="/suggestions")

# FixResult.status -> HTTP status for failed applies
APPLY_FAILURE_CODES: dict[str, int] = {
    "not_found": 404,
    "file_missing": 404,
    "line_out_of_range": 409,
    "stale_document": 409,
    "write_failed": 500,
    "outside_workspace": 403,
}


@router.post("", response_model=list[Suggestion])
async def generate_suggestions(
    req: SuggestionRequest,
    generator: SuggestionGenerator = Depends(get_suggestion_generator),
    audit: AuditLogger = Depends(get_audit_logger),
):
    """One suggestion per submitted issue, served from cache where possible."""
    for issue in req.issues:
        if not issue.fileName:
            continue
        try:
            resolve_in_workspace(issue.fileName)
        except OutsideWorkspaceError as e:
            logger.warning(f"Rejected suggestion request for {issue.fileName}")
            raise HTTPException(status_code=403, detail=str(e))

    suggestions = generator.generate(req.issues)
    audit.log(
        AuditEntry(
            event="suggestions",
            file_name=req.issues[0].fileName if req.issues else "",
            suggestions=len(suggestions),
            outcome="complete",
        )
    )
    return suggestions


@router.get("/cache/stats", response_model=CacheStats)
async def cache_stats(generator: SuggestionGenerator = Depends(get_suggestion_generator)):
    return CacheStats(**generator.cache.stats())


@router.delete("/cache")
async def clear_cache(generator: SuggestionGenerator = Depends(get_suggestion_generator)):
    """Drop every cached suggestion."""
    return {"cleared": generator.clear_cache()}


@router.post("/{suggestion_id:path}/apply", response_model=FixResult)
async def apply_suggestion(
    suggestion_id: str,
    generator: SuggestionGenerator = Depends(get_suggestion_generator),
    audit: AuditLogger = Depends(get_audit_logger),
):
    """Apply a cached suggestion's generated code to its line."""
    result = generator.apply_suggestion(suggestion_id)
    audit.log(
        AuditEntry(
            event="apply_fix",
            file_name=result.fileName,
            line_number=result.lineNumber or None,
            outcome=result.status,
        )
    )
    if not result.success:
        raise HTTPException(
            status_code=APPLY_FAILURE_CODES.get(result.status, 400),
            detail=result.model_dump(),
        )
    return result


@router.get("/{suggestion_id:path}", response_model=Suggestion)
async def get_suggestion(
    suggestion_id: str,
    generator: SuggestionGenerator = Depends(get_suggestion_generator),
):
    suggestion = generator.get_suggestion(suggestion_id)
    if suggestion is None:
        raise HTTPException(status_code=404, detail="Suggestion not found")
    return suggestion
