"""
Audit Routes — GET /audit, GET /audit/summary
"""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query

from vulnlens.api.dependencies import get_audit_logger
from vulnlens.audit.logger import AuditLogger

router = APIRouter(prefix="/audit")


@router.get("")
async def recent_entries(
    limit: int = Query(default=50, ge=1, le=1000),
    event: Literal["analysis", "apply_fix", "suggestions"] | None = None,
    audit: AuditLogger = Depends(get_audit_logger),
):
    """Most recent audit entries, oldest first."""
    return audit.recent(limit, event)


@router.get("/summary")
async def audit_summary(audit: AuditLogger = Depends(get_audit_logger)):
    return audit.summary()
