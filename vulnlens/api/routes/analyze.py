"""
Analyze Routes — POST /analyze, POST /analyze/file, POST /report

Run every detector over submitted source, or a file under the workspace
root, and return the ordered issue list or a plain-text report of it.
"""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from vulnlens.api.dependencies import get_audit_logger, get_scanner
from vulnlens.audit.logger import AuditLogger
from vulnlens.config import settings
from vulnlens.core.report import render_report
from vulnlens.core.scanner import VulnerabilityScanner
from vulnlens.models.issue_models import AnalysisResult
from vulnlens.models.scan_models import AnalyzeFileRequest, AnalyzeRequest, AuditEntry
from vulnlens.utils.workspace import OutsideWorkspaceError, resolve_in_workspace

logger = logging.getLogger("vulnlens.api.analyze")

router = APIRouter()


def _run(
    scanner: VulnerabilityScanner,
    audit: AuditLogger,
    code: str,
    file_name: str,
) -> AnalysisResult:
    start = time.monotonic()
    try:
        result = scanner.analyze(code, file_name)
    except Exception:
        logger.exception("Unexpected analysis error")
        result = AnalysisResult(fileName=file_name)

    audit.log(
        AuditEntry(
            event="analysis",
            file_name=file_name,
            issues_found=len(result.issues),
            outcome="complete",
            semantic_state=scanner.semantic_detector.state.value,
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )
    )
    return result


def _check_size(code: str) -> None:
    if len(code.encode("utf-8")) > settings.max_file_size_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Source exceeds maximum size of {settings.max_file_size_bytes} bytes",
        )


@router.post("/analyze", response_model=AnalysisResult)
async def analyze_code(
    req: AnalyzeRequest,
    scanner: VulnerabilityScanner = Depends(get_scanner),
    audit: AuditLogger = Depends(get_audit_logger),
):
    """Analyze submitted source text."""
    _check_size(req.code)
    return _run(scanner, audit, req.code, req.file_name)


@router.post("/analyze/file", response_model=AnalysisResult)
async def analyze_file(
    req: AnalyzeFileRequest,
    scanner: VulnerabilityScanner = Depends(get_scanner),
    audit: AuditLogger = Depends(get_audit_logger),
):
    """Analyze a file under the workspace root."""
    try:
        path = resolve_in_workspace(req.path)
    except OutsideWorkspaceError as e:
        logger.warning(f"Rejected file outside workspace: {req.path}")
        raise HTTPException(status_code=403, detail=str(e))

    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            code = f.read()
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail=f"File not found: {req.path}")
    except OSError as e:
        raise HTTPException(status_code=400, detail=f"Could not read file: {e}")

    _check_size(code)
    return _run(scanner, audit, code, req.path)


@router.post("/report", response_class=PlainTextResponse)
async def analysis_report(
    req: AnalyzeRequest,
    scanner: VulnerabilityScanner = Depends(get_scanner),
    audit: AuditLogger = Depends(get_audit_logger),
):
    """Plain-text report for submitted source."""
    _check_size(req.code)
    result = _run(scanner, audit, req.code, req.file_name)
    return render_report([result])
