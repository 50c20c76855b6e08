"""
Health Check Route — GET /health
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from vulnlens.api.dependencies import get_semantic_detector
from vulnlens.core.semantic_detector import SemanticLoggingDetector

router = APIRouter()


@router.get("/health")
async def health(detector: SemanticLoggingDetector = Depends(get_semantic_detector)):
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": "1.0.0",
        "embedding_backend": detector.state.value,
        "semantic_mode": "embedding" if detector.is_ready else "keyword",
    }
