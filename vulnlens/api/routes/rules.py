"""
Rule Routes — GET /rules, GET /rules/{rule_id}
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from vulnlens.api.dependencies import get_rule_store
from vulnlens.core.rule_store import RuleStore
from vulnlens.models.rule_models import Rule, RuleSet

router = APIRouter(prefix="/rules")


@router.get("", response_model=RuleSet)
async def list_rules(store: RuleStore = Depends(get_rule_store)):
    """The active rule set (quarantined rules excluded)."""
    return store.rule_set


@router.get("/{rule_id}", response_model=Rule)
async def get_rule(rule_id: str, store: RuleStore = Depends(get_rule_store)):
    rule = store.get_rule(rule_id)
    if rule is None:
        raise HTTPException(status_code=404, detail=f"Unknown rule: {rule_id}")
    return rule
