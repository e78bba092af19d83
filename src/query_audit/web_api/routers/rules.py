"""
Rules Router
============
Metadata for every registered rule.
"""
from typing import List

from fastapi import APIRouter

from query_audit.rules import all_rule_metas
from query_audit.web_api.schemas.lint import RuleInfo

router = APIRouter()


@router.get("/rules", response_model=List[RuleInfo])
async def list_rules():
    """List rule ids, recommended severities and message templates."""
    return [RuleInfo(**meta.to_dict()) for meta in all_rule_metas()]
