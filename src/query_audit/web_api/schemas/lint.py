"""
Lint Schemas
============
Request and response models for lint endpoints.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class LintRequest(BaseModel):
    """A source file to lint"""

    source: str = Field(..., description="File contents")
    filename: str = Field(default="test.js", description="Name used to pick the grammar")
    rules: Optional[List[str]] = Field(default=None, description="Rule ids to run")

    class Config:
        json_schema_extra = {
            "example": {
                "source": "test('x', () => { findByText('hi') })",
                "filename": "login.test.js",
            }
        }


class LintCounts(BaseModel):
    """Finding counts by severity"""

    total: int = Field(default=0)
    errors: int = Field(default=0)
    warnings: int = Field(default=0)


class LintResponse(BaseModel):
    """Findings for one source file"""

    filename: str
    counts: LintCounts
    findings: List[Dict[str, Any]] = Field(default_factory=list)


class SuggestResponse(BaseModel):
    """Source text after applying suggestions"""

    filename: str
    source: str
    applied: int = Field(default=0)
    changed: bool = Field(default=False)


class RuleInfo(BaseModel):
    """Rule metadata"""

    rule_id: str
    type: str
    description: str
    category: str
    recommended: str
    messages: Dict[str, str]
    fixable: Optional[str] = None
    has_suggestions: bool = False
    docs_url: str
