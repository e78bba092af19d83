"""
Pydantic Schemas
================
Request and response models for the API.
"""
from .lint import LintCounts, LintRequest, LintResponse, RuleInfo, SuggestResponse

__all__ = ["LintCounts", "LintRequest", "LintResponse", "RuleInfo", "SuggestResponse"]
