"""
Lint Router
===========
Lint a single source text submitted in the request body.
"""
from fastapi import APIRouter, HTTPException

from query_audit import api as core_api
from query_audit.model import Severity
from query_audit.web_api.config import settings
from query_audit.web_api.schemas.lint import (
    LintCounts,
    LintRequest,
    LintResponse,
    SuggestResponse,
)

router = APIRouter()


def _check_size(request: LintRequest) -> None:
    size = len(request.source.encode("utf-8"))
    if size > settings.MAX_SOURCE_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"source is {size} bytes, limit is {settings.MAX_SOURCE_BYTES}",
        )


@router.post("", response_model=LintResponse)
async def lint_source(request: LintRequest):
    """
    Lint one source file.

    - **source**: file contents
    - **filename**: picks the grammar by suffix (default: test.js)
    - **rules**: optional subset of rule ids to run
    """
    _check_size(request)
    try:
        findings = core_api.lint_text(
            request.source, filename=request.filename, rules=request.rules
        )
    except (KeyError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e.args[0] if e.args else e))

    return LintResponse(
        filename=request.filename,
        counts=LintCounts(
            total=len(findings),
            errors=sum(1 for f in findings if f.severity == Severity.ERROR),
            warnings=sum(1 for f in findings if f.severity == Severity.WARN),
        ),
        findings=[f.to_dict() for f in findings],
    )


@router.post("/suggest", response_model=SuggestResponse)
async def suggest(request: LintRequest):
    """Return the source with the first suggestion of every finding applied."""
    _check_size(request)
    try:
        new_source, applied = core_api.suggest_fixes(
            request.source, filename=request.filename, rules=request.rules
        )
    except (KeyError, ValueError) as e:
        raise HTTPException(status_code=422, detail=str(e.args[0] if e.args else e))

    return SuggestResponse(
        filename=request.filename,
        source=new_source,
        applied=applied,
        changed=new_source != request.source,
    )
