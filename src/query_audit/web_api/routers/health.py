"""
Health Check Router
===================
Endpoints for health checks and readiness probes.
"""
from fastapi import APIRouter

from query_audit import __version__
from query_audit.rules import ALL_RULE_IDS

router = APIRouter()


@router.get("/health")
async def health_check():
    """
    Health check endpoint.
    Returns OK if the service is running.
    """
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def readiness_check():
    """Ready once the rule registry is loaded."""
    return {"status": "ready", "rules": len(ALL_RULE_IDS)}
