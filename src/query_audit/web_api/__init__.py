"""
query-audit Web API
===================
FastAPI-based REST API for linting test sources.

Quick Start:
    uvicorn query_audit.web_api.main:app --reload
"""
from .main import app

__all__ = ["app"]
