"""
API Routers
===========
Each router handles a specific domain of the API.
"""
from . import health, lint, rules

__all__ = ["health", "lint", "rules"]
