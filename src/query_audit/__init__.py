"""query_audit: static checks for Testing Library async queries in JS/TS tests."""

__all__ = [
    "__version__",
    "lint_project",
    "lint_text",
    "suggest_fixes",
    "validate_instance",
]
__version__ = "0.1.0"

# Programmatic entrypoints, see ``query_audit.api``.
from query_audit.api import (  # noqa: E402, F401
    lint_project,
    lint_text,
    suggest_fixes,
    validate_instance,
)
