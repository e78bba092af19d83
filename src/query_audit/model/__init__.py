"""Enums shared across the rules, the linter and the output layer."""

from __future__ import annotations

from enum import Enum


class Severity(str, Enum):
    """Configured rule severity: ``off`` disables the rule entirely."""

    OFF = "off"
    WARN = "warn"
    ERROR = "error"


class RuleType(str, Enum):
    """What kind of issue a rule reports."""

    PROBLEM = "problem"
    SUGGESTION = "suggestion"


class Category(str, Enum):
    """Documentation category for a rule."""

    BEST_PRACTICES = "Best Practices"
    POSSIBLE_ERRORS = "Possible Errors"
