"""Canonical rule registry.

Single source of truth for every rule id query-audit can report.

Structure:
  PUBLIC_RULE_IDS       - stable, supported, enabled by default
  EXPERIMENTAL_RULE_IDS - unstable, may change or be removed
  DEPRECATED_RULE_IDS   - scheduled for removal, do not add new usage
  ALL_RULE_IDS          - union of all buckets (internal use only)
  RULES                 - rule id → rule class
"""

from __future__ import annotations

from query_audit.rules.await_async_query import AwaitAsyncQueryRule
from query_audit.rules.base import Rule, RuleMeta
from query_audit.rules.prefer_find_by import PreferFindByRule

# ── Testing Library queries (public) ────────────────────────────────
AWAIT_ASYNC_QUERY = AwaitAsyncQueryRule.meta.rule_id
PREFER_FIND_BY = PreferFindByRule.meta.rule_id

RULES: dict[str, type] = {
    AWAIT_ASYNC_QUERY: AwaitAsyncQueryRule,
    PREFER_FIND_BY: PreferFindByRule,
}

# ── Buckets ─────────────────────────────────────────────────────────

PUBLIC_RULE_IDS: list[str] = sorted([
    AWAIT_ASYNC_QUERY,
    PREFER_FIND_BY,
])

EXPERIMENTAL_RULE_IDS: list[str] = sorted([
    # Add experimental rules here as they're developed
])

DEPRECATED_RULE_IDS: list[str] = sorted([
    # Add deprecated rules here before removal
])

# Union of all buckets (internal use only)
ALL_RULE_IDS: list[str] = sorted(set(
    PUBLIC_RULE_IDS
    + EXPERIMENTAL_RULE_IDS
    + DEPRECATED_RULE_IDS
))


def get_rule(rule_id: str) -> Rule:
    """Instantiate a registered rule, or raise ``KeyError``."""
    try:
        return RULES[rule_id]()
    except KeyError:
        raise KeyError(f"unknown rule: {rule_id!r}") from None


def all_rule_metas() -> list[RuleMeta]:
    return [RULES[rule_id].meta for rule_id in ALL_RULE_IDS]


def _assert_rule_registry_invariants() -> None:
    """Fail fast on invariant violations.

    Called at import time so CI and local runs catch issues immediately.
    """
    import re

    # kebab-case ids like await-async-query
    rule_re = re.compile(r"^[a-z]+(-[a-z]+)*$")

    def _check_bucket(name: str, ids: list[str]) -> None:
        if ids != sorted(ids):
            raise AssertionError(f"{name} must be sorted")
        if len(ids) != len(set(ids)):
            raise AssertionError(f"{name} must contain unique IDs")
        bad = [x for x in ids if not rule_re.match(x)]
        if bad:
            raise AssertionError(f"{name} contains invalid rule IDs: {bad}")

    _check_bucket("PUBLIC_RULE_IDS", PUBLIC_RULE_IDS)
    _check_bucket("EXPERIMENTAL_RULE_IDS", EXPERIMENTAL_RULE_IDS)
    _check_bucket("DEPRECATED_RULE_IDS", DEPRECATED_RULE_IDS)
    _check_bucket("ALL_RULE_IDS", ALL_RULE_IDS)

    # Buckets must be disjoint.
    pub = set(PUBLIC_RULE_IDS)
    exp = set(EXPERIMENTAL_RULE_IDS)
    dep = set(DEPRECATED_RULE_IDS)
    overlap = (pub & exp) | (pub & dep) | (exp & dep)
    if overlap:
        raise AssertionError(
            f"Rule ID buckets must be disjoint; overlaps: {sorted(overlap)}"
        )

    # ALL must be exact union, and every id must have an implementation.
    union = pub | exp | dep
    if set(ALL_RULE_IDS) != union:
        raise AssertionError(
            "ALL_RULE_IDS must equal union(PUBLIC, EXPERIMENTAL, DEPRECATED)"
        )
    if set(RULES) != union:
        raise AssertionError(
            f"RULES and rule buckets disagree: {sorted(set(RULES) ^ union)}"
        )


_assert_rule_registry_invariants()
