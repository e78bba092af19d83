"""Registry invariants: every rule id is bucketed, sorted and implemented."""

from __future__ import annotations

import pytest

from query_audit.rules import (
    ALL_RULE_IDS,
    DEPRECATED_RULE_IDS,
    EXPERIMENTAL_RULE_IDS,
    PUBLIC_RULE_IDS,
    RULES,
    _assert_rule_registry_invariants,
    all_rule_metas,
    get_rule,
)


def test_public_rules():
    assert PUBLIC_RULE_IDS == ["await-async-query", "prefer-find-by"]


def test_buckets_union_is_all():
    assert set(ALL_RULE_IDS) == set(PUBLIC_RULE_IDS) | set(EXPERIMENTAL_RULE_IDS) | set(
        DEPRECATED_RULE_IDS
    )


def test_every_id_has_an_implementation():
    assert set(RULES) == set(ALL_RULE_IDS)
    for rule_id in ALL_RULE_IDS:
        rule = get_rule(rule_id)
        assert rule.meta.rule_id == rule_id
        assert rule.version


def test_get_rule_unknown():
    with pytest.raises(KeyError, match="unknown rule"):
        get_rule("no-such-rule")


def test_metas_in_id_order():
    assert [m.rule_id for m in all_rule_metas()] == ALL_RULE_IDS


def test_meta_to_dict():
    d = get_rule("prefer-find-by").meta.to_dict()
    assert d["docs_url"].endswith("/prefer-find-by.md")
    assert d["has_suggestions"] is True
    assert d["category"] == "Best Practices"


def test_invariants_hold():
    _assert_rule_registry_invariants()
