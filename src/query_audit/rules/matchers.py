"""Await / resolution context of a promise-producing expression.

A promise is handled when its expression is awaited, returned (explicitly or
as an arrow function's expression body), chained with ``.then``, or asserted
on with ``expect(...).resolves`` / ``expect(...).rejects``.
"""

from __future__ import annotations

from typing import Any, Optional

from query_audit.js.nodes import (
    NodeKind,
    callee_of,
    has_then_property,
    identifier_name,
    is_call_expression,
    is_member_expression,
    member_property_name,
    parent_of,
)

VALID_PARENTS = frozenset({
    NodeKind.AWAIT_EXPRESSION.value,
    NodeKind.ARROW_FUNCTION.value,
    NodeKind.RETURN_STATEMENT.value,
})

EXPECT_MATCHERS = frozenset({"resolves", "rejects"})


def is_awaited(node: Optional[Any]) -> bool:
    """*node* is an ``await``, an arrow function or a ``return``."""
    return node is not None and node.type in VALID_PARENTS


def is_promise_resolved(node: Optional[Any]) -> bool:
    """``node.then(...)``, or ``node(...).then(...)`` when *node* is a callee."""
    parent = parent_of(node)
    if is_call_expression(parent):
        return has_then_property(parent_of(parent))
    return has_then_property(parent)


def has_closest_expect_resolves_rejects(node: Optional[Any]) -> bool:
    """Walk up to the nearest ``expect(...)`` and check its matcher.

    Only the closest ``expect`` call is considered.  Stops with ``False`` at
    the first node without a parent.
    """
    current = node
    while current is not None:
        parent = parent_of(current)
        if parent is None:
            return False
        if (
            is_call_expression(current)
            and identifier_name(callee_of(current)) == "expect"
            and is_member_expression(parent)
        ):
            return member_property_name(parent) in EXPECT_MATCHERS
        current = parent
    return False
