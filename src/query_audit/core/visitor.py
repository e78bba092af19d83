"""Depth-first tree traversal with per-node-type listeners.

Rules register listeners keyed by tree-sitter type tags (``"call_expression"``)
plus ``PROGRAM_EXIT``, which fires once after the whole tree was visited.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Iterable, Mapping

PROGRAM_EXIT = "program:exit"

Listener = Callable[..., None]


def merge_listeners(
    listener_maps: Iterable[Mapping[str, Listener]],
) -> dict[str, list[Listener]]:
    """Combine the listener maps of several rules, keeping rule order."""
    merged: dict[str, list[Listener]] = defaultdict(list)
    for listeners in listener_maps:
        for key, fn in listeners.items():
            merged[key].append(fn)
    return dict(merged)


def traverse(root: Any, listeners: Mapping[str, list[Listener]]) -> int:
    """Visit *root* pre-order (parents first, children in source order).

    Uses an explicit stack so deeply nested expressions cannot exhaust the
    call stack.  Returns the number of nodes visited.
    """
    visited = 0
    stack = [root]
    while stack:
        node = stack.pop()
        visited += 1
        for fn in listeners.get(node.type, ()):
            fn(node)
        stack.extend(reversed(node.children))

    for fn in listeners.get(PROGRAM_EXIT, ()):
        fn()
    return visited
