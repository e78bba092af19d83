"""Testing Library query names.

Every query is ``<variant><accessor>``: ``getByText``, ``findAllByRole`` …
"""

from __future__ import annotations

import re

ALL_QUERIES_METHODS: tuple[str, ...] = (
    "LabelText",
    "PlaceholderText",
    "Text",
    "AltText",
    "Title",
    "DisplayValue",
    "Role",
    "TestId",
)

SYNC_QUERIES_VARIANTS: tuple[str, ...] = ("getBy", "getAllBy", "queryBy", "queryAllBy")
ASYNC_QUERIES_VARIANTS: tuple[str, ...] = ("findBy", "findAllBy")

SYNC_QUERIES_COMBINATIONS: frozenset[str] = frozenset(
    f"{variant}{method}"
    for variant in SYNC_QUERIES_VARIANTS
    for method in ALL_QUERIES_METHODS
)

ASYNC_QUERIES_COMBINATIONS: frozenset[str] = frozenset(
    f"{variant}{method}"
    for variant in ASYNC_QUERIES_VARIANTS
    for method in ALL_QUERIES_METHODS
)

ASYNC_QUERIES_REGEXP = re.compile(
    r"^find(All)?By(" + "|".join(ALL_QUERIES_METHODS) + r")$"
)

# Helpers that retry a callback until it stops throwing.
WAIT_METHODS: tuple[str, ...] = ("waitFor", "waitForElement", "wait")


def is_async_query(name: str | None) -> bool:
    return bool(name) and ASYNC_QUERIES_REGEXP.match(name) is not None


def is_sync_query(name: str | None) -> bool:
    return name in SYNC_QUERIES_COMBINATIONS


def find_by_variant(sync_method: str) -> str:
    """``findAllBy`` for ``*AllBy*`` queries, else ``findBy``."""
    return "findAllBy" if "All" in sync_method else "findBy"


def query_accessor(method: str) -> str:
    """The accessor part of a query name: ``getAllByRole`` → ``Role``."""
    return method.split("By", 1)[1]
