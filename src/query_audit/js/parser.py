"""Tree-sitter parsing for JavaScript / TypeScript test files.

The tree exposes everything the rules need: a ``type`` tag per node,
``parent`` back-references and byte ranges into the original source.
``SourceFile`` pairs a tree with its text so that rules can extract the exact
source of any node.

Usage::

    source = parse_source("await screen.findByText('x')", path="a.test.js")
    source.get_text(source.root)
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator

import tree_sitter

logger = logging.getLogger(__name__)

# suffix → language name
LANGUAGE_BY_SUFFIX: dict[str, str] = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}

# language name → (grammar module, language function)
_GRAMMARS: dict[str, tuple[str, str]] = {
    "javascript": ("tree_sitter_javascript", "language"),
    "typescript": ("tree_sitter_typescript", "language_typescript"),
    "tsx": ("tree_sitter_typescript", "language_tsx"),
}

SUPPORTED_SUFFIXES: tuple[str, ...] = tuple(sorted(LANGUAGE_BY_SUFFIX))


def detect_language(path: Path | str) -> str:
    """Map a file path to a grammar name, or raise ``ValueError``."""
    suffix = Path(path).suffix.lower()
    try:
        return LANGUAGE_BY_SUFFIX[suffix]
    except KeyError:
        raise ValueError(f"Unsupported file extension: {suffix or '<none>'}") from None


@dataclass
class _ParserCache:
    """Lazily loaded tree-sitter languages and parsers, one per grammar."""

    _languages: dict[str, Any] = field(default_factory=dict, repr=False)
    _parsers: dict[str, Any] = field(default_factory=dict, repr=False)

    def language(self, name: str) -> Any:
        if name in self._languages:
            return self._languages[name]
        try:
            module_name, func_name = _GRAMMARS[name]
        except KeyError:
            raise ValueError(f"Language not available: {name}") from None
        try:
            lang_fn = getattr(importlib.import_module(module_name), func_name)
        except (ImportError, AttributeError) as err:
            raise ValueError(f"Language not available: {name}") from err
        lang = tree_sitter.Language(lang_fn())
        self._languages[name] = lang
        return lang

    def parser(self, name: str) -> Any:
        if name not in self._parsers:
            self._parsers[name] = tree_sitter.Parser(self.language(name))
            logger.debug("Loaded tree-sitter grammar %s", name)
        return self._parsers[name]


_CACHE = _ParserCache()


@dataclass
class SourceFile:
    """A parsed file: its text, its UTF-8 bytes and the tree-sitter tree.

    Node ranges are byte offsets into ``data``.
    """

    path: str
    text: str
    data: bytes
    language: str
    tree: Any = field(repr=False)

    @property
    def root(self) -> Any:
        return self.tree.root_node

    @property
    def has_errors(self) -> bool:
        """True when tree-sitter had to recover from a syntax error."""
        return bool(self.root.has_error)

    def get_text(self, node: Any) -> str:
        """Exact original source of *node*."""
        return self.data[node.start_byte:node.end_byte].decode("utf-8", errors="replace")

    def error_nodes(self) -> Iterator[Any]:
        """Yield ``ERROR`` and missing nodes in source order."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                yield node
                continue
            if node.has_error:
                stack.extend(reversed(node.children))


def parse_source(
    text: str,
    *,
    path: Path | str = "<text>.js",
    language: str | None = None,
) -> SourceFile:
    """Parse *text*; the grammar is picked from *language* or *path*'s suffix."""
    lang = language or detect_language(path)
    data = text.encode("utf-8")
    tree = _CACHE.parser(lang).parse(data)
    return SourceFile(
        path=Path(path).as_posix() if isinstance(path, Path) else path,
        text=text,
        data=data,
        language=lang,
        tree=tree,
    )


def load_source(path: Path, *, display_path: str | None = None) -> SourceFile:
    """Read and parse a file from disk.

    The bytes are decoded strictly and line endings are kept, so node byte
    ranges index the file exactly as stored.  *display_path* replaces
    *path* in findings.
    """
    text = path.read_bytes().decode("utf-8")
    return parse_source(
        text,
        path=display_path if display_path is not None else path,
        language=detect_language(path),
    )
