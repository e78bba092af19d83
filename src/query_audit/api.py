"""
query_audit.api
===============

Programmatic entrypoints for using query_audit from other tools.

Usage::

    from query_audit.api import lint_project, lint_text, suggest_fixes

    result, result_dict = lint_project("src", ci_mode=True)
    findings = lint_text(source, filename="login.test.tsx")
    rewritten = suggest_fixes(source, filename="login.test.tsx")
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from query_audit.contracts.load import validate_instance as _validate_instance
from query_audit.core.config import LintConfig
from query_audit.core.discover import discover_test_files
from query_audit.core.fixer import apply_edits, first_suggestion_edits
from query_audit.core.linter import lint_source
from query_audit.core.runner import run_lint
from query_audit.js.parser import SourceFile, parse_source
from query_audit.model.finding import Finding
from query_audit.model.lint_result import LintResult

# Fixed timestamp for deterministic mode (matches CLI contract).
_DETERMINISTIC_TIMESTAMP = "2000-01-01T00:00:00+00:00"

ConfigLike = Union[LintConfig, dict, None]


def _to_path(p: str | Path) -> Path:
    return p if isinstance(p, Path) else Path(p)


def _resolve_config(config: ConfigLike, root: Path) -> LintConfig:
    if isinstance(config, LintConfig):
        return config
    if isinstance(config, dict):
        return LintConfig.from_dict(config)
    return LintConfig.discover(root if root.is_dir() else root.parent)


def _deterministic_run_id(root: Path, files: list[Path]) -> str:
    """Content-hash of the linted files' relative paths and sizes."""
    base = root if root.is_dir() else root.parent
    h = hashlib.sha256()
    for p in files:
        try:
            h.update(p.relative_to(base).as_posix().encode("utf-8"))
            h.update(str(p.stat().st_size).encode("utf-8"))
        except (OSError, ValueError):
            h.update(b"0")
    return "ci-" + h.hexdigest()[:12]


# ── lint_project ────────────────────────────────────────────────────


def lint_project(
    root: str | Path,
    *,
    config: ConfigLike = None,
    ci_mode: bool = False,
    rules: Optional[Iterable[str]] = None,
    out_dir: Optional[Path] = None,
) -> tuple[LintResult, dict[str, Any]]:
    """Lint every test file under *root*.

    Parameters
    ----------
    root:
        Directory (or single file) to lint.
    config:
        A ``LintConfig``, a plain dict in config-file shape, or ``None`` to
        discover ``.query-audit.yaml`` in *root*.
    ci_mode:
        If True, output is byte-deterministic (fixed timestamp and run id).
    rules:
        Restrict the run to these rule ids.

    Returns
    -------
    ``(LintResult, lint_result_dict)``

    Raises
    ------
    FileNotFoundError
        If *root* does not exist.
    """
    root_p = _to_path(root).resolve()
    if not root_p.exists():
        raise FileNotFoundError(f"lint_project: root does not exist: {root_p}")

    cfg = _resolve_config(config, root_p)
    kwargs: dict[str, Any] = {"config": cfg, "rules": rules, "out_dir": out_dir}
    if ci_mode:
        files = discover_test_files(
            root_p,
            include=cfg.include,
            exclude=cfg.exclude,
            max_file_bytes=cfg.max_file_bytes,
        )
        kwargs["_created_at"] = _DETERMINISTIC_TIMESTAMP
        kwargs["_run_id"] = _deterministic_run_id(root_p, files)

    result = run_lint(root_p, **kwargs)
    return result, result.to_dict()


# ── lint_text ───────────────────────────────────────────────────────


def _parse_clean(text: str, filename: str) -> SourceFile:
    source = parse_source(text, path=filename)
    if source.has_errors:
        line = next(
            (n.start_point[0] + 1 for n in source.error_nodes()), 0
        )
        raise ValueError(f"{filename}: syntax error near line {line}")
    return source


def lint_text(
    text: str,
    *,
    filename: str = "test.js",
    config: ConfigLike = None,
    rules: Optional[Iterable[str]] = None,
) -> list[Finding]:
    """Lint a single in-memory source.

    The grammar is picked from *filename*'s suffix.  Raises ``ValueError``
    for unsupported suffixes or when the text has syntax errors.
    """
    cfg = config if isinstance(config, LintConfig) else (
        LintConfig.from_dict(config) if isinstance(config, dict) else LintConfig()
    )
    return lint_source(_parse_clean(text, filename), config=cfg, rules=rules)


def suggest_fixes(
    text: str,
    *,
    filename: str = "test.js",
    rules: Optional[Iterable[str]] = None,
) -> tuple[str, int]:
    """Apply the first suggestion of every finding to *text*.

    Returns ``(new_text, applied)``.
    """
    findings = lint_text(text, filename=filename, rules=rules)
    new_text, applied, _ = apply_edits(text, first_suggestion_edits(findings))
    return new_text, applied


# ── validate_instance ───────────────────────────────────────────────


def validate_instance(instance: Any, schema_name: str) -> None:
    """Validate *instance* against a bundled schema (raises on failure)."""
    _validate_instance(instance, schema_name)
