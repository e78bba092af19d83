"""Runner: discovers test files, lints each one, builds the LintResult."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional

from query_audit.contracts.load import validate_instance
from query_audit.core.config import LintConfig
from query_audit.core.discover import discover_test_files
from query_audit.core.linter import lint_source
from query_audit.js.parser import SourceFile, load_source
from query_audit.model.finding import Finding
from query_audit.model.lint_result import FileError, LintResult
from query_audit.utils.json_norm import stable_json_dumps

_logger = logging.getLogger(__name__)


def _relative(path: Path, root: Path) -> str:
    base = root if root.is_dir() else root.parent
    try:
        return path.relative_to(base).as_posix()
    except ValueError:
        return path.as_posix()


def _first_error_line(source: SourceFile) -> int:
    for node in source.error_nodes():
        return node.start_point[0] + 1
    return 0


def run_lint(
    root: Path,
    *,
    config: Optional[LintConfig] = None,
    rules: Optional[Iterable[str]] = None,
    out_dir: Optional[Path] = None,
    # Testing hooks for deterministic output
    _run_id: Optional[str] = None,
    _created_at: Optional[str] = None,
) -> LintResult:
    """Lint every test file under *root* and assemble a ``LintResult``.

    Files that cannot be read or that do not parse cleanly are recorded in
    ``LintResult.errors`` and skipped; a rule that crashes on one file is
    logged and skipped for that file only.
    """
    root = root.resolve()
    cfg = config or LintConfig()
    rule_ids = list(rules) if rules is not None else None
    files = discover_test_files(
        root,
        include=cfg.include,
        exclude=cfg.exclude,
        max_file_bytes=cfg.max_file_bytes,
    )
    _logger.info("Linting %d file(s) under %s", len(files), root)

    findings: list[Finding] = []
    errors: list[FileError] = []

    for path in files:
        rel = _relative(path, root)
        try:
            source = load_source(path, display_path=rel)
        except (OSError, UnicodeDecodeError, ValueError) as e:
            _logger.warning("Cannot read %s: %s", rel, e)
            errors.append(FileError(path=rel, kind="read_error", message=str(e)))
            continue

        if source.has_errors:
            line = _first_error_line(source)
            _logger.warning("Syntax error in %s near line %d, skipped", rel, line)
            errors.append(
                FileError(path=rel, kind="parse_error", message="syntax error", line=line)
            )
            continue

        try:
            findings.extend(lint_source(source, config=cfg, rules=rule_ids))
        except Exception as e:
            _logger.exception("Linting %s raised an exception, skipped", rel)
            errors.append(FileError(path=rel, kind="rule_error", message=str(e)))

    result = LintResult(
        config={"root": str(root), **cfg.to_dict()},
        files_scanned=len(files),
        findings=findings,
        errors=errors,
    )
    if _run_id is not None:
        result.run_id = _run_id
    if _created_at is not None:
        result.created_at = _created_at

    # ── validate output against schema ──────────────────────────────
    result_dict = result.to_dict()
    validate_instance(result_dict, "lint_result.schema.json")

    if out_dir is not None:
        out_dir.mkdir(parents=True, exist_ok=True)
        (out_dir / "lint_result.json").write_text(
            stable_json_dumps(result_dict),
            encoding="utf-8",
        )
        _logger.info("Wrote %s", out_dir / "lint_result.json")

    return result
