"""LintResult: the schema-aligned artifact of one lint run."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from query_audit import __version__
from query_audit.model import Severity
from query_audit.model.finding import Finding


@dataclass(frozen=True, slots=True)
class FileError:
    """A file that could not be linted."""

    path: str
    kind: str      # parse_error | read_error | rule_error
    message: str
    line: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "kind": self.kind,
            "message": self.message,
            "line": self.line,
        }


@dataclass(slots=True)
class LintResult:
    """Assembled lint result matching ``lint_result.schema.json``.

    Constructed by ``core.runner`` after every file has been linted.
    """

    # ── run metadata ────────────────────────────────────────────────
    run_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
    )
    tool_version: str = __version__
    engine_version: str = "engine_v1"

    config: dict = field(default_factory=dict)

    # ── payload ─────────────────────────────────────────────────────
    files_scanned: int = 0
    findings: list[Finding] = field(default_factory=list)
    errors: list[FileError] = field(default_factory=list)

    @property
    def error_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for f in self.findings if f.severity == Severity.WARN)

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        """Produce the full LintResult JSON matching the schema."""
        severity_counts: dict[str, int] = {}
        rule_counts: dict[str, int] = {}
        for f in self.findings:
            severity_counts[f.severity.value] = (
                severity_counts.get(f.severity.value, 0) + 1
            )
            rule_counts[f.rule_id] = rule_counts.get(f.rule_id, 0) + 1

        return {
            "schema_version": "lint_result_v1",
            "run": {
                "run_id": self.run_id,
                "created_at": self.created_at,
                "tool_version": self.tool_version,
                "engine_version": self.engine_version,
                "config": self.config,
            },
            "summary": {
                "files_scanned": self.files_scanned,
                "files_with_errors": len({e.path for e in self.errors}),
                "counts": {
                    "findings_total": len(self.findings),
                    "by_severity": severity_counts,
                    "by_rule": rule_counts,
                },
            },
            "findings": [f.to_dict() for f in self.findings],
            "errors": [e.to_dict() for e in self.errors],
        }
