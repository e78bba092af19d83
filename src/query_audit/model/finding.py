"""Finding: the normalized linter output for a single reported violation."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field

from . import RuleType, Severity


@dataclass(frozen=True, slots=True)
class Location:
    """Source-code location for a finding (1-based lines and columns)."""

    path: str
    line_start: int
    line_end: int
    column_start: int = 1
    column_end: int = 1

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "line_start": self.line_start,
            "line_end": self.line_end,
            "column_start": self.column_start,
            "column_end": self.column_end,
        }


@dataclass(frozen=True, slots=True)
class TextEdit:
    """Replace the byte range ``[start, end)`` of a file with *text*."""

    start: int
    end: int
    text: str

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end, "text": self.text}


@dataclass(frozen=True, slots=True)
class Suggestion:
    """An opt-in rewrite attached to a finding. Never applied automatically."""

    message_id: str
    message: str
    edit: TextEdit

    def to_dict(self) -> dict:
        return {
            "message_id": self.message_id,
            "message": self.message,
            "edit": self.edit.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class Finding:
    """Immutable, schema-aligned linter finding.

    Corresponds to ``findings[]`` in ``lint_result.schema.json``.
    """

    finding_id: str
    rule_id: str
    rule_type: RuleType
    severity: Severity
    message_id: str
    message: str
    location: Location
    fingerprint: str
    snippet: str = ""
    data: dict = field(default_factory=dict)
    suggestions: tuple[Suggestion, ...] = ()

    # ── serialisation ───────────────────────────────────────────────

    def to_dict(self) -> dict:
        d: dict = {
            "finding_id": self.finding_id,
            "rule_id": self.rule_id,
            "rule_type": self.rule_type.value,
            "severity": self.severity.value,
            "message_id": self.message_id,
            "message": self.message,
            "location": self.location.to_dict(),
            "fingerprint": self.fingerprint,
        }
        if self.snippet:
            d["snippet"] = self.snippet
        if self.data:
            d["data"] = dict(self.data)
        if self.suggestions:
            d["suggestions"] = [s.to_dict() for s in self.suggestions]
        return d


def make_fingerprint(
    rule_id: str,
    rel_path: str,
    symbol: str,
    snippet: str,
) -> str:
    """Deterministic finding fingerprint: sha256(rule|path|symbol|snippet)."""
    rel_path = rel_path.replace("\\", "/")
    payload = "|".join([rule_id, rel_path, symbol, snippet.strip()])
    return "sha256:" + hashlib.sha256(payload.encode()).hexdigest()
