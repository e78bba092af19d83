"""
Suggestion Fixer
================
Builds and applies the text edits attached to findings as suggestions.

Suggestions are opt-in: the linter only records them.  They are written to
disk only when a caller asks for it (``query-audit --apply-suggestions``).

Usage:
    from query_audit.core.fixer import apply_suggestions

    result = apply_suggestions(path, findings, dry_run=True)
    print(result.fixes_applied, result.fixes_skipped)
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from query_audit.model.finding import Finding, TextEdit

if TYPE_CHECKING:
    from query_audit.js.parser import SourceFile


class Fixer:
    """Text-edit factory bound to one source file."""

    def __init__(self, source: SourceFile) -> None:
        self.source = source

    def replace_text(self, node: Any, text: str) -> TextEdit:
        """Replace the full span of *node* with *text*."""
        return TextEdit(start=node.start_byte, end=node.end_byte, text=text)

    def replace_range(self, start: int, end: int, text: str) -> TextEdit:
        if not 0 <= start <= end <= len(self.source.data):
            raise ValueError(f"edit range out of bounds: [{start}, {end})")
        return TextEdit(start=start, end=end, text=text)


@dataclass
class FixResult:
    """Result of applying suggestions to a file."""

    file_path: Path
    fixes_applied: int
    fixes_skipped: int
    backup_path: Optional[Path] = None
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return len(self.errors) == 0


def apply_edits(text: str, edits: Iterable[TextEdit]) -> tuple[str, int, int]:
    """Apply byte-range *edits* to *text*.

    Edits are applied bottom-up; an edit overlapping one already applied is
    skipped.  Returns ``(new_text, applied, skipped)``.
    """
    data = text.encode("utf-8")
    applied = skipped = 0
    lower_bound = len(data) + 1

    for edit in sorted(edits, key=lambda e: (e.start, e.end), reverse=True):
        if edit.end > lower_bound or edit.end > len(data):
            skipped += 1
            continue
        data = data[:edit.start] + edit.text.encode("utf-8") + data[edit.end:]
        lower_bound = edit.start
        applied += 1

    return data.decode("utf-8"), applied, skipped


def first_suggestion_edits(findings: Iterable[Finding]) -> list[TextEdit]:
    """The first suggestion's edit of every finding that offers one."""
    return [f.suggestions[0].edit for f in findings if f.suggestions]


def apply_suggestions(
    file_path: Path,
    findings: List[Finding],
    create_backup: bool = True,
    dry_run: bool = False,
) -> FixResult:
    """
    Apply the first suggestion of each finding to a file.

    Args:
        file_path: Path to the file to rewrite
        findings: Findings produced for this file (others are ignored by the
            caller; edits are byte ranges into this file's content)
        create_backup: Whether to create a .bak backup
        dry_run: If True, don't actually modify the file

    Returns:
        FixResult with details about what was applied
    """
    result = FixResult(file_path=file_path, fixes_applied=0, fixes_skipped=0)

    if not file_path.exists():
        result.errors.append(f"File not found: {file_path}")
        return result

    try:
        content = file_path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        result.errors.append(f"Error reading file: {e}")
        return result

    new_content, applied, skipped = apply_edits(content, first_suggestion_edits(findings))
    result.fixes_applied = applied
    result.fixes_skipped = skipped

    if dry_run or applied == 0:
        return result

    if create_backup:
        backup_path = file_path.with_suffix(file_path.suffix + ".bak")
        try:
            shutil.copy2(file_path, backup_path)
            result.backup_path = backup_path
        except OSError as e:
            result.errors.append(f"Error creating backup: {e}")
            return result

    try:
        file_path.write_bytes(new_content.encode("utf-8"))
    except OSError as e:
        result.errors.append(f"Error writing file: {e}")

    return result
