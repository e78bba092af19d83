"""RuleContext: what a rule sees of the file it is linting.

One context is created per rule per file.  Reports accumulate on the context
and are turned into ``Finding`` objects by ``core.linter`` after traversal.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional

from query_audit.core.fixer import Fixer
from query_audit.js.parser import SourceFile
from query_audit.js.scope import Variable, declared_variables
from query_audit.model import Severity
from query_audit.model.finding import Suggestion, TextEdit

if TYPE_CHECKING:
    from query_audit.rules.base import RuleMeta

_PLACEHOLDER_RE = re.compile(r"\{\{\s*(\w+)\s*\}\}")

FixFunction = Callable[[Fixer], TextEdit]


def format_message(template: str, data: Optional[dict[str, Any]]) -> str:
    """Interpolate ``{{ key }}`` placeholders; unknown keys are left as-is."""
    values = data or {}

    def _sub(match: re.Match) -> str:
        key = match.group(1)
        return str(values[key]) if key in values else match.group(0)

    return _PLACEHOLDER_RE.sub(_sub, template)


@dataclass(frozen=True)
class SuggestionSpec:
    """A suggestion as a rule declares it: message id plus rewrite function."""

    message_id: str
    fix: FixFunction
    data: Optional[dict[str, Any]] = None


@dataclass(frozen=True)
class Report:
    """A violation reported by a rule, before conversion to a Finding."""

    rule_id: str
    node: Any
    message_id: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)
    suggestions: tuple[Suggestion, ...] = ()


class RuleContext:
    """Services offered to a rule while it lints one file."""

    def __init__(self, meta: RuleMeta, source: SourceFile, severity: Severity) -> None:
        self.meta = meta
        self.source = source
        self.severity = severity
        self.reports: list[Report] = []
        self._fixer = Fixer(source)

    @property
    def rule_id(self) -> str:
        return self.meta.rule_id

    def get_text(self, node: Any) -> str:
        return self.source.get_text(node)

    def get_declared_variables(self, node: Any) -> list[Variable]:
        return declared_variables(node)

    def _message(self, message_id: str, data: Optional[dict[str, Any]]) -> str:
        try:
            template = self.meta.messages[message_id]
        except KeyError:
            raise KeyError(
                f"rule {self.rule_id!r} has no message {message_id!r}"
            ) from None
        return format_message(template, data)

    def report(
        self,
        *,
        node: Any,
        message_id: str,
        data: Optional[dict[str, Any]] = None,
        suggest: Optional[list[SuggestionSpec]] = None,
    ) -> None:
        """Record one violation anchored at *node*."""
        suggestions = tuple(
            Suggestion(
                message_id=spec.message_id,
                message=self._message(spec.message_id, spec.data or data),
                edit=spec.fix(self._fixer),
            )
            for spec in (suggest or [])
        )
        self.reports.append(
            Report(
                rule_id=self.rule_id,
                node=node,
                message_id=message_id,
                message=self._message(message_id, data),
                data=dict(data or {}),
                suggestions=suggestions,
            )
        )
