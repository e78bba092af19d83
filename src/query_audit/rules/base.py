"""Rule protocol and metadata shared by every rule."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Optional, Protocol

from query_audit.model import Category, RuleType, Severity

if TYPE_CHECKING:
    from query_audit.core.context import RuleContext

DOCS_URL = "https://github.com/testing-library/eslint-plugin-testing-library/tree/master/docs/rules/{name}.md"


@dataclass(frozen=True)
class RuleMeta:
    """Static description of a rule.

    ``fixable`` is always ``None``: no rule rewrites code on its own.  Rules
    with ``has_suggestions`` attach opt-in rewrites to their findings.
    """

    rule_id: str
    type: RuleType
    description: str
    category: Category
    recommended: Severity
    messages: dict[str, str]
    fixable: Optional[str] = None
    has_suggestions: bool = False
    schema: list[Any] = field(default_factory=list)

    @property
    def docs_url(self) -> str:
        return DOCS_URL.format(name=self.rule_id)

    def to_dict(self) -> dict:
        return {
            "rule_id": self.rule_id,
            "type": self.type.value,
            "description": self.description,
            "category": self.category.value,
            "recommended": self.recommended.value,
            "messages": dict(self.messages),
            "fixable": self.fixable,
            "has_suggestions": self.has_suggestions,
            "docs_url": self.docs_url,
        }


class Rule(Protocol):
    """Every rule exposes ``meta``, ``version`` and ``create()``."""

    meta: RuleMeta
    version: str

    def create(self, context: RuleContext) -> dict[str, Callable[..., None]]:
        """Return listeners keyed by node type (and ``PROGRAM_EXIT``)."""
        ...
