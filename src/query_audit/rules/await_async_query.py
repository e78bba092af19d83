"""await-async-query: async queries (``findBy*``) must be handled.

``findBy*`` / ``findAllBy*`` return promises.  A call is fine when it is
awaited, returned, chained with ``.then`` or asserted with
``expect(...).resolves`` / ``.rejects``.  When the promise is stored in a
variable the verdict depends on later uses, so suspect calls are collected
during traversal and decided at program exit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from query_audit.core.context import RuleContext
from query_audit.core.visitor import PROGRAM_EXIT
from query_audit.js.nodes import (
    NodeKind,
    callee_of,
    identifier_name,
    is_identifier,
    is_member_expression,
    is_variable_declarator,
    member_property,
    parent_of,
)
from query_audit.model import Category, RuleType, Severity
from query_audit.rules.base import RuleMeta
from query_audit.rules.matchers import (
    has_closest_expect_resolves_rejects,
    is_awaited,
    is_promise_resolved,
)
from query_audit.rules.queries import is_async_query

RULE_ID = "await-async-query"
MESSAGE_ID = "awaitAsyncQuery"


@dataclass(frozen=True)
class QueryCallSite:
    """An async query call: the name identifier, its callee and the call."""

    identifier: Any
    callee: Any
    call: Any

    @property
    def name(self) -> str:
        return identifier_name(self.identifier) or ""

    @property
    def declarator(self) -> Optional[Any]:
        """The ``variable_declarator`` the call initialises, if any."""
        parent = parent_of(self.call)
        return parent if is_variable_declarator(parent) else None

    def is_handled_in_place(self) -> bool:
        return is_awaited(parent_of(self.call)) or is_promise_resolved(self.callee)


def query_call_site(call: Any) -> Optional[QueryCallSite]:
    """Match ``findByX(...)`` and ``obj.findByX(...)``."""
    callee = callee_of(call)
    if is_identifier(callee):
        identifier = callee
    elif is_member_expression(callee):
        identifier = member_property(callee)
    else:
        return None
    if not is_async_query(identifier_name(identifier)):
        return None
    return QueryCallSite(identifier=identifier, callee=callee, call=call)


@dataclass
class SuspectAccumulator:
    """Per-file list of call sites whose context did not prove them handled."""

    sites: list[QueryCallSite] = field(default_factory=list)

    def add(self, site: QueryCallSite) -> None:
        self.sites.append(site)

    def drain(self) -> list[QueryCallSite]:
        """Hand over every collected site exactly once."""
        sites, self.sites = self.sites, []
        return sites


def _reference_is_handled(identifier: Any) -> bool:
    return is_awaited(parent_of(identifier)) or is_promise_resolved(identifier)


def _stored_promise_unhandled(site: QueryCallSite, context: RuleContext) -> bool:
    """A stored promise is unhandled when never used again, or when any
    later reference (checked in source order) neither awaits, returns nor
    chains it.
    """
    variables = context.get_declared_variables(site.declarator)
    references = variables[0].references if variables else []
    if not references:
        return True
    return any(not _reference_is_handled(ref.identifier) for ref in references)


class AwaitAsyncQueryRule:
    """Enforce async queries to have proper ``await``."""

    meta = RuleMeta(
        rule_id=RULE_ID,
        type=RuleType.PROBLEM,
        description="Enforce async queries to have proper `await`",
        category=Category.BEST_PRACTICES,
        recommended=Severity.WARN,
        messages={MESSAGE_ID: "`{{ name }}` must have `await` operator"},
    )
    version = "1.0.0"

    def create(self, context: RuleContext) -> dict[str, Callable[..., None]]:
        suspects = SuspectAccumulator()

        def on_call(node: Any) -> None:
            site = query_call_site(node)
            if site is None:
                return
            if site.is_handled_in_place() or has_closest_expect_resolves_rejects(site.call):
                return
            suspects.add(site)

        def on_program_exit() -> None:
            for site in suspects.drain():
                if site.declarator is not None and not _stored_promise_unhandled(site, context):
                    continue
                # anchored at the call site, never at the reference
                context.report(
                    node=site.identifier,
                    message_id=MESSAGE_ID,
                    data={"name": site.name},
                )

        return {
            NodeKind.CALL_EXPRESSION.value: on_call,
            PROGRAM_EXIT: on_program_exit,
        }
