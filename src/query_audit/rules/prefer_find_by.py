"""prefer-find-by: ``await waitFor(() => getByX(...))`` is ``await findByX(...)``.

Only the single-expression form is recognised: one argument, a parameterless
arrow function whose body is a sync query call, bare or on an object.
Block-bodied callbacks and extra options are left alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from query_audit.core.context import RuleContext, SuggestionSpec
from query_audit.core.fixer import Fixer
from query_audit.js.nodes import (
    NodeKind,
    arrow_body,
    arrow_parameters,
    call_arguments,
    callee_of,
    identifier_name,
    is_arrow_function_expression,
    is_await_expression,
    is_call_expression,
    is_identifier,
    is_member_expression,
    member_object,
    member_property_name,
    parent_of,
    unwrap_parens,
)
from query_audit.model import Category, RuleType, Severity
from query_audit.model.finding import TextEdit
from query_audit.rules.base import RuleMeta
from query_audit.rules.queries import (
    WAIT_METHODS,
    find_by_variant,
    is_sync_query,
    query_accessor,
)

RULE_ID = "prefer-find-by"
MESSAGE_ID = "preferFindBy"


@dataclass(frozen=True)
class WaitedSyncQuery:
    """The sync query found inside a wait callback."""

    method: str
    caller: Optional[str]  # object name for ``screen.getByText``
    arguments: tuple[Any, ...]

    @property
    def query_variant(self) -> str:
        return find_by_variant(self.method)

    @property
    def query_method(self) -> str:
        return query_accessor(self.method)


def waited_sync_query(wait_call: Any) -> Optional[WaitedSyncQuery]:
    """Match ``waitFor(() => getByX(...))`` / ``waitFor(() => obj.getByX(...))``."""
    if identifier_name(callee_of(wait_call)) not in WAIT_METHODS:
        return None

    args = call_arguments(wait_call)
    if len(args) != 1:
        return None
    callback = unwrap_parens(args[0])
    if not is_arrow_function_expression(callback) or arrow_parameters(callback):
        return None

    inner = unwrap_parens(arrow_body(callback))
    if not is_call_expression(inner):
        return None

    callee = callee_of(inner)
    if is_member_expression(callee):
        obj = member_object(callee)
        method = member_property_name(callee)
        if not is_identifier(obj) or not is_sync_query(method):
            return None
        caller = identifier_name(obj)
    elif is_identifier(callee):
        method = identifier_name(callee)
        if not is_sync_query(method):
            return None
        caller = None
    else:
        return None

    return WaitedSyncQuery(
        method=method,
        caller=caller,
        arguments=tuple(call_arguments(inner)),
    )


def build_replacement(query: WaitedSyncQuery, get_text: Callable[[Any], str]) -> str:
    """Source of the equivalent ``findBy*`` call, arguments copied verbatim."""
    args = ", ".join(get_text(arg) for arg in query.arguments)
    name = f"{query.query_variant}{query.query_method}"
    if query.caller is not None:
        return f"{query.caller}.{name}({args})"
    return f"{name}({args})"


class PreferFindByRule:
    """Suggest using ``find*`` instead of ``waitFor`` to wait for elements."""

    meta = RuleMeta(
        rule_id=RULE_ID,
        type=RuleType.SUGGESTION,
        description="Suggest using find* instead of waitFor to wait for elements",
        category=Category.BEST_PRACTICES,
        recommended=Severity.WARN,
        messages={
            MESSAGE_ID: "Prefer {{queryVariant}}{{queryMethod}} method over using await {{fullQuery}}",
        },
        has_suggestions=True,
    )
    version = "1.0.0"

    def create(self, context: RuleContext) -> dict[str, Callable[..., None]]:

        def on_call(node: Any) -> None:
            if not is_await_expression(parent_of(node)):
                return
            query = waited_sync_query(node)
            if query is None:
                return

            replacement = build_replacement(query, context.get_text)

            def fix(fixer: Fixer) -> TextEdit:
                return fixer.replace_text(node, replacement)

            context.report(
                node=node,
                message_id=MESSAGE_ID,
                data={
                    "queryVariant": query.query_variant,
                    "queryMethod": query.query_method,
                    "fullQuery": context.get_text(node),
                },
                suggest=[SuggestionSpec(message_id=MESSAGE_ID, fix=fix)],
            )

        return {NodeKind.CALL_EXPRESSION.value: on_call}
