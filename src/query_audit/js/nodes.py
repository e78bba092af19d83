"""Node-shape classifiers: the leaf layer every rule composes from.

All predicates accept ``None`` and answer ``False`` for it, and for any node
shape they do not recognise.  Nothing here raises or mutates the tree.

tree-sitter keeps a few nodes that ESTree (and therefore the rule semantics)
does not have: ``parenthesized_expression`` and the ``arguments`` list of a
call.  ``parent_of`` steps over both, so ``parent_of(arg)`` is the call the
argument is passed to and ``parent_of(x)`` in ``(x).then`` is the member
expression.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

Node = Any  # tree_sitter.Node


class NodeKind(str, Enum):
    """tree-sitter type tags the rules care about."""

    PROGRAM = "program"
    CALL_EXPRESSION = "call_expression"
    MEMBER_EXPRESSION = "member_expression"
    AWAIT_EXPRESSION = "await_expression"
    ARROW_FUNCTION = "arrow_function"
    RETURN_STATEMENT = "return_statement"
    VARIABLE_DECLARATOR = "variable_declarator"
    LEXICAL_DECLARATION = "lexical_declaration"
    VARIABLE_DECLARATION = "variable_declaration"
    IDENTIFIER = "identifier"
    PROPERTY_IDENTIFIER = "property_identifier"
    SHORTHAND_PROPERTY_IDENTIFIER = "shorthand_property_identifier"
    PARENTHESIZED_EXPRESSION = "parenthesized_expression"
    ARGUMENTS = "arguments"
    FORMAL_PARAMETERS = "formal_parameters"
    STATEMENT_BLOCK = "statement_block"
    COMMENT = "comment"


# ESTree has a single Identifier node for all of these.
IDENTIFIER_KINDS = frozenset({
    NodeKind.IDENTIFIER.value,
    NodeKind.PROPERTY_IDENTIFIER.value,
    NodeKind.SHORTHAND_PROPERTY_IDENTIFIER.value,
})

_TRANSPARENT_PARENTS = frozenset({
    NodeKind.PARENTHESIZED_EXPRESSION.value,
    NodeKind.ARGUMENTS.value,
})


def _is(node: Optional[Node], kind: NodeKind) -> bool:
    return node is not None and node.type == kind.value


def is_call_expression(node: Optional[Node]) -> bool:
    return _is(node, NodeKind.CALL_EXPRESSION)


def is_member_expression(node: Optional[Node]) -> bool:
    return _is(node, NodeKind.MEMBER_EXPRESSION)


def is_await_expression(node: Optional[Node]) -> bool:
    return _is(node, NodeKind.AWAIT_EXPRESSION)


def is_arrow_function_expression(node: Optional[Node]) -> bool:
    return _is(node, NodeKind.ARROW_FUNCTION)


def is_variable_declarator(node: Optional[Node]) -> bool:
    return _is(node, NodeKind.VARIABLE_DECLARATOR)


def is_identifier(node: Optional[Node]) -> bool:
    return node is not None and node.type in IDENTIFIER_KINDS


def identifier_name(node: Optional[Node]) -> Optional[str]:
    """Name of an identifier-like node, else ``None``."""
    if not is_identifier(node):
        return None
    return node.text.decode("utf-8", errors="replace")


def parent_of(node: Optional[Node]) -> Optional[Node]:
    """ESTree-equivalent parent: skips parentheses and argument lists."""
    if node is None:
        return None
    parent = node.parent
    while parent is not None and parent.type in _TRANSPARENT_PARENTS:
        parent = parent.parent
    return parent


def unwrap_parens(node: Optional[Node]) -> Optional[Node]:
    """Strip any ``( … )`` wrappers around an expression."""
    while _is(node, NodeKind.PARENTHESIZED_EXPRESSION):
        inner = [c for c in node.named_children if c.type != NodeKind.COMMENT.value]
        node = inner[0] if inner else None
    return node


def callee_of(call: Optional[Node]) -> Optional[Node]:
    """The ``function`` of a call expression, parentheses removed."""
    if not is_call_expression(call):
        return None
    return unwrap_parens(call.child_by_field_name("function"))


def call_arguments(call: Optional[Node]) -> list[Node]:
    """Argument expressions of a call, in order (comments dropped).

    Tagged-template calls (``fn`...```) have no argument list and yield ``[]``.
    """
    if not is_call_expression(call):
        return []
    args = call.child_by_field_name("arguments")
    if args is None or args.type != NodeKind.ARGUMENTS.value:
        return []
    return [c for c in args.named_children if c.type != NodeKind.COMMENT.value]


def member_object(node: Optional[Node]) -> Optional[Node]:
    if not is_member_expression(node):
        return None
    return unwrap_parens(node.child_by_field_name("object"))


def member_property(node: Optional[Node]) -> Optional[Node]:
    if not is_member_expression(node):
        return None
    return node.child_by_field_name("property")


def member_property_name(node: Optional[Node]) -> Optional[str]:
    return identifier_name(member_property(node))


def has_then_property(node: Optional[Node]) -> bool:
    """``<something>.then``: explicit promise chaining."""
    return member_property_name(node) == "then"


def arrow_parameters(node: Optional[Node]) -> list[Node]:
    """Declared parameters of an arrow function (``x => …`` or ``(a, b) => …``)."""
    if not is_arrow_function_expression(node):
        return []
    single = node.child_by_field_name("parameter")
    if single is not None:
        return [single]
    params = node.child_by_field_name("parameters")
    if params is None:
        return []
    return [c for c in params.named_children if c.type != NodeKind.COMMENT.value]


def arrow_body(node: Optional[Node]) -> Optional[Node]:
    if not is_arrow_function_expression(node):
        return None
    return node.child_by_field_name("body")


def await_argument(node: Optional[Node]) -> Optional[Node]:
    """The awaited expression of an ``await`` expression."""
    if not is_await_expression(node):
        return None
    inner = [c for c in node.named_children if c.type != NodeKind.COMMENT.value]
    return unwrap_parens(inner[0]) if inner else None
