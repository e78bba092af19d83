"""Lexical scope resolution over a tree-sitter tree.

Answers one question: given a ``variable_declarator``, which later
identifiers in the same scope refer to the variable(s) it declares?

``let`` / ``const`` bind to the nearest block, ``var`` to the nearest
function (or the program).  Nested scopes that redeclare the name shadow it
and are not searched.  This is lexical matching only: no aliasing, no
dataflow, no cross-file resolution.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from query_audit.js.nodes import NodeKind, identifier_name, is_variable_declarator

Node = Any  # tree_sitter.Node

FUNCTION_SCOPES = frozenset({
    "program",
    "function_declaration",
    "function_expression",
    "function",
    "generator_function",
    "generator_function_declaration",
    "arrow_function",
    "method_definition",
})

BLOCK_SCOPES = FUNCTION_SCOPES | frozenset({
    "statement_block",
    "for_statement",
    "for_in_statement",
    "catch_clause",
    "switch_body",
    "class_body",
})

_DECLARATIONS = frozenset({
    NodeKind.LEXICAL_DECLARATION.value,
    NodeKind.VARIABLE_DECLARATION.value,
})

_NAMED_DECLARATIONS = frozenset({
    "function_declaration",
    "generator_function_declaration",
    "class_declaration",
})

# Identifier-typed nodes that are uses of a binding.
_REFERENCE_KINDS = frozenset({
    NodeKind.IDENTIFIER.value,
    NodeKind.SHORTHAND_PROPERTY_IDENTIFIER.value,
})

# Element names in JSX are tags, not variable uses.
_JSX_ELEMENTS = frozenset({
    "jsx_opening_element",
    "jsx_closing_element",
    "jsx_self_closing_element",
})

_JSX_NAME_PARTS = frozenset({
    "member_expression",
    "nested_identifier",
    "jsx_namespace_name",
})

_WRITE_PARENTS = frozenset({
    "assignment_expression",
    "augmented_assignment_expression",
    "update_expression",
})


@dataclass(frozen=True)
class Reference:
    """One lexical use of a variable."""

    identifier: Node
    is_write: bool = False


@dataclass
class Variable:
    """A binding introduced by a declarator."""

    name: str
    scope: Node
    identifiers: list[Node] = field(default_factory=list)
    references: list[Reference] = field(default_factory=list)


def _named(node: Node) -> list[Node]:
    return [c for c in node.named_children if c.type != NodeKind.COMMENT.value]


def binding_identifiers(pattern: Optional[Node]) -> list[Node]:
    """Identifiers bound by a declaration target or parameter pattern.

    Handles plain names and object / array destructuring; default values and
    type annotations are not bindings and are skipped.
    """
    if pattern is None:
        return []
    kind = pattern.type
    if kind in ("identifier", "shorthand_property_identifier_pattern"):
        return [pattern]
    if kind in ("assignment_pattern", "object_assignment_pattern"):
        return binding_identifiers(pattern.child_by_field_name("left"))
    if kind == "pair_pattern":
        return binding_identifiers(pattern.child_by_field_name("value"))
    if kind in ("required_parameter", "optional_parameter"):
        return binding_identifiers(pattern.child_by_field_name("pattern"))
    if kind in ("object_pattern", "array_pattern", "rest_pattern", "formal_parameters"):
        found: list[Node] = []
        for child in _named(pattern):
            found.extend(binding_identifiers(child))
        return found
    return []


def _declarator_names(declaration: Node) -> set[str]:
    names: set[str] = set()
    for child in _named(declaration):
        if child.type == NodeKind.VARIABLE_DECLARATOR.value:
            for ident in binding_identifiers(child.child_by_field_name("name")):
                names.add(ident.text.decode("utf-8", errors="replace"))
    return names


def _block_declared_names(block: Node) -> set[str]:
    """Names declared by the direct statements of a block-like node."""
    names: set[str] = set()
    for child in _named(block):
        if child.type in _DECLARATIONS:
            names |= _declarator_names(child)
        elif child.type in _NAMED_DECLARATIONS:
            name = identifier_name(child.child_by_field_name("name"))
            if name:
                names.add(name)
    return names


def declared_names(scope: Node) -> set[str]:
    """Every name a scope node declares for its own body."""
    kind = scope.type
    names: set[str] = set()

    if kind in FUNCTION_SCOPES and kind != "program":
        params = scope.child_by_field_name("parameters")
        single = scope.child_by_field_name("parameter")
        for ident in binding_identifiers(params) + binding_identifiers(single):
            names.add(ident.text.decode("utf-8", errors="replace"))
        # a named function expression sees its own name
        if kind in ("function_expression", "function", "generator_function"):
            own = identifier_name(scope.child_by_field_name("name"))
            if own:
                names.add(own)
        body = scope.child_by_field_name("body")
        if body is not None and body.type == NodeKind.STATEMENT_BLOCK.value:
            names |= _block_declared_names(body)
        return names

    if kind == "for_statement":
        init = scope.child_by_field_name("initializer")
        if init is not None and init.type in _DECLARATIONS:
            names |= _declarator_names(init)
        return names

    if kind == "for_in_statement":
        if scope.child_by_field_name("kind") is not None:
            for ident in binding_identifiers(scope.child_by_field_name("left")):
                names.add(ident.text.decode("utf-8", errors="replace"))
        return names

    if kind == "catch_clause":
        for ident in binding_identifiers(scope.child_by_field_name("parameter")):
            names.add(ident.text.decode("utf-8", errors="replace"))
        return names

    return names | _block_declared_names(scope)


def _enclosing(node: Node, kinds: frozenset[str]) -> Optional[Node]:
    current = node.parent
    while current is not None:
        if current.type in kinds:
            return current
        current = current.parent
    return None


def declaring_scope(declarator: Node) -> Optional[Node]:
    """Scope node owning the bindings of *declarator*."""
    declaration = declarator.parent
    if declaration is None:
        return None
    if declaration.type == NodeKind.VARIABLE_DECLARATION.value:
        return _enclosing(declaration, FUNCTION_SCOPES)
    # ``for (const x of …)`` / ``for (let i = 0; …)`` bind to the loop
    return _enclosing(declaration, BLOCK_SCOPES)


def _key(node: Node) -> tuple[int, int, str]:
    return (node.start_byte, node.end_byte, node.type)


def _iter_references(scope: Node, name: str, declarator: Node) -> Iterator[Node]:
    """Pre-order walk of *scope* yielding unshadowed uses of *name*.

    Scopes enclosing the declarator never shadow it, even when they list it
    (a ``var`` inside a nested block).
    """
    enclosing = set()
    current = declarator.parent
    while current is not None:
        enclosing.add(_key(current))
        current = current.parent

    stack = list(reversed(scope.children))
    while stack:
        node = stack.pop()
        if (
            node.type in BLOCK_SCOPES
            and _key(node) not in enclosing
            and name in declared_names(node)
        ):
            continue
        if node.type in _REFERENCE_KINDS and node.text.decode("utf-8", errors="replace") == name:
            if not _is_jsx_tag_name(node):
                yield node
            continue
        stack.extend(reversed(node.children))


def _is_jsx_tag_name(identifier: Node) -> bool:
    parent = identifier.parent
    while parent is not None and parent.type in _JSX_NAME_PARTS:
        parent = parent.parent
    return parent is not None and parent.type in _JSX_ELEMENTS


def _is_write(identifier: Node) -> bool:
    parent = identifier.parent
    if parent is None or parent.type not in _WRITE_PARENTS:
        return False
    target = parent.child_by_field_name("left") or parent.child_by_field_name("argument")
    return target is not None and target == identifier


def declared_variables(declarator: Optional[Node]) -> list[Variable]:
    """Variables declared by *declarator* with their later references.

    References exclude the declaring identifier itself and anything located
    before it, and are returned in source order.
    """
    if not is_variable_declarator(declarator):
        return []
    scope = declaring_scope(declarator)
    if scope is None:
        return []

    variables: list[Variable] = []
    for ident in binding_identifiers(declarator.child_by_field_name("name")):
        name = ident.text.decode("utf-8", errors="replace")
        refs = [
            Reference(identifier=node, is_write=_is_write(node))
            for node in _iter_references(scope, name, declarator)
            if node.start_byte >= ident.end_byte
        ]
        variables.append(
            Variable(name=name, scope=scope, identifiers=[ident], references=refs)
        )
    return variables
