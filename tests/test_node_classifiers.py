"""Tests for the node-shape classifiers in query_audit.js.nodes."""

from __future__ import annotations

from query_audit.js.nodes import (
    arrow_body,
    arrow_parameters,
    await_argument,
    call_arguments,
    callee_of,
    has_then_property,
    identifier_name,
    is_arrow_function_expression,
    is_await_expression,
    is_call_expression,
    is_identifier,
    is_member_expression,
    is_variable_declarator,
    member_object,
    member_property_name,
    parent_of,
    unwrap_parens,
)
from query_audit.js.parser import parse_source


def _nodes(source, type_):
    """All nodes of *type_* in pre-order."""
    found = []
    stack = [source.root]
    while stack:
        node = stack.pop()
        if node.type == type_:
            found.append(node)
        stack.extend(reversed(node.children))
    return found


def _first(code: str, type_: str, path: str = "a.test.js"):
    source = parse_source(code, path=path)
    nodes = _nodes(source, type_)
    assert nodes, f"no {type_} in {code!r}"
    return source, nodes[0]


class TestNoneInputs:
    """Every classifier answers False / None / [] for a missing node."""

    def test_predicates_reject_none(self):
        for predicate in (
            is_call_expression,
            is_member_expression,
            is_await_expression,
            is_arrow_function_expression,
            is_variable_declarator,
            is_identifier,
            has_then_property,
        ):
            assert predicate(None) is False

    def test_accessors_return_empty(self):
        assert identifier_name(None) is None
        assert parent_of(None) is None
        assert callee_of(None) is None
        assert call_arguments(None) == []
        assert member_object(None) is None
        assert member_property_name(None) is None
        assert arrow_parameters(None) == []
        assert arrow_body(None) is None
        assert await_argument(None) is None


class TestCallExpressions:
    """Callee and argument access."""

    def test_callee_identifier(self):
        _, call = _first("findByText('x')", "call_expression")
        assert is_call_expression(call)
        assert identifier_name(callee_of(call)) == "findByText"

    def test_callee_member(self):
        _, call = _first("screen.findByText('x')", "call_expression")
        callee = callee_of(call)
        assert is_member_expression(callee)
        assert identifier_name(member_object(callee)) == "screen"
        assert member_property_name(callee) == "findByText"

    def test_arguments_skip_comments(self):
        _, call = _first("foo(a /* note */, b)", "call_expression")
        args = call_arguments(call)
        assert [identifier_name(a) for a in args] == ["a", "b"]

    def test_tagged_template_has_no_arguments(self):
        _, call = _first("tag`hello`", "call_expression")
        assert call_arguments(call) == []

    def test_non_call_is_not_classified(self):
        _, ident = _first("foo", "identifier")
        assert not is_call_expression(ident)
        assert callee_of(ident) is None
        assert call_arguments(ident) == []


class TestParentOf:
    """parent_of skips argument lists and parentheses."""

    def test_argument_parent_is_call(self):
        source = parse_source("expect(findByText('x'))", path="a.test.js")
        calls = _nodes(source, "call_expression")
        outer, inner = calls[0], calls[1]
        assert identifier_name(callee_of(inner)) == "findByText"
        assert parent_of(inner) == outer

    def test_parenthesized_await(self):
        source = parse_source(
            "async function f() { await (findByText('x')) }", path="a.test.js"
        )
        call = _nodes(source, "call_expression")[0]
        assert is_await_expression(parent_of(call))

    def test_unwrap_parens(self):
        _, paren = _first("((x))", "parenthesized_expression")
        assert identifier_name(unwrap_parens(paren)) == "x"


class TestMemberAndThen:
    """Member expressions and .then detection."""

    def test_then_property(self):
        _, member = _first("p.then(cb)", "member_expression")
        assert has_then_property(member)

    def test_other_property(self):
        _, member = _first("p.catch(cb)", "member_expression")
        assert not has_then_property(member)

    def test_property_identifier_is_identifier(self):
        _, prop = _first("screen.getByRole", "property_identifier")
        assert is_identifier(prop)
        assert identifier_name(prop) == "getByRole"


class TestArrowFunctions:
    """Arrow parameters and bodies."""

    def test_no_parameters(self):
        _, arrow = _first("() => getByText('x')", "arrow_function")
        assert is_arrow_function_expression(arrow)
        assert arrow_parameters(arrow) == []
        assert is_call_expression(arrow_body(arrow))

    def test_single_bare_parameter(self):
        _, arrow = _first("x => x", "arrow_function")
        assert len(arrow_parameters(arrow)) == 1

    def test_parenthesized_parameters(self):
        _, arrow = _first("(a, b) => a", "arrow_function")
        assert len(arrow_parameters(arrow)) == 2

    def test_block_body(self):
        _, arrow = _first("() => { return 1 }", "arrow_function")
        assert arrow_body(arrow).type == "statement_block"


class TestAwaitAndDeclarators:
    """Await arguments and variable declarators."""

    def test_await_argument(self):
        _, await_node = _first("async () => { await (p) }", "await_expression")
        assert identifier_name(await_argument(await_node)) == "p"

    def test_variable_declarator(self):
        _, decl = _first("const p = findByText('x')", "variable_declarator")
        assert is_variable_declarator(decl)
        call = decl.child_by_field_name("value")
        assert parent_of(call) == decl

    def test_typescript_source(self):
        source, call = _first(
            "async function f() { const el: HTMLElement = await screen.findByText('x') }",
            "call_expression",
            path="a.test.ts",
        )
        assert source.language == "typescript"
        assert is_await_expression(parent_of(call))
