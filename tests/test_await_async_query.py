"""Tests for the await-async-query rule."""

from __future__ import annotations

import pytest

from query_audit.api import lint_text
from query_audit.rules.await_async_query import RULE_ID, AwaitAsyncQueryRule
from query_audit.rules.queries import ALL_QUERIES_METHODS


def _lint(code: str, filename: str = "a.test.js"):
    return lint_text(code, filename=filename, rules=[RULE_ID])


def _in_test(body: str) -> str:
    return "test('renders', async () => {\n" + body + "\n});\n"


class TestRuleMeta:
    """Static metadata."""

    def test_meta(self):
        meta = AwaitAsyncQueryRule.meta
        assert meta.rule_id == "await-async-query"
        assert meta.type.value == "problem"
        assert meta.recommended.value == "warn"
        assert meta.fixable is None
        assert meta.has_suggestions is False
        assert meta.messages["awaitAsyncQuery"] == "`{{ name }}` must have `await` operator"


class TestHandledInPlace:
    """Calls that are awaited, returned, chained or asserted on."""

    @pytest.mark.parametrize("method", ALL_QUERIES_METHODS)
    def test_awaited_find_by(self, method):
        assert _lint(_in_test(f"  await findBy{method}('x');")) == []

    @pytest.mark.parametrize("method", ALL_QUERIES_METHODS)
    def test_awaited_find_all_by(self, method):
        assert _lint(_in_test(f"  await findAllBy{method}('x');")) == []

    def test_awaited_member_call(self):
        assert _lint(_in_test("  await screen.findByText('x');")) == []

    def test_parenthesized_await(self):
        assert _lint(_in_test("  await (findByText('x'));")) == []

    def test_returned(self):
        assert _lint("function f() {\n  return findByText('x');\n}") == []

    def test_arrow_expression_body(self):
        assert _lint("const f = () => findByText('x');") == []

    def test_arrow_inside_wait_for(self):
        assert _lint(_in_test("  await waitFor(() => findByRole('button'));")) == []

    def test_then_chain(self):
        assert _lint("findByText('x').then((el) => el.click());") == []

    def test_member_then_chain(self):
        assert _lint("screen.findByText('x').then(() => {});") == []

    @pytest.mark.parametrize("matcher", ["resolves", "rejects"])
    def test_expect_resolves_rejects(self, matcher):
        code = f"expect(findByText('x')).{matcher}.toBeTruthy();"
        assert _lint(code) == []

    def test_expect_resolves_member_call(self):
        code = "expect(screen.findByRole('alert')).resolves.toBeInTheDocument();"
        assert _lint(code) == []

    @pytest.mark.parametrize("matcher", ["resolves", "rejects"])
    def test_expect_several_calls_above(self, matcher):
        code = f"expect(wrap(other(findByText('x')))).{matcher}.toBe(1);"
        assert _lint(code) == []


class TestUnhandled:
    """Calls whose promise is dropped."""

    def test_bare_call(self):
        findings = _lint("findByText('x');")
        assert len(findings) == 1
        f = findings[0]
        assert f.rule_id == RULE_ID
        assert f.message_id == "awaitAsyncQuery"
        assert f.message == "`findByText` must have `await` operator"
        assert f.data == {"name": "findByText"}
        assert (f.location.line_start, f.location.column_start) == (1, 1)

    def test_member_call_reports_property(self):
        findings = _lint("screen.findAllByRole('row');")
        assert len(findings) == 1
        assert findings[0].message == "`findAllByRole` must have `await` operator"
        assert findings[0].location.column_start == len("screen.") + 1

    def test_inside_test_callback(self):
        findings = _lint(_in_test("  findByText('x');"))
        assert len(findings) == 1
        assert findings[0].location.line_start == 2

    def test_expect_without_resolves(self):
        findings = _lint("expect(findByText('x')).toBeInTheDocument();")
        assert len(findings) == 1

    def test_closest_expect_decides(self):
        code = "expect(expect(findByText('x')).toBe(1)).resolves.toBe(2);"
        assert len(_lint(code)) == 1

    def test_every_unhandled_call_reported_in_order(self):
        code = _in_test("  findByText('a');\n  await findByText('b');\n  findByRole('c');")
        findings = _lint(code)
        assert [f.data["name"] for f in findings] == ["findByText", "findByRole"]
        assert [f.location.line_start for f in findings] == [2, 4]

    def test_typescript_file(self):
        code = _in_test("  const el: Promise<HTMLElement> = findByText('x');")
        assert len(_lint(code, filename="a.test.ts")) == 1

    def test_tsx_file(self):
        code = _in_test("  render(<App />);\n  screen.findByText('x');")
        assert len(_lint(code, filename="a.test.tsx")) == 1


class TestStoredPromises:
    """Promises stored in a variable are judged by their later uses."""

    def test_stored_and_never_used(self):
        findings = _lint(_in_test("  const p = findByText('x');"))
        assert len(findings) == 1
        assert findings[0].location.line_start == 2

    def test_stored_then_awaited(self):
        assert _lint(_in_test("  const p = findByText('x');\n  await p;")) == []

    def test_stored_then_returned(self):
        code = "function f() {\n  const p = findByText('x');\n  return p;\n}"
        assert _lint(code) == []

    def test_stored_then_chained(self):
        assert _lint("const p = findByText('x');\np.then(() => {});") == []

    def test_stored_then_passed_elsewhere(self):
        findings = _lint(_in_test("  const p = findByText('x');\n  console.log(p);"))
        assert len(findings) == 1

    def test_one_unhandled_use_is_enough(self):
        code = _in_test("  const el = findByText('x');\n  await el;\n  doSomething(el);")
        findings = _lint(code)
        assert len(findings) == 1
        # anchored at the call, not at the offending reference
        assert findings[0].location.line_start == 2

    def test_single_report_per_declaration(self):
        code = _in_test("  const p = findByText('x');\n  use(p);\n  use(p);\n  use(p);")
        assert len(_lint(code)) == 1

    def test_stored_member_call(self):
        code = _in_test("  const p = screen.findByText('x');\n  await p;")
        assert _lint(code) == []

    def test_shadowed_use_does_not_count(self):
        code = _in_test(
            "  const p = findByText('x');\n"
            "  const g = (p) => use(p);\n"
            "  await p;"
        )
        assert _lint(code) == []

    def test_jsx_tag_with_same_name_is_not_a_use(self):
        code = _in_test(
            "  const label = screen.findByText('x');\n"
            "  render(<label>hi</label>);\n"
            "  await label;"
        )
        assert _lint(code, filename="a.test.jsx") == []

    def test_jsx_expression_use_is_checked(self):
        code = _in_test(
            "  const label = screen.findByText('x');\n"
            "  render(<p>{label}</p>);"
        )
        findings = _lint(code, filename="a.test.tsx")
        assert [f.location.line_start for f in findings] == [2]


class TestNotAsyncQueries:
    """Anything that is not findBy* / findAllBy* is ignored."""

    @pytest.mark.parametrize(
        "code",
        [
            "getByText('x');",
            "queryAllByRole('x');",
            "findByFoo('x');",
            "screen.findByTextual('x');",
            "const f = findByText;",
            "findByText;",
            "obj['findByText']('x');",
        ],
    )
    def test_ignored(self, code):
        assert _lint(code) == []
