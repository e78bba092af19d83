"""Linter: runs every enabled rule over one parsed file in a single traversal."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from query_audit.core.config import LintConfig
from query_audit.core.context import Report, RuleContext
from query_audit.core.visitor import merge_listeners, traverse
from query_audit.js.parser import SourceFile
from query_audit.model import Severity
from query_audit.model.finding import Finding, Location, make_fingerprint
from query_audit.rules import get_rule
from query_audit.rules.base import Rule

logger = logging.getLogger(__name__)

_SNIPPET_LIMIT = 200


def _truncate(s: str, n: int = _SNIPPET_LIMIT) -> str:
    s = s.replace("\r\n", "\n")
    return s if len(s) <= n else s[: n - 1] + "…"


def _statement_snippet(source: SourceFile, node) -> str:
    """Source line(s) spanned by *node*, trimmed."""
    lines = source.text.splitlines()
    start, end = node.start_point[0], node.end_point[0]
    return _truncate("\n".join(lines[start:end + 1]).strip())


def _to_finding(report: Report, context: RuleContext) -> Finding:
    node = report.node
    source = context.source
    snippet = _statement_snippet(source, node)
    symbol = source.get_text(node)
    return Finding(
        finding_id="",  # filled by lint_source
        rule_id=report.rule_id,
        rule_type=context.meta.type,
        severity=context.severity,
        message_id=report.message_id,
        message=report.message,
        location=Location(
            path=source.path,
            line_start=node.start_point[0] + 1,
            line_end=node.end_point[0] + 1,
            column_start=node.start_point[1] + 1,
            column_end=node.end_point[1] + 1,
        ),
        fingerprint=make_fingerprint(report.rule_id, source.path, symbol, snippet),
        snippet=snippet,
        data=report.data,
        suggestions=report.suggestions,
    )


def _select_rules(
    config: LintConfig, rules: Optional[Iterable[str]]
) -> list[tuple[Rule, Severity]]:
    selected = list(rules) if rules is not None else config.enabled_rules()
    chosen: list[tuple[Rule, Severity]] = []
    for rule_id in selected:
        rule = get_rule(rule_id)
        severity = config.severity_for(rule_id)
        if severity == Severity.OFF and rules is not None:
            # explicitly requested rules run at their recommended level
            severity = rule.meta.recommended
        if severity == Severity.OFF:
            continue
        chosen.append((rule, severity))
    return chosen


def lint_source(
    source: SourceFile,
    *,
    config: Optional[LintConfig] = None,
    rules: Optional[Iterable[str]] = None,
) -> list[Finding]:
    """Lint one parsed file and return findings sorted by position.

    *rules* restricts the run to the given rule ids; by default every rule the
    config enables runs.  Each rule gets a fresh ``RuleContext``, so no state
    is shared between files.
    """
    cfg = config or LintConfig()
    contexts: list[RuleContext] = []
    listener_maps = []
    for rule, severity in _select_rules(cfg, rules):
        context = RuleContext(rule.meta, source, severity)
        contexts.append(context)
        listener_maps.append(rule.create(context))

    visited = traverse(source.root, merge_listeners(listener_maps))
    logger.debug("Linted %s: %d nodes, %d rule(s)", source.path, visited, len(contexts))

    findings = [
        _to_finding(report, context)
        for context in contexts
        for report in context.reports
    ]
    findings.sort(
        key=lambda f: (f.location.line_start, f.location.column_start, f.rule_id)
    )

    # Assign stable finding IDs
    for i, f in enumerate(findings):
        object.__setattr__(f, "finding_id", f"tl_{f.fingerprint[7:15]}_{i:04d}")

    return findings
