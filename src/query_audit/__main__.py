"""CLI entry-point for query_audit.

Usage:
    python -m query_audit <path>
    python -m query_audit <path> --json [--ci]
    python -m query_audit <path> --config .query-audit.yaml --max-warnings 0
    python -m query_audit <path> --apply-suggestions [--dry-run]
    python -m query_audit rules [--json]
    python -m query_audit validate <instance.json> <schema_name>
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from collections import defaultdict
from pathlib import Path

import jsonschema

from query_audit import __version__
from query_audit.api import lint_project as _api_lint_project
from query_audit.api import validate_instance as _api_validate_instance
from query_audit.core.config import LintConfig
from query_audit.core.fixer import apply_suggestions
from query_audit.model.finding import Finding
from query_audit.model.lint_result import LintResult
from query_audit.rules import all_rule_metas
from query_audit.utils.exit_codes import ExitCode
from query_audit.utils.json_norm import stable_json_dump

_KNOWN_COMMANDS = {"rules", "validate"}


# ── CI helpers ──────────────────────────────────────────────────────


def _env_requires_ci_mode() -> bool:
    """Return True when the environment signals deterministic mode is required."""
    if os.getenv("QUERY_AUDIT_DETERMINISTIC") == "1":
        return True
    ci = os.getenv("CI", "")
    return ci.lower() in ("1", "true", "yes", "on")


def _require_ci_flag(ci_mode: bool, *, what: str) -> int | None:
    """If CI env is active but --ci was not passed, emit an error and return ExitCode.ERROR."""
    if _env_requires_ci_mode() and not ci_mode:
        print(
            f"error: CI environment requires deterministic mode for {what}. "
            f"Re-run with --ci/--deterministic.",
            file=sys.stderr,
        )
        return ExitCode.ERROR
    return None


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


# ── output ──────────────────────────────────────────────────────────


def _print_human(result_dict: dict) -> None:
    """ESLint-style listing of findings, then a summary, on stderr."""
    by_file: dict[str, list[dict]] = defaultdict(list)
    for f in result_dict.get("findings", []):
        by_file[f["location"]["path"]].append(f)

    for path in sorted(by_file):
        print(f"\n{path}", file=sys.stderr)
        for f in by_file[path]:
            loc = f["location"]
            pos = f"{loc['line_start']}:{loc['column_start']}"
            print(
                f"  {pos:>8}  {f['severity']:<5}  {f['message']}  {f['rule_id']}",
                file=sys.stderr,
            )

    for err in result_dict.get("errors", []):
        where = f"{err['path']}:{err['line']}" if err["line"] else err["path"]
        print(f"\n{where}\n  skipped ({err['kind']}): {err['message']}", file=sys.stderr)

    summary = result_dict.get("summary", {})
    counts = summary.get("counts", {})
    by_sev = counts.get("by_severity", {})
    print(
        f"\n  {counts.get('findings_total', 0)} problem(s) "
        f"({by_sev.get('error', 0)} error(s), {by_sev.get('warn', 0)} warning(s)) "
        f"in {summary.get('files_scanned', 0)} file(s)\n",
        file=sys.stderr,
    )


def _apply(result: LintResult, root: Path, *, dry_run: bool) -> int:
    """Write suggestion edits back to disk; returns the number of fixes applied."""
    base = root if root.is_dir() else root.parent
    by_path: dict[str, list[Finding]] = defaultdict(list)
    for f in result.findings:
        if f.suggestions:
            by_path[f.location.path].append(f)

    total = 0
    for rel, findings in sorted(by_path.items()):
        fix = apply_suggestions(base / rel, findings, dry_run=dry_run)
        for err in fix.errors:
            print(f"error: {rel}: {err}", file=sys.stderr)
        verb = "would apply" if dry_run else "applied"
        print(f"  {rel}: {verb} {fix.fixes_applied} suggestion(s)", file=sys.stderr)
        total += fix.fixes_applied
    return total


def _exit_code(result: LintResult, max_warnings: int | None) -> int:
    if result.error_count:
        return ExitCode.VIOLATION
    if max_warnings is not None and max_warnings >= 0 and result.warning_count > max_warnings:
        print(
            f"error: {result.warning_count} warning(s) exceed --max-warnings {max_warnings}",
            file=sys.stderr,
        )
        return ExitCode.VIOLATION
    return ExitCode.SUCCESS


# ── parsers ─────────────────────────────────────────────────────────


def _add_lint_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        default=False,
        help="Print the full LintResult JSON to stdout.",
    )
    p.add_argument(
        "--ci",
        "--deterministic",
        dest="ci_mode",
        action="store_true",
        default=False,
        help="Enable deterministic output (stable run id and timestamp).",
    )
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML config file (default: .query-audit.yaml in the lint root).",
    )
    p.add_argument(
        "--max-warnings",
        dest="max_warnings",
        type=int,
        default=None,
        help="Exit with 1 when more than N warnings are reported.",
    )
    p.add_argument(
        "--apply-suggestions",
        dest="apply_suggestions",
        action="store_true",
        default=False,
        help="Rewrite files using the first suggestion of each finding.",
    )
    p.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=False,
        help="With --apply-suggestions, report what would change without writing.",
    )
    p.add_argument("-v", "--verbose", action="store_true", default=False)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="query-audit",
        description="Static checks for Testing Library async queries.",
    )
    sub = p.add_subparsers(dest="command")

    # ── default (positional path) mode ──────────────────────────────
    p.add_argument(
        "path",
        nargs="?",
        type=Path,
        default=None,
        help="Root directory (or single test file) to lint.",
    )
    p.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    _add_lint_options(p)

    # ── rules subcommand ────────────────────────────────────────────
    rules_p = sub.add_parser("rules", help="List the available rules.")
    rules_p.add_argument(
        "--json",
        dest="json_out",
        action="store_true",
        default=False,
        help="Print rule metadata as JSON.",
    )

    # ── validate subcommand ─────────────────────────────────────────
    val_p = sub.add_parser(
        "validate",
        help="Validate a JSON instance against a bundled schema.",
    )
    val_p.add_argument("instance", type=Path, help="Path to the JSON file to validate.")
    val_p.add_argument("schema_name", help="Schema filename, e.g. lint_result.schema.json")
    return p


def _build_default_parser() -> argparse.ArgumentParser:
    """Parser for ``query-audit <path> [options]``.

    Argparse subparsers greedily consume the first positional token, which
    would treat ``<path>`` as a command.  This parser is used when the first
    positional token is *not* a known subcommand.
    """
    p = argparse.ArgumentParser(
        prog="query-audit",
        description="Static checks for Testing Library async queries.",
    )
    p.add_argument(
        "path",
        type=Path,
        help="Root directory (or single test file) to lint.",
    )
    _add_lint_options(p)
    p.set_defaults(command=None)
    return p


# ── subcommands ─────────────────────────────────────────────────────


def _handle_rules(args: argparse.Namespace) -> int:
    metas = all_rule_metas()
    if args.json_out:
        stable_json_dump([m.to_dict() for m in metas], sys.stdout)
        return ExitCode.SUCCESS
    for m in metas:
        print(f"{m.rule_id:20s} {m.recommended.value:5s} {m.type.value:10s} {m.description}")
    return ExitCode.SUCCESS


def _handle_validate(args: argparse.Namespace) -> int:
    # Exit code contract:
    #   1 = schema violation
    #   2 = unreadable instance / schema not found
    try:
        instance = json.loads(Path(args.instance).read_text(encoding="utf-8"))
        _api_validate_instance(instance, args.schema_name)
    except jsonschema.ValidationError as e:
        print(f"FAIL: {e.message}", file=sys.stderr)
        return ExitCode.VIOLATION
    except (OSError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return ExitCode.ERROR
    print("OK")
    return ExitCode.SUCCESS


def _handle_lint(args: argparse.Namespace) -> int:
    if args.path is None:
        print("error: please provide a path or use a subcommand.", file=sys.stderr)
        return ExitCode.ERROR

    rc = _require_ci_flag(args.ci_mode, what="lint")
    if rc is not None:
        return rc

    target: Path = args.path.resolve()
    if not target.exists():
        print(f"error: path does not exist: {target}", file=sys.stderr)
        return ExitCode.ERROR

    try:
        config = LintConfig.from_yaml(args.config) if args.config else None
        result, result_dict = _api_lint_project(
            target, config=config, ci_mode=args.ci_mode
        )
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return ExitCode.ERROR

    _print_human(result_dict)

    if args.json_out:
        stable_json_dump(result_dict, sys.stdout)

    if args.apply_suggestions:
        _apply(result, target, dry_run=args.dry_run)

    return _exit_code(result, args.max_warnings)


def main(argv: list[str] | None = None) -> int:
    """Entry-point; returns an exit code (0 = clean, 1 = violations, 2 = error)."""
    effective_argv = list(argv) if argv is not None else sys.argv[1:]

    # If the first positional token is not a known command, parse using the
    # default-mode parser so `query-audit <path> --ci --json` works.
    first_positional = next(
        (a for a in effective_argv if not a.startswith("-")), None
    )
    if first_positional and first_positional not in _KNOWN_COMMANDS:
        args = _build_default_parser().parse_args(effective_argv)
    else:
        args = _build_parser().parse_args(effective_argv)

    _configure_logging(getattr(args, "verbose", False))

    if args.command == "rules":
        return _handle_rules(args)
    if args.command == "validate":
        return _handle_validate(args)
    return _handle_lint(args)


if __name__ == "__main__":
    raise SystemExit(main())
