"""File discovery: find test files respecting exclusion patterns."""

from __future__ import annotations

from pathlib import Path

from query_audit.js.parser import SUPPORTED_SUFFIXES

# Default exclusion prefixes (relative to scan root).
_DEFAULT_EXCLUDES = frozenset(
    {
        ".git",
        ".github",
        ".venv",
        "venv",
        "node_modules",
        "dist",
        "build",
        "coverage",
        ".next",
        ".cache",
        ".turbo",
    }
)


def discover_test_files(
    root: Path,
    *,
    include: list[str] | None = None,
    exclude: list[str] | None = None,
    max_file_bytes: int | None = None,
) -> list[Path]:
    """Recursively find test files under *root*.

    Parameters
    ----------
    root:
        Directory to scan, or a single file (returned as-is when its suffix
        is supported).
    include:
        Glob patterns to include.  Default: ``["**/*.test.js"]``-style
        patterns from ``LintConfig``.
    exclude:
        Directory basenames to skip.  Merged with built-in defaults.
    max_file_bytes:
        Skip files larger than this.

    Returns
    -------
    Sorted list of absolute ``Path`` objects.
    """
    if root.is_file():
        return [root.resolve()] if root.suffix.lower() in SUPPORTED_SUFFIXES else []

    skip = _DEFAULT_EXCLUDES | set(exclude or [])
    patterns = include or ["**/*.test.js"]

    results: list[Path] = []
    for pat in patterns:
        for p in root.glob(pat):
            # Skip any path whose parents include an excluded directory.
            if any(part in skip for part in p.relative_to(root).parts):
                continue
            if not p.is_file() or p.suffix.lower() not in SUPPORTED_SUFFIXES:
                continue
            if max_file_bytes is not None:
                try:
                    if p.stat().st_size > max_file_bytes:
                        continue
                except OSError:
                    continue
            results.append(p.resolve())

    return sorted(set(results))
