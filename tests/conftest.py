"""Shared fixtures: a small JS/TS project with known findings."""

from __future__ import annotations

from pathlib import Path

import pytest

LOGIN_TEST = (
    "test('logs in', async () => {\n"
    "  findByText('Welcome');\n"
    "  await waitFor(() => getByRole('button'));\n"
    "});\n"
)

CLEAN_SPEC = (
    "test('renders', async () => {\n"
    "  render(<App />);\n"
    "  await screen.findByText('ok');\n"
    "});\n"
)

HELPERS = "export const load = () => findByText('x');\n"


def write_project(root: Path) -> Path:
    files = {
        "src/login.test.js": LOGIN_TEST,
        "src/clean.spec.tsx": CLEAN_SPEC,
        "src/__tests__/helpers.ts": HELPERS,
        "src/util.js": "findByText('not a test file');\n",
        "src/broken.test.js": "const = ;\n",
        "node_modules/pkg/vendor.test.js": "findByText('vendored');\n",
    }
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Project with 4 lintable files: 2 findings, 1 syntax error."""
    return write_project(tmp_path.resolve() / "project")


@pytest.fixture
def clean_env(monkeypatch):
    """No CI / config environment leaking into the run."""
    for var in ("CI", "QUERY_AUDIT_DETERMINISTIC", "QUERY_AUDIT_CONFIG"):
        monkeypatch.delenv(var, raising=False)
