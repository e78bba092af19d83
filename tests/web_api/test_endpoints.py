"""
Web API Endpoint Tests
======================
Integration tests for the lint API.

Usage:
    pip install query-audit[api]
    pytest tests/web_api/test_endpoints.py -v
"""
import pytest

# Skip entire module if FastAPI not installed
pytest.importorskip("fastapi")

from fastapi.testclient import TestClient
from query_audit.web_api.config import Settings, settings
from query_audit.web_api.main import app

UNAWAITED = "test('x', async () => {\n  findByText('a');\n});\n"
WAITED = "test('x', async () => {\n  await waitFor(() => screen.getByText('a'));\n});\n"


@pytest.fixture
def client():
    """Create test client for FastAPI app."""
    return TestClient(app)


# ============================================================================
# HEALTH ENDPOINT
# ============================================================================

class TestHealthEndpoint:
    """Tests for GET /health and /ready"""

    def test_health_returns_ok(self, client):
        """Health endpoint returns status: ok with a version."""
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["version"] == "0.1.0"

    def test_ready(self, client):
        """Ready once rules are registered."""
        response = client.get("/ready")
        assert response.json() == {"status": "ready", "rules": 2}

    def test_root(self, client):
        """Root endpoint returns API info."""
        assert client.get("/").json()["name"] == "query-audit API"


# ============================================================================
# RULES ENDPOINT
# ============================================================================

class TestRulesEndpoint:
    """Tests for GET /rules"""

    def test_lists_rules(self, client):
        """Both rules with their metadata."""
        response = client.get("/rules")
        assert response.status_code == 200
        rules = {r["rule_id"]: r for r in response.json()}
        assert set(rules) == {"await-async-query", "prefer-find-by"}
        assert rules["prefer-find-by"]["has_suggestions"] is True
        assert rules["await-async-query"]["recommended"] == "warn"


# ============================================================================
# LINT ENDPOINTS
# ============================================================================

class TestLintEndpoint:
    """Tests for POST /lint"""

    def test_finding(self, client):
        """An unawaited findBy call is reported."""
        response = client.post("/lint", json={"source": UNAWAITED, "filename": "a.test.js"})
        assert response.status_code == 200
        data = response.json()
        assert data["counts"] == {"total": 1, "errors": 0, "warnings": 1}
        assert data["findings"][0]["message"] == "`findByText` must have `await` operator"

    def test_clean_source(self, client):
        """No findings for awaited queries."""
        source = "test('x', async () => { await findByText('a') });"
        data = client.post("/lint", json={"source": source}).json()
        assert data["counts"]["total"] == 0
        assert data["filename"] == "test.js"

    def test_rule_subset(self, client):
        """Only the requested rules run."""
        data = client.post(
            "/lint", json={"source": WAITED, "rules": ["await-async-query"]}
        ).json()
        assert data["findings"] == []

    def test_unknown_rule(self, client):
        """Unknown rule ids are a 422."""
        response = client.post("/lint", json={"source": WAITED, "rules": ["nope"]})
        assert response.status_code == 422
        assert "unknown rule" in response.json()["detail"]

    def test_unsupported_filename(self, client):
        """Unsupported suffixes are a 422."""
        response = client.post("/lint", json={"source": "x", "filename": "a.py"})
        assert response.status_code == 422

    def test_syntax_error(self, client):
        """Sources that do not parse are a 422."""
        response = client.post("/lint", json={"source": "const = ;"})
        assert response.status_code == 422
        assert "syntax error" in response.json()["detail"]

    def test_missing_source(self, client):
        """Request validation rejects a body without source."""
        assert client.post("/lint", json={"filename": "a.test.js"}).status_code == 422

    def test_source_too_large(self, client, monkeypatch):
        """Oversized sources are rejected."""
        monkeypatch.setattr(settings, "MAX_SOURCE_BYTES", 10)
        response = client.post("/lint", json={"source": UNAWAITED})
        assert response.status_code == 413


class TestSuggestEndpoint:
    """Tests for POST /lint/suggest"""

    def test_rewrites(self, client):
        """waitFor around a sync query becomes a findBy call."""
        response = client.post("/lint/suggest", json={"source": WAITED, "filename": "a.test.tsx"})
        assert response.status_code == 200
        data = response.json()
        assert data["applied"] == 1
        assert data["changed"] is True
        assert "await screen.findByText('a');" in data["source"]

    def test_nothing_to_change(self, client):
        """Unchanged text when nothing is suggested."""
        data = client.post("/lint/suggest", json={"source": UNAWAITED}).json()
        assert data == {
            "filename": "test.js",
            "source": UNAWAITED,
            "applied": 0,
            "changed": False,
        }


class TestSettings:
    """Environment overrides."""

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PORT", "9001")
        monkeypatch.setenv("DEBUG", "true")
        monkeypatch.setenv("CORS_ORIGINS", "http://a,http://b")
        s = Settings()
        assert s.PORT == 9001
        assert s.DEBUG is True
        assert s.CORS_ORIGINS == ["http://a", "http://b"]
