"""
Integration tests for the ``/api/embeddings`` endpoints.

The ``SearchOrchestrator`` is fully mocked: these tests exercise input
validation, error mapping, and response formatting of the route handlers.
"""

from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from connectq.api.app import app
from connectq.api.dependencies import get_orchestrator
from connectq.core.exceptions import NotFoundError, ValidationError
from connectq.core.types import EmbedResult, SearchOutcome
from tests.helpers import make_match


def _make_client(orchestrator=None):
    """Build a TestClient with a mocked SearchOrchestrator."""
    orchestrator = orchestrator or MagicMock()
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    return TestClient(app, raise_server_exceptions=False), orchestrator


class TestSearchCompanies:
    """POST /api/embeddings/search-companies"""

    def teardown_method(self):
        app.dependency_overrides.clear()

    def test_matches_in_index_order(self):
        client, orchestrator = _make_client()
        orchestrator.search.return_value = SearchOutcome(
            matches=[
                make_match("b", 0.91, name="Beta", services=["apps"]),
                make_match("a", 0.55, name="Alpha"),
            ],
            message="Found 2 matching companies",
        )

        resp = client.post("/api/embeddings/search-companies", json={"query": "apps", "topK": 2})

        assert resp.status_code == 200
        data = resp.json()
        assert data["success"] is True
        assert data["count"] == 2
        assert [m["id"] for m in data["matches"]] == ["b", "a"]
        assert data["matches"][0]["name"] == "Beta"
        assert data["matches"][0]["services"] == ["apps"]
        orchestrator.search.assert_called_once_with("apps", top_k=2)

    def test_default_top_k(self):
        client, orchestrator = _make_client()
        orchestrator.search.return_value = SearchOutcome(matches=[], message="No matching companies found")
        client.post("/api/embeddings/search-companies", json={"query": "apps"})
        assert orchestrator.search.call_args.kwargs["top_k"] == 10

    def test_orphan_match_has_null_fields(self):
        client, orchestrator = _make_client()
        orchestrator.search.return_value = SearchOutcome(
            matches=[make_match("gone", 0.7, orphan=True)],
            message="Found 1 matching companies",
        )
        match = client.post("/api/embeddings/search-companies", json={"query": "apps"}).json()["matches"][0]
        assert match["id"] == "gone"
        assert match["score"] == 0.7
        assert match["name"] is None

    def test_no_matches(self):
        client, orchestrator = _make_client()
        orchestrator.search.return_value = SearchOutcome(matches=[], message="No matching companies found")
        resp = client.post("/api/embeddings/search-companies", json={"query": "apps"})
        assert resp.status_code == 200
        assert resp.json()["matches"] == []

    def test_blank_query_is_400(self):
        client, orchestrator = _make_client()
        resp = client.post("/api/embeddings/search-companies", json={"query": "   "})
        assert resp.status_code == 400
        assert resp.json()["detail"]["error"] == "validation_error"
        orchestrator.search.assert_not_called()

    def test_missing_query_is_400(self):
        client, _ = _make_client()
        resp = client.post("/api/embeddings/search-companies", json={"topK": 3})
        assert resp.status_code == 400

    def test_top_k_out_of_range_is_400(self):
        client, _ = _make_client()
        resp = client.post("/api/embeddings/search-companies", json={"query": "a", "topK": 101})
        assert resp.status_code == 400
        assert "top" in resp.json()["detail"]["details"].lower()

    def test_orchestrator_validation_error_is_400(self):
        client, orchestrator = _make_client()
        orchestrator.search.side_effect = ValidationError("Search query is required")
        resp = client.post("/api/embeddings/search-companies", json={"query": "a"})
        assert resp.status_code == 400
        assert resp.json()["detail"]["message"] == "Search query is required"

    def test_downstream_failure_is_500_with_same_shape(self):
        client, orchestrator = _make_client()
        orchestrator.search.return_value = SearchOutcome(
            matches=[], message="Vector query failed", success=False
        )
        resp = client.post("/api/embeddings/search-companies", json={"query": "a"})
        assert resp.status_code == 500
        data = resp.json()
        assert data["success"] is False
        assert data["message"] == "Vector query failed"
        assert data["matches"] == []


class TestEmbedEndpoints:
    """embed-company, embed-all-companies and cleanup-orphans."""

    def teardown_method(self):
        app.dependency_overrides.clear()

    def test_embed_company(self):
        client, orchestrator = _make_client()
        orchestrator.embed_single.return_value = EmbedResult(
            success=True, message="Company Acme embedded successfully", count=1
        )
        resp = client.post("/api/embeddings/embed-company/c1")
        assert resp.status_code == 200
        assert resp.json() == {
            "success": True,
            "message": "Company Acme embedded successfully",
            "count": 1,
        }
        orchestrator.embed_single.assert_called_once_with("c1")

    def test_embed_unknown_company_is_404(self):
        client, orchestrator = _make_client()
        orchestrator.embed_single.side_effect = NotFoundError("company", "ghost")
        resp = client.post("/api/embeddings/embed-company/ghost")
        assert resp.status_code == 404
        assert resp.json()["detail"]["error"] == "not_found"

    def test_embed_failure_is_500(self):
        client, orchestrator = _make_client()
        orchestrator.embed_single.return_value = EmbedResult(success=False, message="quota exceeded")
        resp = client.post("/api/embeddings/embed-company/c1")
        assert resp.status_code == 500
        assert resp.json()["success"] is False

    def test_embed_all(self):
        client, orchestrator = _make_client()
        orchestrator.embed_and_store_all.return_value = EmbedResult(
            success=True, message="Embedded and stored 4 companies", count=4
        )
        resp = client.post("/api/embeddings/embed-all-companies")
        assert resp.status_code == 200
        assert resp.json()["count"] == 4

    def test_embed_all_empty_table(self):
        client, orchestrator = _make_client()
        orchestrator.embed_and_store_all.return_value = EmbedResult(
            success=True, message="No companies to embed", count=0
        )
        resp = client.post("/api/embeddings/embed-all-companies")
        assert resp.status_code == 200
        assert resp.json()["count"] == 0

    def test_cleanup_orphans(self):
        client, orchestrator = _make_client()
        orchestrator.cleanup_orphans.return_value = EmbedResult(
            success=True, message="Removed 2 orphaned vector(s)", count=2
        )
        resp = client.post("/api/embeddings/cleanup-orphans")
        assert resp.status_code == 200
        assert resp.json()["message"] == "Removed 2 orphaned vector(s)"


class TestEmbeddingStatus:
    """GET /api/embeddings/status"""

    def teardown_method(self):
        app.dependency_overrides.clear()

    def _status(self, company_count, vector_count):
        return {
            "company_count": company_count,
            "vector_count": vector_count,
            "collection": "companies",
            "location": "./data/chroma_db",
            "provider": "gemini (gemini-embedding-001, dim=1536)",
            "model": "gemini-embedding-001",
            "dimension": 1536,
        }

    def test_in_sync(self):
        client, orchestrator = _make_client()
        orchestrator.status.return_value = self._status(3, 3)
        data = client.get("/api/embeddings/status").json()
        assert data["message"] == "Index in sync"
        assert data["model"] == "gemini-embedding-001"
        assert "timestamp" in data

    def test_out_of_sync(self):
        client, orchestrator = _make_client()
        orchestrator.status.return_value = self._status(3, 5)
        data = client.get("/api/embeddings/status").json()
        assert data["vector_count"] == 5
        assert "out of sync" in data["message"]
