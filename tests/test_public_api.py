"""
Тесты публичных функций и эндпоинтов витрины.
"""

from fastapi.testclient import TestClient

from app.api.deps import get_repository
from app.core.config import settings
from app.core.errors import UpstreamFailure
from app.main import app
from app.repositories.memory import InMemoryCatalogRepository


class BrokenRepository(InMemoryCatalogRepository):
    def find_catalog_by_slug(self, slug):
        raise UpstreamFailure(detail="connection refused")

    def list_products(self, catalog_id):
        raise UpstreamFailure(detail="connection refused")


class TestGetCatalog:
    def test_returns_catalog_with_products(self, client):
        response = client.get("/getCatalog", params={"slug": "tienda-ejemplo"})
        assert response.status_code == 200
        data = response.json()
        assert data["id"] == "1"
        assert data["name"] == "Tienda Ejemplo"
        assert data["clientId"] == "client-1"
        assert data["theme"]["primaryColor"] == "#0ea5e9"
        assert [p["name"] for p in data["products"]] == ["Producto 1", "Producto 2"]
        assert data["products"][0]["catalogId"] == "1"

    def test_missing_slug(self, client):
        response = client.get("/getCatalog")
        assert response.status_code == 400
        assert response.json() == {"error": "The slug parameter is required"}

    def test_unknown_slug(self, client):
        response = client.get("/getCatalog", params={"slug": "no-existe"})
        assert response.status_code == 404
        assert response.json() == {"error": "Catalog not found"}

    def test_store_failure(self, client):
        app.dependency_overrides[get_repository] = BrokenRepository
        response = client.get("/getCatalog", params={"slug": "tienda-ejemplo"})
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    def test_whitespace_slug_is_looked_up(self, client):
        response = client.get("/getCatalog", params={"slug": "   "})
        assert response.status_code == 404
        assert response.json() == {"error": "Catalog not found"}

    def test_options_returns_no_content(self, client):
        for path in ["/getCatalog", "/searchProducts", "/getCatalogStats"]:
            response = client.options(path)
            assert response.status_code == 204

    def test_cors_preflight_returns_no_content(self, client):
        for path in ["/getCatalog?slug=x", "/searchProducts", "/getCatalogStats"]:
            response = client.options(
                path,
                headers={
                    "Origin": "https://tienda.webriders.com",
                    "Access-Control-Request-Method": "GET",
                },
            )
            assert response.status_code == 204
            assert response.content == b""
            assert "access-control-allow-origin" in response.headers
            assert "GET" in response.headers["access-control-allow-methods"]

    def test_cors_headers(self, client):
        response = client.get(
            "/getCatalog",
            params={"slug": "tienda-ejemplo"},
            headers={"Origin": "https://tienda.webriders.com"},
        )
        assert "access-control-allow-origin" in response.headers


class TestSearchProducts:
    def test_search(self, client):
        response = client.get("/searchProducts", params={"catalogId": "1", "query": "PRODUCTO 2"})
        assert response.status_code == 200
        assert [p["id"] for p in response.json()["products"]] == ["2"]

    def test_empty_query_returns_all(self, client):
        response = client.get("/searchProducts", params={"catalogId": "1"})
        assert len(response.json()["products"]) == 2

    def test_unknown_catalog_is_empty(self, client):
        response = client.get("/searchProducts", params={"catalogId": "999", "query": "x"})
        assert response.status_code == 200
        assert response.json() == {"products": []}

    def test_missing_catalog_id(self, client):
        response = client.get("/searchProducts", params={"query": "x"})
        assert response.status_code == 400
        assert response.json() == {"error": "The catalogId parameter is required"}


class TestGetCatalogStats:
    def test_demo_stats(self, client):
        response = client.get("/getCatalogStats", params={"catalogId": "1"})
        assert response.status_code == 200
        assert response.json() == {
            "totalProducts": 2,
            "totalValue": 249.98,
            "categories": ["Categoría 1", "Categoría 2"],
            "inStock": 2,
            "outOfStock": 0,
            "untracked": 0,
        }

    def test_missing_catalog_id(self, client):
        assert client.get("/getCatalogStats").status_code == 400

    def test_store_failure(self, client):
        app.dependency_overrides[get_repository] = BrokenRepository
        response = client.get("/getCatalogStats", params={"catalogId": "1"})
        assert response.status_code == 500


class TestUnexpectedFailures:
    def test_unexpected_error_keeps_error_format(self, client):
        class CrashingRepository(InMemoryCatalogRepository):
            def list_products(self, catalog_id):
                raise RuntimeError("driver crashed")

        app.dependency_overrides[get_repository] = CrashingRepository
        response = TestClient(app, raise_server_exceptions=False).get(
            "/searchProducts", params={"catalogId": "1"}
        )
        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}


class TestStorefrontApi:
    def test_catalog(self, client):
        response = client.get("/api/v1/catalogs/tienda-ejemplo")
        assert response.status_code == 200
        assert len(response.json()["products"]) == 2

    def test_filtered_products(self, client):
        response = client.get(
            "/api/v1/catalogs/tienda-ejemplo/products", params={"category": "Categoría 1"}
        )
        data = response.json()
        assert [p["id"] for p in data["items"]] == ["1"]
        assert data["total"] == 1
        assert [c["name"] for c in data["categories"]] == ["all", "Categoría 1", "Categoría 2"]

    def test_search_without_matches(self, client):
        response = client.get("/api/v1/catalogs/tienda-ejemplo/products", params={"q": "zzz"})
        assert response.json()["items"] == []
        assert response.json()["categories"][0] == {"name": "all", "count": 2}

    def test_categories(self, client):
        response = client.get("/api/v1/catalogs/tienda-ejemplo/categories")
        assert response.json() == [
            {"name": "all", "count": 2},
            {"name": "Categoría 1", "count": 1},
            {"name": "Categoría 2", "count": 1},
        ]

    def test_stats(self, client):
        data = client.get("/api/v1/catalogs/tienda-ejemplo/stats").json()
        assert data["totalCount"] == 2
        assert data["totalUnits"] == 15
        assert data["untrackedCount"] == 0

    def test_unknown_catalog(self, client):
        response = client.get("/api/v1/catalogs/no-existe/categories")
        assert response.status_code == 404
        assert response.json() == {"error": "Catalog not found"}


class TestServiceEndpoints:
    def test_healthz(self, client):
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_store_ping_in_mock_mode(self, client, monkeypatch):
        monkeypatch.setattr(settings, "DATABASE_URL", None)
        response = client.get("/api/v1/_debug/store-ping")
        assert response.json() == {"ok": True, "mode": "mock"}

    def test_orphans(self, client, memory_repository):
        assert client.get("/api/v1/_debug/orphans").json()["count"] == 0

        memory_repository.insert_document("products", {"id": "x", "name": "Huérfano"})
        data = client.get("/api/v1/_debug/orphans").json()
        assert data["count"] == 1
        assert data["orphans"] == [{"id": "x", "name": "Huérfano", "catalogId": None}]
        assert data["productsPerCatalog"] == {"1": 2}
