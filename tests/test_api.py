"""
Tests for the FastAPI application.

The app fixture swaps in the five-product sample catalog and a
fallback-only smart filter service (see conftest.py).
"""
import pytest


class TestHealthEndpoints:
    """Tests for health check endpoints"""

    def test_health_check(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "smart-filter-api"}

    def test_liveness(self, client):
        assert client.get("/live").json() == {"status": "alive"}

    def test_readiness(self, client):
        assert client.get("/ready").json() == {"status": "ready"}

    def test_detailed_health(self, client):
        data = client.get("/health/detailed").json()
        assert data["checks"]["config"] == "ok"
        assert data["checks"]["catalog"]["status"] == "loaded"
        assert data["checks"]["smart_filter"]["status"] in ("configured", "fallback_only")

    def test_request_id_header(self, client):
        response = client.get("/health", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Request-ID"] == "req-42"
        assert response.headers["X-Response-Time"].endswith("ms")


class TestCatalogEndpoints:
    """Tests for /api/filters and /api/products"""

    def test_available_filters(self, client):
        response = client.get("/api/filters")
        assert response.status_code == 200

        filters = {f["attribute"]: f for f in response.json()}
        assert filters["price"]["type"] == "RANGE"
        assert filters["price"]["minValue"] == 330
        tiers = {e["value"]: e["count"] for e in filters["priceTier"]["entries"]}
        assert tiers["BUDGET"] == 2
        wifi = filters["features.wifiEnabled"]
        assert wifi["operator"] == "AND"
        assert wifi["entries"][0]["displayValue"] == "Yes"

    def test_list_products(self, client):
        products = client.get("/api/products").json()
        assert [p["id"] for p in products] == ["WM_0001", "WM_0002", "WM_0003", "WM_0004", "WM_0005"]
        assert products[0]["price"]["displayPrice"]["amount"] == 699
        assert products[0]["specifications"]["energyRating"] == "B"
        assert products[1]["features"]["wifiEnabled"] is True

    def test_filter_products(self, client):
        response = client.post("/api/products/filter", json={
            "rangeFilters": {"price": {"max": 4000}},
            "standardFilters": {"features.wifiEnabled": ["true"], "color": ["WHITE", "BLACK"]},
        })
        assert response.status_code == 200

        data = response.json()
        assert [p["id"] for p in data["products"]] == ["WM_0003", "WM_0004"]
        assert data["total"] == 5
        assert data["matched"] == 2
        assert data["activeFilters"] == 3

    def test_filter_products_empty_state(self, client):
        data = client.post("/api/products/filter", json={}).json()
        assert data["matched"] == 5
        assert data["activeFilters"] == 0

    def test_filter_products_empty_selection_not_counted(self, client):
        data = client.post("/api/products/filter", json={
            "rangeFilters": {"price": {"min": None, "max": None}},
            "standardFilters": {"color": []},
        }).json()
        assert data["matched"] == 5
        assert data["activeFilters"] == 0

    def test_filter_products_invalid_body(self, client):
        response = client.post("/api/products/filter", json={"rangeFilters": {"price": {"max": "cheap"}}})
        assert response.status_code == 422


class TestSmartFilterEndpoints:
    """Tests for /api/smart-filter (rule-based fallback path)"""

    def test_smart_filter_fallback(self, client):
        response = client.post("/api/smart-filter", json={"prompt": "small family under $800"})
        assert response.status_code == 200

        data = response.json()
        assert data["source"] == "fallback"
        assert data["confidence"] == 0.5
        assert data["rangeFilters"] == [
            {"attribute": "price", "minValue": None, "maxValue": 800.0},
            {"attribute": "specifications.capacity", "minValue": 4.0, "maxValue": 4.5},
        ]
        assert data["standardFilters"] == []

    def test_smart_filter_standard(self, client):
        data = client.post("/api/smart-filter", json={"prompt": "budget friendly"}).json()
        assert data["standardFilters"] == [
            {"attribute": "priceTier", "operator": "OR", "valueType": "SINGLE", "values": ["BUDGET"]},
        ]

    def test_empty_prompt(self, client):
        response = client.post("/api/smart-filter", json={"prompt": "  "})
        assert response.status_code == 400
        assert response.json() == {"error": "Prompt is required and must be a non-empty string"}

    def test_prompt_too_long(self, client):
        response = client.post("/api/smart-filter", json={"prompt": "washer " + "x" * 494})
        assert response.status_code == 400
        assert "too long" in response.json()["error"]

    def test_off_topic_prompt(self, client):
        response = client.post("/api/smart-filter", json={"prompt": "tell me a joke"})
        assert response.status_code == 400
        body = response.json()
        assert "washing machine" in body["error"]
        assert body["suggestion"].startswith("Try using terms like")

    def test_nothing_extracted(self, client):
        response = client.post("/api/smart-filter", json={"prompt": "washing machine please"})
        assert response.status_code == 400
        assert response.json()["suggestion"].startswith("Examples")

    def test_missing_prompt(self, client):
        assert client.post("/api/smart-filter", json={}).status_code == 422

    def test_apply(self, client):
        response = client.post("/api/smart-filter/apply", json={"prompt": "quiet washer with steam"})
        assert response.status_code == 200

        data = response.json()
        assert data["filters"]["source"] == "fallback"
        assert data["appliedFilters"]["rangeFilters"] == {
            "specifications.noiseLevel": {"min": None, "max": 60.0},
        }
        assert data["appliedFilters"]["standardFilters"] == {"features.steamCleaning": ["true"]}
        assert [p["id"] for p in data["products"]] == ["WM_0003", "WM_0005"]
        assert data["total"] == 5
        assert data["matched"] == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
