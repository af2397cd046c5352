"""Tests for the public routes, login flow and app-level handlers."""

from unittest.mock import patch

import pytest

from tests.utils import ADMIN_EMAIL, ADMIN_PASSWORD


@pytest.mark.integration
class TestGalleryRoute:
    def test_gallery_lists_catalog(self, client):
        response = client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert {p["name"] for p in body["featured"]} == {"Red Bicycle", "Desk Lamp"}
        assert {p["name"] for p in body["products"]} == {"Blue Scooter", "Notebook"}
        assert body["categories"] == ["Home", "Vehicles"]
        assert body["featured_total"] == 2

    def test_gallery_filters(self, client):
        response = client.get("/", params={"search": "SCOOTER", "category": "Vehicles"})

        body = response.json()
        assert body["search"] == "SCOOTER"
        assert body["featured"] == []
        assert [p["name"] for p in body["products"]] == ["Blue Scooter"]
        assert body["products"][0]["price_display"] == "$299.50"

    def test_security_headers_and_request_id(self, client):
        response = client.get("/", headers={"X-Request-ID": "req-42"})

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["X-Request-ID"] == "req-42"


@pytest.mark.integration
class TestProductDetailRoute:
    def test_detail_page(self, client, catalog):
        lamp = catalog["Desk Lamp"]

        response = client.get(f"/product/{lamp.id}")

        assert response.status_code == 200
        body = response.json()
        assert body["product"]["name"] == "Desk Lamp"
        assert body["product"]["price_display"] == "$25.00"
        assert body["order_url"].startswith("https://wa.me/")
        assert "Desk%20Lamp" in body["order_url"]

    def test_missing_product_redirects_to_gallery(self, client):
        response = client.get("/product/does-not-exist")

        assert response.status_code == 303
        assert response.headers["location"] == "/"


@pytest.mark.integration
class TestLoginFlow:
    def test_login_sets_cookie_and_redirects(self, client):
        response = client.post("/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})

        assert response.status_code == 303
        assert response.headers["location"] == "/admin"
        assert response.json()["notice"]["level"] == "success"
        assert "storefront_session" in response.cookies
        assert "httponly" in response.headers["set-cookie"].lower()

    def test_bad_credentials(self, client):
        response = client.post("/login", json={"email": ADMIN_EMAIL, "password": "wrong"})

        assert response.status_code == 401
        assert response.json() == {
            "notice": {"level": "error", "message": "Invalid email or password"}
        }

    def test_missing_fields(self, client):
        response = client.post("/login", json={"email": " ", "password": ""})

        assert response.status_code == 422
        assert response.json()["notice"]["message"] == "Email and password are required"

    def test_login_page_when_signed_out(self, client):
        response = client.get("/login")

        assert response.status_code == 200
        assert response.json()["authenticated"] is False

    def test_login_page_when_signed_in_goes_to_dashboard(self, admin_client):
        response = admin_client.get("/login")

        assert response.status_code == 303
        assert response.headers["location"] == "/admin"

    def test_logout(self, admin_client, seeded_backend):
        assert admin_client.get("/admin").status_code == 200

        response = admin_client.post("/logout")

        assert response.status_code == 303
        assert response.headers["location"] == "/login"
        assert seeded_backend.listener_count() == 0
        assert admin_client.get("/admin").status_code == 303


@pytest.mark.integration
class TestAppHandlers:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["backend"] == "InMemoryBackend"
        assert response.json()["session_storage"] == "available"

    def test_health_degraded_when_session_store_fails(self, client, session_storage):
        with patch.object(session_storage, "is_available", return_value=False):
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["session_storage"] == "unavailable"

    def test_unknown_path_is_not_found(self, client):
        response = client.get("/no/such/page")

        assert response.status_code == 404
        assert response.json()["path"] == "/no/such/page"
