"""HTTP-level tests: routing, auth gate and error mapping."""

from __future__ import annotations

from fastapi.testclient import TestClient

from dealership.core.dependencies import get_vehicle_service
from dealership.main import app

from conftest import vehicle_payload


def create_vehicle(client: TestClient, headers: dict, **overrides) -> dict:
    response = client.post("/api/vehicles", json=vehicle_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


# ── Basic routes ───────────────────────────────────────────────


class TestBasicRoutes:
    def test_root(self, client: TestClient):
        response = client.get("/")
        assert response.status_code == 200
        assert "running" in response.json()["message"]

    def test_health(self, client: TestClient):
        for path in ("/health", "/api/health"):
            response = client.get(path)
            assert response.status_code == 200
            assert response.json()["status"] == "healthy"


# ── Auth gate ──────────────────────────────────────────────────


class TestAuthGate:
    def test_missing_token(self, client: TestClient):
        response = client.post("/api/vehicles", json=vehicle_payload())
        assert response.status_code == 401

    def test_bad_token(self, client: TestClient):
        response = client.post("/api/vehicles", json=vehicle_payload(), headers={"Authorization": "Bearer junk"})
        assert response.status_code == 401

    def test_non_admin_forbidden(self, client: TestClient, customer_headers):
        response = client.post("/api/vehicles", json=vehicle_payload(), headers=customer_headers)
        assert response.status_code == 403

    def test_public_reads_need_no_token(self, client: TestClient):
        assert client.get("/api/vehicles").status_code == 200
        assert client.get("/api/offers").status_code == 200


# ── Vehicles ───────────────────────────────────────────────────


class TestVehicleRoutes:
    def test_create_and_fetch(self, client: TestClient, admin_headers):
        created = create_vehicle(client, admin_headers)
        assert created["inventory"]["available"] == 0

        response = client.get(f"/api/vehicles/{created['id']}")
        assert response.status_code == 200
        assert response.json()["brand"] == "Tesla"

    def test_unknown_vehicle(self, client: TestClient):
        response = client.get("/api/vehicles/665f1c2e8b3a4d0012345678")
        assert response.status_code == 404
        assert response.json()["message"] == "Vehicle not found"

    def test_domain_validation_errors(self, client: TestClient, admin_headers):
        response = client.post("/api/vehicles", json={"name": "X", "price": -1}, headers=admin_headers)
        assert response.status_code == 400
        params = {e["param"] for e in response.json()["errors"]}
        assert {"brand", "price", "year"} <= params

    def test_malformed_body(self, client: TestClient, admin_headers):
        response = client.post("/api/vehicles", json=vehicle_payload(year="soon"), headers=admin_headers)
        assert response.status_code == 400
        assert response.json()["errors"][0]["param"] == "year"

    def test_overcommitted_inventory(self, client: TestClient, admin_headers):
        created = create_vehicle(client, admin_headers)
        response = client.patch(
            f"/api/vehicles/{created['id']}/inventory",
            json={"stock": 5, "reserved": 8, "status": "available"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        inventory = response.json()["inventory"]
        assert (inventory["stock"], inventory["reserved"], inventory["available"]) == (5, 8, 0)
        assert inventory["overcommitted"] is True

    def test_listing_query_parameters(self, client: TestClient, admin_headers):
        create_vehicle(client, admin_headers, name="A", price=100)
        create_vehicle(client, admin_headers, name="B", price=300)
        create_vehicle(client, admin_headers, name="C", price=200)

        response = client.get("/api/vehicles", params={"sortBy": "price", "sortOrder": "asc", "limit": 2, "page": 7})
        body = response.json()
        assert [v["name"] for v in body["vehicles"]] == ["B"]
        assert body["pagination"]["currentPage"] == 2
        assert body["pagination"]["hasNextPage"] is False

        response = client.get("/api/vehicles", params={"minPrice": 150})
        assert {v["name"] for v in response.json()["vehicles"]} == {"B", "C"}

    def test_unknown_sort_field(self, client: TestClient):
        response = client.get("/api/vehicles", params={"sortBy": "inventory"})
        assert response.status_code == 400

    def test_delete_twice(self, client: TestClient, admin_headers):
        created = create_vehicle(client, admin_headers)
        assert client.delete(f"/api/vehicles/{created['id']}", headers=admin_headers).status_code == 200
        assert client.delete(f"/api/vehicles/{created['id']}", headers=admin_headers).status_code == 404


# ── Offers ─────────────────────────────────────────────────────


class TestOfferRoutes:
    def test_offer_for_unknown_vehicle(self, client: TestClient, admin_headers):
        response = client.post("/api/offers", json={
            "vehicleId": "665f1c2e8b3a4d0012345678",
            "title": "Sale",
            "description": "25% off",
            "discount": 25,
        }, headers=admin_headers)
        assert response.status_code == 404
        assert client.get("/api/offers").json() == []

    def test_views_show_final_price(self, client: TestClient, admin_headers):
        vehicle = create_vehicle(client, admin_headers)
        response = client.post("/api/offers", json={
            "vehicleId": vehicle["id"],
            "title": "Sale",
            "description": "25% off",
            "discount": 25,
        }, headers=admin_headers)
        assert response.status_code == 201

        views = client.get("/api/offers/views").json()
        assert views[0]["finalPrice"] == 33750.0
        assert views[0]["savings"] == 11250.0

        active = client.get(f"/api/offers/vehicle/{vehicle['id']}/active").json()
        assert [o["title"] for o in active] == ["Sale"]

    def test_unknown_view_filter(self, client: TestClient):
        assert client.get("/api/offers/views", params={"filter": "cheapest"}).status_code == 400


# ── Customers and inquiries ────────────────────────────────────


class TestCrmRoutes:
    def test_duplicate_email_conflict(self, client: TestClient):
        payload = {"firstName": "Asha", "lastName": "Verma", "email": "asha@example.com", "phone": "123"}
        assert client.post("/api/customers", json=payload).status_code == 201
        payload["email"] = "ASHA@example.com"
        response = client.post("/api/customers", json=payload)
        assert response.status_code == 409

    def test_test_drive_flow(self, client: TestClient):
        customer = client.post("/api/customers", json={
            "firstName": "Asha", "lastName": "Verma", "email": "asha@example.com", "phone": "123",
        }).json()
        booked = client.post(f"/api/customers/{customer['id']}/test-drives", json={"vehicleId": "v1"})
        assert booked.status_code == 201
        drive_id = booked.json()["testDriveHistory"][0]["id"]

        response = client.patch(
            f"/api/customers/{customer['id']}/test-drives/{drive_id}", json={"status": "completed"}
        )
        assert response.json()["testDriveHistory"][0]["status"] == "completed"

        response = client.patch(
            f"/api/customers/{customer['id']}/test-drives/{drive_id}", json={"status": "no_show"}
        )
        assert response.status_code == 400

    def test_inquiry_response_uses_caller(self, client: TestClient, admin_headers):
        inquiry = client.post("/api/inquiries", json={
            "subject": "Price",
            "message": "How much?",
            "contactInfo": {"name": "Ravi", "email": "ravi@example.com"},
        })
        assert inquiry.status_code == 201

        response = client.post(
            f"/api/inquiries/{inquiry.json()['id']}/responses",
            json={"message": "Rs 1.4L"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "resolved"
        assert body["responses"][0]["respondedBy"] == "admin-1"


# ── Unexpected errors ──────────────────────────────────────────


class BrokenVehicleService:
    async def vehicle_stats(self):
        raise RuntimeError("connection pool exhausted")


class TestUnexpectedErrors:
    def test_internal_error_hides_detail(self, client: TestClient):
        app.dependency_overrides[get_vehicle_service] = lambda: BrokenVehicleService()
        unsafe_client = TestClient(app, raise_server_exceptions=False)

        response = unsafe_client.get("/api/vehicles/stats/overview")
        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Internal Server Error"
        assert "detail" not in body


# ── Analytics ──────────────────────────────────────────────────


class TestAnalyticsRoutes:
    def test_admin_only(self, client: TestClient, customer_headers):
        for path in ("/api/analytics/dashboard", "/api/analytics/sales", "/api/analytics/inventory", "/api/analytics/customers"):
            assert client.get(path).status_code == 401
            assert client.get(path, headers=customer_headers).status_code == 403

    def test_dashboard(self, client: TestClient, admin_headers):
        create_vehicle(client, admin_headers)
        response = client.get("/api/analytics/dashboard", headers=admin_headers)
        assert response.status_code == 200
        body = response.json()
        assert body["overview"]["totalVehicles"] == 1
        assert body["vehicles"]["total"] == 1

    def test_sales_period_checked(self, client: TestClient, admin_headers):
        assert client.get("/api/analytics/sales?period=year", headers=admin_headers).json() == []
        assert client.get("/api/analytics/sales?period=week", headers=admin_headers).status_code == 400

    def test_inventory_and_customers(self, client: TestClient, admin_headers):
        create_vehicle(client, admin_headers)
        inventory = client.get("/api/analytics/inventory", headers=admin_headers).json()
        assert inventory["byCategory"] == {"car": 0}
        customers = client.get("/api/analytics/customers", headers=admin_headers).json()
        assert customers["topCustomers"] == []
