"""Tests for DealershipApiClient using httpx's mock transport."""

from __future__ import annotations

import httpx
import pytest

from dealership.utils.api_client import PAGE_SIZE, CatalogClientError, DealershipApiClient


def vehicle_json(vehicle_id: str) -> dict:
    return {
        "id": vehicle_id,
        "name": "Model 3",
        "brand": "Tesla",
        "price": 45000,
        "year": 2024,
        "category": "car",
        "colorImages": [{"color": "White", "images": ["w.jpg"], "primaryImage": "w.jpg"}],
        "inventory": {"stock": 5, "reserved": 1, "status": "available", "available": 4, "overcommitted": False},
        "isActive": True,
        "featured": True,
    }


def make_client(handler) -> DealershipApiClient:
    return DealershipApiClient(
        base_url="http://dealer.test/api/",
        token="abc",
        transport=httpx.MockTransport(handler),
    )


# ── Vehicles ───────────────────────────────────────────────────


class TestFetchVehicles:
    async def test_walks_every_page(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            page = int(request.url.params["page"])
            seen.append((request.url.path, page, request.url.params["limit"], request.headers["Authorization"]))
            return httpx.Response(200, json={
                "vehicles": [vehicle_json(f"v{page}")],
                "pagination": {"currentPage": page, "totalPages": 2, "hasNextPage": page < 2},
            })

        vehicles = await make_client(handler).fetch_vehicles(category="car")

        assert [v.id for v in vehicles] == ["v1", "v2"]
        assert vehicles[0].color_images[0].primary_image == "w.jpg"
        assert vehicles[0].is_active is True
        assert seen[0] == ("/api/vehicles", 1, str(PAGE_SIZE), "Bearer abc")
        assert len(seen) == 2

    async def test_http_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503, json={"message": "down"})

        with pytest.raises(CatalogClientError, match="503"):
            await make_client(handler).fetch_vehicles()

    async def test_connect_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(CatalogClientError, match="not available"):
            await make_client(handler).fetch_vehicles()


# ── Offers and health ──────────────────────────────────────────


class TestOffersAndHealth:
    async def test_fetch_offers_sends_active_flag(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.params["active"] == "true"
            assert request.url.params["limit"] == "5"
            return httpx.Response(200, json=[{
                "id": "o1",
                "vehicleId": "v1",
                "title": "Sale",
                "discount": 25,
                "type": "percentage",
                "validUntil": "2025-07-01T12:00:00Z",
                "isActive": True,
                "usageCount": 0,
                "isCurrentlyValid": True,
            }])

        offers = await make_client(handler).fetch_offers(limit=5)
        assert offers[0].vehicle_id == "v1"
        assert offers[0].valid_until.year == 2025

    async def test_active_offers_for_vehicle(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/api/offers/vehicle/v1/active"
            return httpx.Response(200, json=[])

        assert await make_client(handler).fetch_active_offers_for_vehicle("v1") == []

    async def test_health_check_unreachable(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        health = await make_client(handler).health_check()
        assert health["status"] == "unreachable"

    async def test_health_check_ok(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"status": "healthy"})

        assert await make_client(handler).health_check() == {"status": "healthy"}
