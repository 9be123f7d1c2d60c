"""Shared test fixtures: in-memory store, services on a fixed clock, API client with auth headers."""

from __future__ import annotations

import os

# Settings are read at import time
os.environ["STORE_BACKEND"] = "memory"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["SEED_DEMO_DATA"] = "false"

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from dealership.core.security import create_access_token
from dealership.main import app
from dealership.repositories import get_record_store
from dealership.repositories.memory_store import InMemoryRecordStore
from dealership.schemas.vehicle import VehicleCreateSchema
from dealership.services.customer_service import CustomerService
from dealership.services.inquiry_service import InquiryService
from dealership.services.offer_service import OfferService
from dealership.services.vehicle_service import VehicleService

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def fixed_clock() -> datetime:
    return NOW


def vehicle_payload(**overrides) -> dict:
    payload = {
        "name": "Model 3",
        "brand": "Tesla",
        "price": 45000,
        "year": 2024,
        "category": "car",
    }
    payload.update(overrides)
    return payload


@pytest.fixture()
def store() -> InMemoryRecordStore:
    """A fresh in-memory store for each test."""
    return InMemoryRecordStore()


@pytest.fixture()
def vehicle_service(store: InMemoryRecordStore) -> VehicleService:
    return VehicleService(store, clock=fixed_clock)


@pytest.fixture()
def offer_service(store: InMemoryRecordStore) -> OfferService:
    return OfferService(store, clock=fixed_clock)


@pytest.fixture()
def customer_service(store: InMemoryRecordStore) -> CustomerService:
    return CustomerService(store, clock=fixed_clock)


@pytest.fixture()
def inquiry_service(store: InMemoryRecordStore) -> InquiryService:
    return InquiryService(store, clock=fixed_clock)


@pytest.fixture()
async def vehicle(vehicle_service: VehicleService):
    """One stored vehicle priced 45000."""
    return await vehicle_service.create_vehicle(VehicleCreateSchema(**vehicle_payload()))


@pytest.fixture()
def client(store: InMemoryRecordStore):
    """TestClient whose record store is the per-test in-memory store."""
    app.dependency_overrides[get_record_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def admin_headers() -> dict:
    token = create_access_token({"sub": "admin-1", "role": "admin", "email": "admin@example.com"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def customer_headers() -> dict:
    token = create_access_token({"sub": "cust-1", "role": "customer"})
    return {"Authorization": f"Bearer {token}"}
