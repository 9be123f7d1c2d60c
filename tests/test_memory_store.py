"""Unit tests for the in-memory record store."""

from __future__ import annotations

import asyncio

import pytest

from dealership.models.customer import Customer, Purchase
from dealership.models.vehicle import Vehicle
from dealership.repositories import EntryNotFound, RecordNotFound
from dealership.repositories.memory_store import InMemoryRecordStore


def sample_vehicle(**overrides) -> Vehicle:
    data = {"name": "Model 3", "brand": "Tesla", "price": 45000, "year": 2024}
    data.update(overrides)
    return Vehicle(**data)


def sample_customer() -> Customer:
    return Customer(first_name="Asha", last_name="Verma", email="asha@example.com", phone="123")


# ── CRUD operations ────────────────────────────────────────────


class TestCRUD:
    async def test_create_assigns_id(self, store: InMemoryRecordStore):
        created = await store.create(sample_vehicle())
        assert created.id
        assert await store.get(Vehicle, created.id) == created

    async def test_get_unknown_returns_none(self, store: InMemoryRecordStore):
        assert await store.get(Vehicle, "nope") is None

    async def test_collections_are_separate(self, store: InMemoryRecordStore):
        created = await store.create(sample_vehicle())
        assert await store.get(Customer, created.id) is None

    async def test_list_filters_by_equality(self, store: InMemoryRecordStore):
        await store.create(sample_vehicle(brand="Tesla"))
        await store.create(sample_vehicle(brand="Zero"))
        listed = await store.list(Vehicle, {"brand": "Zero"})
        assert [v.brand for v in listed] == ["Zero"]

    async def test_list_keeps_insertion_order(self, store: InMemoryRecordStore):
        for name in ("a", "b", "c"):
            await store.create(sample_vehicle(name=name))
        assert [v.name for v in await store.list(Vehicle)] == ["a", "b", "c"]

    async def test_update_replaces_fields(self, store: InMemoryRecordStore):
        created = await store.create(sample_vehicle())
        updated = await store.update(Vehicle, created.id, {"price": 40000})
        assert updated.price == 40000
        assert updated.name == created.name

    async def test_update_unknown_raises(self, store: InMemoryRecordStore):
        with pytest.raises(RecordNotFound):
            await store.update(Vehicle, "nope", {"price": 1})

    async def test_delete_twice_raises(self, store: InMemoryRecordStore):
        created = await store.create(sample_vehicle())
        await store.delete(Vehicle, created.id)
        with pytest.raises(RecordNotFound):
            await store.delete(Vehicle, created.id)


# ── Embedded lists ─────────────────────────────────────────────


class TestEmbeddedLists:
    async def test_append_keeps_order(self, store: InMemoryRecordStore):
        customer = await store.create(sample_customer())
        for amount in (100, 200, 300):
            await store.append(Customer, customer.id, "purchase_history", Purchase(vehicle_id="v", amount=amount))
        stored = await store.get(Customer, customer.id)
        assert [p.amount for p in stored.purchase_history] == [100, 200, 300]

    async def test_concurrent_appends_all_survive(self, store: InMemoryRecordStore):
        customer = await store.create(sample_customer())
        await asyncio.gather(*(
            store.append(Customer, customer.id, "purchase_history", Purchase(vehicle_id=f"v{i}", amount=i))
            for i in range(20)
        ))
        stored = await store.get(Customer, customer.id)
        assert len(stored.purchase_history) == 20

    async def test_append_unknown_record(self, store: InMemoryRecordStore):
        with pytest.raises(RecordNotFound):
            await store.append(Customer, "nope", "purchase_history", Purchase(vehicle_id="v"))

    async def test_update_entry_unknown_entry(self, store: InMemoryRecordStore):
        customer = await store.create(sample_customer())
        with pytest.raises(EntryNotFound):
            await store.update_entry(Customer, customer.id, "test_drive_history", "missing", {"status": "completed"})
