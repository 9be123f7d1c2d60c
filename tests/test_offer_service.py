"""Tests for OfferService: creation rules, validity filtering, views and stats."""

from __future__ import annotations

from datetime import timedelta

import pytest

from dealership.core.exceptions import NotFoundError, ValidationError
from dealership.models.offer import Offer
from dealership.schemas.offer import OfferCreateSchema, OfferUpdateSchema
from dealership.services.offer_service import OfferService

from conftest import NOW


def offer_payload(vehicle_id: str, **overrides) -> OfferCreateSchema:
    data = {
        "vehicleId": vehicle_id,
        "title": "Festive Sale",
        "description": "25% off",
        "discount": 25,
        "type": "percentage",
    }
    data.update(overrides)
    return OfferCreateSchema(**data)


# ── Create ─────────────────────────────────────────────────────


class TestCreateOffer:
    async def test_defaults(self, offer_service: OfferService, vehicle):
        offer = await offer_service.create_offer(offer_payload(vehicle.id))
        assert offer.isActive is True
        assert offer.usageCount == 0
        assert offer.validFrom == NOW
        assert offer.validUntil == NOW + timedelta(days=30)
        assert offer.isCurrentlyValid is True

    async def test_unknown_vehicle_persists_nothing(self, offer_service: OfferService, store):
        with pytest.raises(NotFoundError):
            await offer_service.create_offer(offer_payload("665f1c2e8b3a4d0012345678"))
        assert await store.list(Offer) == []

    async def test_validation_runs_before_vehicle_lookup(self, offer_service: OfferService):
        with pytest.raises(ValidationError):
            await offer_service.create_offer(offer_payload("missing", title=""))


# ── Update / toggle / delete ───────────────────────────────────


class TestMutations:
    async def test_toggle_flips(self, offer_service: OfferService, vehicle):
        offer = await offer_service.create_offer(offer_payload(vehicle.id))
        toggled = await offer_service.toggle_offer_active(offer.id)
        assert toggled.isActive is False
        assert toggled.isCurrentlyValid is False
        again = await offer_service.toggle_offer_active(offer.id)
        assert again.isActive is True

    async def test_update_to_unknown_vehicle(self, offer_service: OfferService, vehicle):
        offer = await offer_service.create_offer(offer_payload(vehicle.id))
        with pytest.raises(NotFoundError):
            await offer_service.update_offer(offer.id, OfferUpdateSchema(vehicleId="gone"))

    async def test_update_discount_checked_against_type(self, offer_service: OfferService, vehicle):
        offer = await offer_service.create_offer(offer_payload(vehicle.id))
        with pytest.raises(ValidationError):
            await offer_service.update_offer(offer.id, OfferUpdateSchema(discount=150))
        updated = await offer_service.update_offer(
            offer.id, OfferUpdateSchema(discount=150, type="fixed_amount")
        )
        assert updated.discount == 150

    async def test_type_change_rechecks_stored_discount(self, offer_service: OfferService, vehicle):
        offer = await offer_service.create_offer(offer_payload(
            vehicle.id, discount=5000, type="fixed_amount"
        ))
        with pytest.raises(ValidationError):
            await offer_service.update_offer(offer.id, OfferUpdateSchema(type="percentage"))

        stored = await offer_service.get_offer(offer.id)
        assert stored.type == "fixed_amount"
        views = await offer_service.list_offer_views()
        assert views[0].finalPrice == 40000.0

    async def test_type_change_with_fitting_discount(self, offer_service: OfferService, vehicle):
        offer = await offer_service.create_offer(offer_payload(
            vehicle.id, discount=50, type="fixed_amount"
        ))
        updated = await offer_service.update_offer(offer.id, OfferUpdateSchema(type="percentage"))
        assert updated.type == "percentage"
        assert updated.discount == 50

    async def test_null_valid_until_makes_offer_open_ended(self, offer_service: OfferService, vehicle):
        offer = await offer_service.create_offer(offer_payload(vehicle.id))
        updated = await offer_service.update_offer(offer.id, OfferUpdateSchema(validUntil=None))
        assert updated.validUntil is None
        assert updated.isCurrentlyValid is True
        assert updated.title == "Festive Sale"

    async def test_null_title_rejected(self, offer_service: OfferService, vehicle):
        offer = await offer_service.create_offer(offer_payload(vehicle.id))
        with pytest.raises(ValidationError):
            await offer_service.update_offer(offer.id, OfferUpdateSchema(title=None))
        assert (await offer_service.get_offer(offer.id)).title == "Festive Sale"

    async def test_delete_unknown(self, offer_service: OfferService):
        with pytest.raises(NotFoundError):
            await offer_service.delete_offer("nope")


# ── Listing ────────────────────────────────────────────────────


class TestListing:
    async def test_expired_offer_excluded_from_active(self, offer_service: OfferService, vehicle):
        live = await offer_service.create_offer(offer_payload(vehicle.id, title="Live"))
        await offer_service.create_offer(offer_payload(
            vehicle.id, title="Old", validUntil=NOW - timedelta(days=1)
        ))

        active = await offer_service.list_active_offers_for_vehicle(vehicle.id)
        assert [o.id for o in active] == [live.id]

        everything = await offer_service.list_offers()
        assert len(everything) == 2
        current = await offer_service.list_offers(active_only=True)
        assert [o.title for o in current] == ["Live"]

    async def test_views_include_pricing(self, offer_service: OfferService, vehicle):
        await offer_service.create_offer(offer_payload(vehicle.id))
        views = await offer_service.list_offer_views()
        assert len(views) == 1
        assert views[0].finalPrice == 33750.0
        assert views[0].savings == 11250.0
        assert views[0].timeRemaining == "30d 0h 0m left"

    async def test_high_discount_filter(self, offer_service: OfferService, vehicle):
        await offer_service.create_offer(offer_payload(vehicle.id, title="Big", discount=20))
        await offer_service.create_offer(offer_payload(vehicle.id, title="Small", discount=10))
        await offer_service.create_offer(offer_payload(
            vehicle.id, title="Flat", discount=5000, type="fixed_amount"
        ))
        views = await offer_service.list_offer_views(kind="high_discount")
        assert [v.offer.title for v in views] == ["Big"]


# ── Stats ──────────────────────────────────────────────────────


class TestStats:
    async def test_savings_skip_dangling_and_expired(self, offer_service: OfferService, vehicle_service, vehicle):
        await offer_service.create_offer(offer_payload(vehicle.id))
        await offer_service.create_offer(offer_payload(vehicle.id, validUntil=NOW - timedelta(days=1)))

        stats = await offer_service.offer_stats()
        assert stats.total == 2
        assert stats.currentlyValid == 1
        assert stats.expired == 1
        assert stats.totalSavings == 11250.0

        await vehicle_service.delete_vehicle(vehicle.id)
        stats = await offer_service.offer_stats()
        assert stats.totalSavings == 0.0
        assert stats.total == 2
