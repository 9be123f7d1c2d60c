"""Unit tests for the read-side catalog helpers."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest

from dealership.core.exceptions import ValidationError
from dealership.models.offer import Offer, OfferType
from dealership.models.vehicle import ColorGallery, Vehicle
from dealership.services.catalog_service import (
    build_offer_view,
    describe_time_remaining,
    enrich_offers_with_vehicles,
    filter_offer_views,
    paginate,
    primary_image_for,
    select_featured_offers,
    select_featured_vehicles,
    sort_vehicles,
)

from conftest import NOW


def make_vehicle(vehicle_id: str = "v1", **overrides) -> Vehicle:
    data = {"id": vehicle_id, "name": "Model 3", "brand": "Tesla", "price": 45000, "year": 2024}
    data.update(overrides)
    return Vehicle(**data)


def make_offer(offer_id: str = "o1", vehicle_id: str = "v1", **overrides) -> Offer:
    data = {
        "id": offer_id,
        "vehicle_id": vehicle_id,
        "title": "Sale",
        "discount": 25,
        "valid_until": NOW + timedelta(days=30),
    }
    data.update(overrides)
    return Offer(**data)


# ── Pagination ─────────────────────────────────────────────────


class TestPaginate:
    def test_empty_is_page_one(self):
        page = paginate([], 3, 10)
        assert (page.page, page.total, page.total_pages) == (1, 0, 0)
        assert page.items == []
        assert not page.has_next and not page.has_prev

    def test_middle_page(self):
        page = paginate(list(range(25)), 2, 10)
        assert page.items == list(range(10, 20))
        assert page.has_next and page.has_prev
        assert page.total_pages == 3

    def test_out_of_range_pages_clamped(self):
        assert paginate(list(range(25)), 0, 10).page == 1
        last = paginate(list(range(25)), 99, 10)
        assert last.page == 3
        assert last.items == list(range(20, 25))
        assert not last.has_next

    def test_page_size_must_be_positive(self):
        with pytest.raises(ValidationError):
            paginate([1, 2], 1, 0)

    @pytest.mark.parametrize("size", [0, 1, 9, 10, 11, 25])
    @pytest.mark.parametrize("page_size", [1, 3, 10])
    def test_pages_concatenate_to_whole_list(self, size, page_size):
        items = list(range(size))
        first = paginate(items, 1, page_size)
        joined = []
        for number in range(1, max(first.total_pages, 1) + 1):
            page = paginate(items, number, page_size)
            assert page.page == number
            assert page.total == size
            assert page.has_next == (number * page_size < size)
            assert page.has_prev == (number > 1)
            joined.extend(page.items)
        assert joined == items


# ── Sorting ────────────────────────────────────────────────────


class TestSortVehicles:
    def test_missing_values_last_in_both_directions(self):
        vehicles = [
            make_vehicle("a", range="300 km"),
            make_vehicle("b"),
            make_vehicle("c", range="150 km"),
        ]
        assert [v.id for v in sort_vehicles(vehicles, "range", "asc")] == ["c", "a", "b"]
        assert [v.id for v in sort_vehicles(vehicles, "range", "desc")] == ["a", "c", "b"]

    def test_stable_for_ties(self):
        vehicles = [make_vehicle(str(i), price=100) for i in range(4)]
        assert [v.id for v in sort_vehicles(vehicles, "price", "desc")] == ["0", "1", "2", "3"]

    def test_accepts_camel_case_names(self):
        vehicles = [make_vehicle("a", top_speed="200"), make_vehicle("b", top_speed="100")]
        assert [v.id for v in sort_vehicles(vehicles, "topSpeed")] == ["b", "a"]

    def test_rejects_unknown_field(self):
        with pytest.raises(ValidationError):
            sort_vehicles([make_vehicle()], "inventory")

    def test_rejects_unknown_direction(self):
        with pytest.raises(ValidationError):
            sort_vehicles([make_vehicle()], "price", "sideways")


# ── Offer joins and views ──────────────────────────────────────


class TestOfferViews:
    def test_dangling_vehicle_pairs_with_none(self):
        pairs = enrich_offers_with_vehicles([make_offer(vehicle_id="gone")], [make_vehicle()])
        assert pairs[0][1] is None

    def test_view_without_vehicle_has_no_pricing(self):
        view = build_offer_view(make_offer(vehicle_id="gone"), None, NOW)
        assert view.pricing is None
        assert view.savings == Decimal("0")
        assert view.primary_image is None

    def test_view_pricing(self):
        view = build_offer_view(make_offer(), make_vehicle(), NOW)
        assert view.pricing.final_price == Decimal("33750.00")
        assert view.savings == Decimal("11250.00")
        assert view.is_expiring_soon is False

    def test_expiring_soon_window(self):
        soon = build_offer_view(make_offer(valid_until=NOW + timedelta(days=3)), make_vehicle(), NOW)
        gone = build_offer_view(make_offer(valid_until=NOW - timedelta(days=1)), make_vehicle(), NOW)
        assert soon.is_expiring_soon is True
        assert gone.is_expiring_soon is False

    @pytest.mark.parametrize("delta, expected", [
        (timedelta(days=2, hours=3, minutes=4), "2d 3h 4m left"),
        (timedelta(hours=5, minutes=1), "5h 1m left"),
        (timedelta(minutes=9, seconds=30), "9m left"),
        (timedelta(0), "Expired"),
    ])
    def test_time_remaining(self, delta, expected):
        assert describe_time_remaining(NOW + delta, NOW) == expected

    def test_open_ended_has_no_countdown(self):
        assert describe_time_remaining(None, NOW) is None

    def test_filters(self):
        views = [
            build_offer_view(make_offer("big", discount=30), make_vehicle(), NOW),
            build_offer_view(make_offer("soon", discount=5, valid_until=NOW + timedelta(days=2)), make_vehicle(), NOW),
            build_offer_view(make_offer("flat", discount=9000, type=OfferType.FIXED_AMOUNT), make_vehicle(), NOW),
        ]
        assert [v.offer.id for v in filter_offer_views(views, "high_discount", NOW)] == ["big"]
        assert [v.offer.id for v in filter_offer_views(views, "expiring", NOW)] == ["soon"]
        assert len(filter_offer_views(views, "all", NOW)) == 3
        with pytest.raises(ValidationError):
            filter_offer_views(views, "cheapest", NOW)


# ── Images and featured selection ──────────────────────────────


class TestSelection:
    def test_primary_image_prefers_gallery_primary(self):
        vehicle = make_vehicle(
            images=["generic.jpg"],
            color_images=[ColorGallery(color="Red", images=["r1.jpg", "r2.jpg"], primary_image="r2.jpg")],
        )
        assert primary_image_for(vehicle) == "r2.jpg"

    def test_primary_image_falls_back(self):
        gallery_only = make_vehicle(color_images=[ColorGallery(color="Red", images=["r1.jpg"])])
        assert primary_image_for(gallery_only) == "r1.jpg"
        assert primary_image_for(make_vehicle(images=["generic.jpg"])) == "generic.jpg"
        assert primary_image_for(make_vehicle()) is None

    def test_featured_vehicles_must_be_active(self):
        vehicles = [
            make_vehicle("a", featured=True),
            make_vehicle("b", featured=True, is_active=False),
            make_vehicle("c"),
        ]
        assert [v.id for v in select_featured_vehicles(vehicles)] == ["a"]

    def test_featured_offers_skip_dangling_and_invalid(self):
        views = [
            build_offer_view(make_offer("ok"), make_vehicle(), NOW),
            build_offer_view(make_offer("dangling", vehicle_id="gone"), None, NOW),
            build_offer_view(make_offer("off", is_active=False), make_vehicle(), NOW),
            build_offer_view(make_offer("ok2"), make_vehicle(), NOW),
        ]
        assert [v.offer.id for v in select_featured_offers(views, NOW)] == ["ok", "ok2"]
        assert [v.offer.id for v in select_featured_offers(views, NOW, limit=1)] == ["ok"]
