"""
Offer Service - Business Logic Layer

Orchestrates offer operations by coordinating between:
- Validation rules
- Pricing rules (validity, discounts, usage remaining)
- Record store (offers and the vehicles they reference)
- Catalog service (offer views for the storefront)
"""
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from dealership.core.config import settings
from dealership.core.exceptions import NotFoundError
from dealership.domain.pricing import has_usage_remaining, is_offer_currently_valid, to_decimal, quantize
from dealership.domain.validation import validate_offer_create, validate_offer_update
from dealership.models.offer import Offer, OfferConditions
from dealership.models.vehicle import Vehicle
from dealership.repositories import RecordNotFound, RecordStore
from dealership.schemas.offer import (
    OfferCreateSchema,
    OfferResponseSchema,
    OfferStatsSchema,
    OfferUpdateSchema,
    OfferViewSchema,
)
from dealership.services.catalog_service import (
    OfferView,
    build_offer_view,
    enrich_offers_with_vehicles,
    filter_offer_views,
)
from dealership.services.vehicle_service import vehicle_to_response
from dealership.utils.casing import camel_keys, patch_changes, snake_keys
from dealership.utils.time_utils import as_utc, utcnow

logger = logging.getLogger(__name__)

# Clearing valid_until makes the offer open-ended
NULLABLE_FIELDS = frozenset({"valid_from", "valid_until", "max_usage"})

DEFAULT_LIST_LIMIT = 100


def offer_to_response(offer: Offer, now: datetime) -> OfferResponseSchema:
    data = camel_keys(offer.model_dump())
    data["isCurrentlyValid"] = is_offer_currently_valid(offer, now)
    data["hasUsageRemaining"] = has_usage_remaining(offer)
    return OfferResponseSchema.model_validate(data)


def view_to_response(view: OfferView, now: datetime) -> OfferViewSchema:
    pricing = view.pricing
    return OfferViewSchema(
        offer=offer_to_response(view.offer, now),
        vehicle=vehicle_to_response(view.vehicle) if view.vehicle is not None else None,
        originalPrice=float(pricing.original_price) if pricing else None,
        finalPrice=float(pricing.final_price) if pricing else None,
        savings=float(pricing.savings) if pricing else None,
        timeRemaining=view.time_remaining,
        isExpiringSoon=view.is_expiring_soon,
        primaryImage=view.primary_image,
    )


def _newest_first(offers: List[Offer]) -> List[Offer]:
    return sorted(offers, key=lambda o: as_utc(o.created_at), reverse=True)


class OfferService:
    """Service for offer business logic (Async)"""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    async def _require(self, offer_id: str) -> Offer:
        offer = await self.store.get(Offer, offer_id)
        if offer is None:
            raise NotFoundError("Offer not found")
        return offer

    async def _require_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = await self.store.get(Vehicle, vehicle_id)
        if vehicle is None:
            raise NotFoundError("Vehicle not found")
        return vehicle

    async def create_offer(self, data: OfferCreateSchema) -> OfferResponseSchema:
        """
        Create an offer for an existing vehicle.

        Defaults: validFrom now, validUntil now + DEFAULT_OFFER_DURATION_DAYS,
        isActive true, usageCount 0.

        Raises:
            ValidationError: Missing/invalid fields (checked first)
            NotFoundError: vehicleId does not resolve; nothing is persisted
        """
        validate_offer_create(data)
        vehicle = await self._require_vehicle(data.vehicleId)

        now = self.clock()
        conditions = OfferConditions(**snake_keys(data.conditions.model_dump())) if data.conditions else OfferConditions()
        max_usage = data.maxUsage if data.maxUsage is not None else conditions.max_usage

        offer = Offer(
            vehicle_id=vehicle.id,
            title=data.title.strip(),
            description=data.description.strip(),
            discount=data.discount,
            type=data.type,
            valid_from=data.validFrom or now,
            valid_until=data.validUntil or now + timedelta(days=settings.DEFAULT_OFFER_DURATION_DAYS),
            conditions=conditions,
            is_active=True if data.isActive is None else data.isActive,
            usage_count=0,
            max_usage=max_usage,
            created_at=now,
            updated_at=now,
        )
        offer = await self.store.create(offer)

        logger.info(f"Created offer {offer.id} '{offer.title}' for vehicle {vehicle.id}")
        return offer_to_response(offer, now)

    async def get_offer(self, offer_id: str) -> OfferResponseSchema:
        return offer_to_response(await self._require(offer_id), self.clock())

    async def list_offers(self, active_only: bool = False, limit: Optional[int] = DEFAULT_LIST_LIMIT) -> List[OfferResponseSchema]:
        """
        Offers, newest first.

        Args:
            active_only: Keep only currently valid offers
            limit: Maximum number returned (None for all)
        """
        now = self.clock()
        offers = await self.store.list(Offer)
        if active_only:
            offers = [o for o in offers if is_offer_currently_valid(o, now)]
        offers = _newest_first(offers)
        if limit is not None:
            offers = offers[:limit]
        return [offer_to_response(o, now) for o in offers]

    async def list_active_offers_for_vehicle(self, vehicle_id: str) -> List[OfferResponseSchema]:
        """Currently valid offers for one vehicle, in store order."""
        now = self.clock()
        offers = await self.store.list(Offer, {"vehicle_id": vehicle_id})
        return [offer_to_response(o, now) for o in offers if is_offer_currently_valid(o, now)]

    async def _current_views(self, now: datetime) -> List[OfferView]:
        offers = [o for o in await self.store.list(Offer) if is_offer_currently_valid(o, now)]
        vehicles = await self.store.list(Vehicle)
        pairs = enrich_offers_with_vehicles(_newest_first(offers), vehicles)
        return [build_offer_view(offer, vehicle, now) for offer, vehicle in pairs]

    async def list_offer_views(self, kind: str = "all", limit: Optional[int] = None) -> List[OfferViewSchema]:
        """
        Currently valid offers joined to their vehicles, newest first.

        Args:
            kind: all, expiring or high_discount
            limit: Maximum number returned (None for all)
        """
        now = self.clock()
        views = filter_offer_views(await self._current_views(now), kind, now)
        if limit is not None:
            views = views[:limit]
        return [view_to_response(v, now) for v in views]

    async def update_offer(self, offer_id: str, data: OfferUpdateSchema) -> OfferResponseSchema:
        """
        Partial update. A new type is checked against the discount the
        offer will end up with, sent or stored. validFrom, validUntil and
        maxUsage can be cleared with null.

        Raises:
            ValidationError: Invalid field value
            NotFoundError: Unknown offer, or a new vehicleId that does not resolve
        """
        existing = await self._require(offer_id)
        sent = data.model_dump(exclude_unset=True)
        effective_type = sent.get("type") or existing.type
        validate_offer_update(sent, effective_type, existing.discount)

        changes = patch_changes(sent, NULLABLE_FIELDS)
        if "vehicle_id" in changes and changes["vehicle_id"] != existing.vehicle_id:
            await self._require_vehicle(changes["vehicle_id"])

        try:
            offer = await self.store.update(Offer, offer_id, changes)
        except RecordNotFound:
            raise NotFoundError("Offer not found")

        logger.info(f"Updated offer {offer_id}: {', '.join(sorted(changes)) or 'no changes'}")
        return offer_to_response(offer, self.clock())

    async def toggle_offer_active(self, offer_id: str) -> OfferResponseSchema:
        offer = await self._require(offer_id)
        try:
            offer = await self.store.update(Offer, offer_id, {"is_active": not offer.is_active})
        except RecordNotFound:
            raise NotFoundError("Offer not found")

        logger.info(f"Offer {offer_id} {'activated' if offer.is_active else 'deactivated'}")
        return offer_to_response(offer, self.clock())

    async def delete_offer(self, offer_id: str) -> None:
        try:
            await self.store.delete(Offer, offer_id)
        except RecordNotFound:
            raise NotFoundError("Offer not found")
        logger.info(f"Deleted offer {offer_id}")

    async def offer_stats(self) -> OfferStatsSchema:
        """
        Offer counts and savings.

        totalSavings sums the savings of currently valid offers whose
        vehicle still exists.
        """
        now = self.clock()
        offers = await self.store.list(Offer)
        vehicles = await self.store.list(Vehicle)

        total_discount = sum((to_decimal(o.discount) for o in offers), to_decimal(0))
        average_discount = total_discount / len(offers) if offers else to_decimal(0)

        current = [o for o in offers if is_offer_currently_valid(o, now)]
        total_savings = sum(
            (
                build_offer_view(offer, vehicle, now).savings
                for offer, vehicle in enrich_offers_with_vehicles(current, vehicles)
                if vehicle is not None
            ),
            to_decimal(0),
        )

        return OfferStatsSchema(
            total=len(offers),
            active=sum(1 for o in offers if o.is_active),
            currentlyValid=len(current),
            expired=sum(
                1 for o in offers
                if o.valid_until is not None and as_utc(o.valid_until) <= as_utc(now)
            ),
            averageDiscount=float(quantize(average_discount)),
            totalSavings=float(quantize(total_savings)),
        )
