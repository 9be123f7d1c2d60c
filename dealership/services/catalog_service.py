"""
Catalog Service - read-side aggregation

Recombines stored records for presentation:
- Offer <-> vehicle joins (dangling references resolve to None)
- Display views (final price, savings, time remaining, primary image)
- Featured selection, sorting and pagination

Nothing here writes to the record store.
"""
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

from dealership.core.config import settings
from dealership.core.exceptions import ValidationError
from dealership.domain.pricing import PriceBreakdown, is_offer_currently_valid, price_breakdown, to_decimal
from dealership.models.offer import Offer, OfferType
from dealership.models.vehicle import Vehicle
from dealership.utils.casing import to_snake
from dealership.utils.time_utils import as_utc

logger = logging.getLogger(__name__)

T = TypeVar("T")

OFFER_VIEW_FILTERS = ("all", "expiring", "high_discount")

SORTABLE_VEHICLE_FIELDS = frozenset({
    "name", "brand", "price", "year", "category", "fuel_type", "description",
    "charging_time", "range", "battery", "top_speed", "is_active", "featured",
    "created_at", "updated_at",
})


# ============================================================================
# Offer <-> vehicle joins
# ============================================================================

def enrich_offers_with_vehicles(
    offers: Iterable[Offer],
    vehicles: Iterable[Vehicle]
) -> List[Tuple[Offer, Optional[Vehicle]]]:
    """
    Pair every offer with the vehicle it references.

    Offers survive vehicle deletion, so a missing vehicle is paired with
    None instead of raising.
    """
    by_id: Dict[str, Vehicle] = {v.id: v for v in vehicles if v.id}
    pairs = []
    for offer in offers:
        vehicle = by_id.get(offer.vehicle_id)
        if vehicle is None:
            logger.warning(f"Offer {offer.id} references missing vehicle {offer.vehicle_id}")
        pairs.append((offer, vehicle))
    return pairs


@dataclass
class OfferView:
    """An offer joined to its vehicle, with display pricing."""
    offer: Offer
    vehicle: Optional[Vehicle]
    pricing: Optional[PriceBreakdown]
    time_remaining: Optional[str]
    is_expiring_soon: bool
    primary_image: Optional[str]

    @property
    def savings(self) -> Decimal:
        return self.pricing.savings if self.pricing else Decimal("0")


def describe_time_remaining(valid_until: Optional[datetime], now: datetime) -> Optional[str]:
    """
    Human countdown to expiry.

    Returns "{d}d {h}h {m}m left", "{h}h {m}m left", "{m}m left" or
    "Expired"; None for an open-ended offer.
    """
    if valid_until is None:
        return None
    remaining = as_utc(valid_until) - as_utc(now)
    if remaining.total_seconds() <= 0:
        return "Expired"

    days = remaining.days
    hours, rest = divmod(remaining.seconds, 3600)
    minutes = rest // 60
    if days > 0:
        return f"{days}d {hours}h {minutes}m left"
    if hours > 0:
        return f"{hours}h {minutes}m left"
    return f"{minutes}m left"


def is_expiring_within(offer: Offer, now: datetime, days: int) -> bool:
    """validUntil is set and falls within the next `days` days."""
    if offer.valid_until is None:
        return False
    return as_utc(offer.valid_until) <= as_utc(now) + timedelta(days=days)


def primary_image_for(vehicle: Optional[Vehicle]) -> Optional[str]:
    """First colour gallery's primary (or first) image, else the first generic image."""
    if vehicle is None:
        return None
    if vehicle.color_images:
        gallery = vehicle.color_images[0]
        if gallery.primary_image:
            return gallery.primary_image
        if gallery.images:
            return gallery.images[0]
    if vehicle.images:
        return vehicle.images[0]
    return None


def build_offer_view(
    offer: Offer,
    vehicle: Optional[Vehicle],
    now: datetime,
    expiring_soon_days: Optional[int] = None
) -> OfferView:
    """
    Build the display view of one offer.

    Pricing is only computed when the vehicle resolved.
    """
    days = settings.EXPIRING_SOON_DAYS if expiring_soon_days is None else expiring_soon_days
    pricing = price_breakdown(vehicle.price, offer, now) if vehicle is not None else None
    expiring = (
        offer.valid_until is not None
        and as_utc(offer.valid_until) > as_utc(now)
        and is_expiring_within(offer, now, days)
    )
    return OfferView(
        offer=offer,
        vehicle=vehicle,
        pricing=pricing,
        time_remaining=describe_time_remaining(offer.valid_until, now),
        is_expiring_soon=expiring,
        primary_image=primary_image_for(vehicle),
    )


def filter_offer_views(
    views: Iterable[OfferView],
    kind: str,
    now: datetime,
    high_discount_threshold: Optional[float] = None,
    expiring_soon_days: Optional[int] = None
) -> List[OfferView]:
    """
    Storefront offer filters.

    all:           every view
    expiring:      validUntil within the expiring-soon window
    high_discount: percentage offers at or above the threshold
    """
    if kind not in OFFER_VIEW_FILTERS:
        raise ValidationError.from_problems([{
            "param": "filter",
            "msg": f"Unknown offer filter '{kind}'. Allowed: {', '.join(OFFER_VIEW_FILTERS)}",
        }])

    threshold = settings.HIGH_DISCOUNT_THRESHOLD if high_discount_threshold is None else high_discount_threshold
    days = settings.EXPIRING_SOON_DAYS if expiring_soon_days is None else expiring_soon_days

    views = list(views)
    if kind == "expiring":
        return [v for v in views if is_expiring_within(v.offer, now, days)]
    if kind == "high_discount":
        return [
            v for v in views
            if v.offer.type == OfferType.PERCENTAGE
            and to_decimal(v.offer.discount) >= to_decimal(threshold)
        ]
    return views


# ============================================================================
# Featured selection
# ============================================================================

def select_featured_vehicles(vehicles: Iterable[Vehicle]) -> List[Vehicle]:
    return [v for v in vehicles if v.featured and v.is_active]


def select_featured_offers(
    views: Iterable[OfferView],
    now: datetime,
    limit: Optional[int] = None
) -> List[OfferView]:
    """Currently valid offers whose vehicle still exists, in input order."""
    featured = [
        v for v in views
        if v.vehicle is not None and is_offer_currently_valid(v.offer, now)
    ]
    return featured if limit is None else featured[:limit]


# ============================================================================
# Sorting and pagination
# ============================================================================

def _sort_value(value: Any) -> Any:
    if isinstance(value, str):
        return value.casefold()
    if isinstance(value, datetime):
        return as_utc(value)
    return value


def sort_vehicles(vehicles: Iterable[Vehicle], by: str, direction: str = "asc") -> List[Vehicle]:
    """
    Stable sort on one vehicle attribute.

    Strings compare case-insensitively; vehicles missing the attribute
    always come last, whatever the direction.

    Args:
        by: Attribute name, camelCase (as sent by clients) or snake_case
        direction: "asc" or "desc"
    """
    if direction not in ("asc", "desc"):
        raise ValidationError.from_problems([{"param": "sortOrder", "msg": "sortOrder must be asc or desc"}])

    attribute = to_snake(by)
    if attribute not in SORTABLE_VEHICLE_FIELDS:
        raise ValidationError.from_problems([{"param": "sortBy", "msg": f"Cannot sort by '{by}'"}])

    present, missing = [], []
    for vehicle in vehicles:
        value = getattr(vehicle, attribute)
        (missing if value is None else present).append(vehicle)

    # reverse=True keeps equal elements in their original order
    present.sort(key=lambda v: _sort_value(getattr(v, attribute)), reverse=direction == "desc")
    return present + missing


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    page: int = 1
    page_size: int = 10
    total: int = 0
    total_pages: int = 0

    @property
    def has_next(self) -> bool:
        return self.page * self.page_size < self.total

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """
    Slice one 1-indexed page.

    page is clamped to [1, total_pages] (1 when there are no items).
    """
    if page_size < 1:
        raise ValidationError.from_problems([{"param": "limit", "msg": "limit must be at least 1"}])

    total = len(items)
    total_pages = math.ceil(total / page_size)
    page = min(max(page, 1), max(total_pages, 1))
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages,
    )
