"""
Pricing Rules - offer validity and discount arithmetic

Pure functions, no I/O:
- Offer validity window (active flag + expiry)
- Discount application per offer type
- Final price / savings breakdown
- Usage-cap check (advisory, nothing enforces it)

Uses Decimal for precision to avoid floating-point errors.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

from dealership.models.offer import Offer, OfferType
from dealership.utils.time_utils import as_utc

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    """Convert int/float/str/Decimal to Decimal via its string form."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class PercentageDiscount:
    """Reduce the price by `rate` percent."""
    rate: Decimal

    def apply(self, price: Decimal) -> Decimal:
        return price * (Decimal("1") - self.rate / HUNDRED)


@dataclass(frozen=True)
class FixedAmountDiscount:
    """Subtract `amount` from the price, never going below zero."""
    amount: Decimal

    def apply(self, price: Decimal) -> Decimal:
        return max(price - self.amount, ZERO)


@dataclass(frozen=True)
class BuyOneGetOne:
    """Promotional tag only. Has no price formula."""


Discount = Union[PercentageDiscount, FixedAmountDiscount, BuyOneGetOne]
PRICED_DISCOUNTS = (PercentageDiscount, FixedAmountDiscount)


@dataclass(frozen=True)
class PriceBreakdown:
    """Display-ready pricing for one vehicle under (at most) one offer."""
    original_price: Decimal
    final_price: Decimal
    savings: Decimal
    offer_id: Optional[str] = None

    @property
    def has_discount(self) -> bool:
        return self.savings > ZERO


def discount_for(offer: Offer) -> Discount:
    """
    Map an offer record onto its discount variant.

    Args:
        offer: Offer record

    Returns:
        PercentageDiscount, FixedAmountDiscount or BuyOneGetOne
    """
    if offer.type == OfferType.PERCENTAGE:
        return PercentageDiscount(to_decimal(offer.discount))
    if offer.type == OfferType.FIXED_AMOUNT:
        return FixedAmountDiscount(to_decimal(offer.discount))
    return BuyOneGetOne()


def is_offer_currently_valid(offer: Offer, now: datetime) -> bool:
    """
    An offer is valid iff it is active and not past its expiry.

    valid_from is deliberately not consulted. An open-ended offer
    (no valid_until) stays valid until it is deactivated.
    """
    if not offer.is_active:
        return False
    if offer.valid_until is None:
        return True
    return as_utc(offer.valid_until) > as_utc(now)


def compute_final_price(vehicle_price, offer: Optional[Offer], now: datetime) -> Decimal:
    """
    Calculate the price after applying an offer.

    Formula:
        percentage:   price x (1 - discount/100)
        fixed_amount: max(price - discount, 0)
        buy_one_get_one / no valid offer: price unchanged

    Args:
        vehicle_price: List price of the vehicle
        offer: Offer to apply, or None
        now: Reference time for the validity check

    Returns:
        Final price rounded to cents
    """
    price = to_decimal(vehicle_price)
    if offer is None or not is_offer_currently_valid(offer, now):
        return quantize(price)

    discount = discount_for(offer)
    if isinstance(discount, PRICED_DISCOUNTS):
        return quantize(discount.apply(price))
    return quantize(price)


def price_breakdown(vehicle_price, offer: Optional[Offer], now: datetime) -> PriceBreakdown:
    """Final price plus savings (price - final price)."""
    original = quantize(to_decimal(vehicle_price))
    final = compute_final_price(vehicle_price, offer, now)
    applied = offer is not None and is_offer_currently_valid(offer, now)
    return PriceBreakdown(
        original_price=original,
        final_price=final,
        savings=original - final,
        offer_id=offer.id if applied else None,
    )


def find_offer_for_vehicle(
    offers: Iterable[Offer],
    vehicle_id: str,
    now: datetime
) -> Optional[Offer]:
    """
    Return the first currently valid offer for a vehicle, in scan order.

    First match wins; this is not a best-discount search.
    """
    for offer in offers:
        if offer.vehicle_id == vehicle_id and is_offer_currently_valid(offer, now):
            return offer
    return None


def has_usage_remaining(offer: Offer) -> bool:
    """True unless max_usage is set and usage_count has reached it."""
    if offer.max_usage is None:
        return True
    return offer.usage_count < offer.max_usage
