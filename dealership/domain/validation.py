"""
Input validation rules.

Each validator collects every problem it finds and raises a single
ValidationError listing them ({"param", "msg"} entries, camelCase params as
sent by the client). Validators only look at their input; none of them
touches the record store.
"""
import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from dealership.core.exceptions import ValidationError
from dealership.models.offer import OfferType
from dealership.schemas.customer import CustomerCreateSchema, PurchaseCreateSchema
from dealership.schemas.inquiry import InquiryCreateSchema
from dealership.schemas.offer import OfferCreateSchema
from dealership.schemas.vehicle import InventorySchema, VehicleCreateSchema

MIN_VEHICLE_YEAR = 1900
MAX_YEARS_AHEAD = 2
MAX_PERCENTAGE = 100.0


class _Problems:
    def __init__(self):
        self.items: List[Dict[str, Any]] = []

    def add(self, param: str, msg: str):
        self.items.append({"param": param, "msg": msg})

    def raise_if_any(self):
        if self.items:
            raise ValidationError.from_problems(self.items)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def max_vehicle_year(now: datetime) -> int:
    return now.year + MAX_YEARS_AHEAD


# ============================================================================
# Vehicles
# ============================================================================

def _check_vehicle_fields(fields: Dict[str, Any], problems: _Problems, now: datetime):
    """Check whichever of name/brand/price/year are present in `fields`."""
    if "name" in fields and _is_blank(fields["name"]):
        problems.add("name", "Vehicle name cannot be empty")
    if "brand" in fields and _is_blank(fields["brand"]):
        problems.add("brand", "Brand cannot be empty")
    if "price" in fields:
        price = fields["price"]
        if not _is_number(price):
            problems.add("price", "Price must be a number")
        elif price < 0:
            problems.add("price", "Price cannot be negative")
    if "year" in fields:
        year = fields["year"]
        upper = max_vehicle_year(now)
        if isinstance(year, bool) or not isinstance(year, int):
            problems.add("year", "Year must be an integer")
        elif not MIN_VEHICLE_YEAR <= year <= upper:
            problems.add("year", f"Year must be between {MIN_VEHICLE_YEAR} and {upper}")
    for index, gallery in enumerate(fields.get("colorImages") or []):
        color = gallery.get("color") if isinstance(gallery, dict) else gallery.color
        if _is_blank(color):
            problems.add(f"colorImages[{index}].color", "Colour name is required")


def _check_inventory(inventory: InventorySchema, problems: _Problems, prefix: str = ""):
    if inventory.stock < 0:
        problems.add(f"{prefix}stock", "Stock cannot be negative")
    if inventory.reserved < 0:
        problems.add(f"{prefix}reserved", "Reserved cannot be negative")


def validate_vehicle_create(data: VehicleCreateSchema, now: datetime) -> None:
    problems = _Problems()
    if data.name is None:
        problems.add("name", "Vehicle name is required")
    if data.brand is None:
        problems.add("brand", "Brand is required")
    if data.price is None:
        problems.add("price", "Price is required")
    if data.year is None:
        problems.add("year", "Year is required")

    present = {k: v for k, v in data.model_dump().items() if v is not None}
    _check_vehicle_fields(present, problems, now)
    if data.inventory is not None:
        _check_inventory(data.inventory, problems, prefix="inventory.")
    problems.raise_if_any()


def validate_vehicle_update(fields: Dict[str, Any], now: datetime) -> None:
    """fields: only the keys the caller actually sent."""
    problems = _Problems()
    for required in ("name", "brand", "price", "year"):
        if required in fields and fields[required] is None:
            problems.add(required, f"{required} cannot be null")
    _check_vehicle_fields({k: v for k, v in fields.items() if v is not None}, problems, now)
    problems.raise_if_any()


def validate_inventory(inventory: InventorySchema) -> None:
    problems = _Problems()
    _check_inventory(inventory, problems)
    problems.raise_if_any()


# ============================================================================
# Offers
# ============================================================================

def _check_discount(discount: Any, offer_type: OfferType, problems: _Problems):
    if not _is_number(discount):
        problems.add("discount", "Discount must be a number")
        return
    if discount < 0:
        problems.add("discount", "Discount cannot be negative")
    elif offer_type == OfferType.PERCENTAGE and discount > MAX_PERCENTAGE:
        problems.add("discount", "Percentage discount cannot exceed 100")


def validate_offer_create(data: OfferCreateSchema) -> None:
    problems = _Problems()
    if _is_blank(data.vehicleId):
        problems.add("vehicleId", "Vehicle ID is required")
    if _is_blank(data.title):
        problems.add("title", "Offer title is required")
    if _is_blank(data.description):
        problems.add("description", "Description is required")
    if data.discount is None:
        problems.add("discount", "Discount is required")
    else:
        _check_discount(data.discount, data.type, problems)
    problems.raise_if_any()


def validate_offer_update(
    fields: Dict[str, Any],
    effective_type: OfferType,
    current_discount: Optional[float] = None
) -> None:
    """
    fields: only the keys the caller sent.
    effective_type: the type the offer will have after the update.
    current_discount: the stored discount, re-checked when only the type changes.
    """
    problems = _Problems()
    if "title" in fields and _is_blank(fields["title"]):
        problems.add("title", "Offer title cannot be empty")
    if "description" in fields and _is_blank(fields["description"]):
        problems.add("description", "Description cannot be empty")
    if "vehicleId" in fields and _is_blank(fields["vehicleId"]):
        problems.add("vehicleId", "Vehicle ID cannot be empty")
    if "discount" in fields:
        _check_discount(fields["discount"], effective_type, problems)
    elif "type" in fields and current_discount is not None:
        _check_discount(current_discount, effective_type, problems)
    problems.raise_if_any()


# ============================================================================
# Customers
# ============================================================================

def validate_customer_create(data: CustomerCreateSchema) -> None:
    problems = _Problems()
    if _is_blank(data.firstName):
        problems.add("firstName", "First name is required")
    if _is_blank(data.lastName):
        problems.add("lastName", "Last name is required")
    if data.email is None:
        problems.add("email", "Valid email is required")
    if _is_blank(data.phone):
        problems.add("phone", "Phone number is required")
    problems.raise_if_any()


def validate_customer_update(fields: Dict[str, Any]) -> None:
    problems = _Problems()
    for param, label in (("firstName", "First name"), ("lastName", "Last name"), ("email", "Email")):
        if param in fields and _is_blank(fields[param]):
            problems.add(param, f"{label} cannot be empty")
    problems.raise_if_any()


def validate_purchase(data: PurchaseCreateSchema) -> None:
    problems = _Problems()
    if _is_blank(data.vehicleId):
        problems.add("vehicleId", "Vehicle ID is required")
    if not _is_number(data.amount):
        problems.add("amount", "Amount must be a number")
    elif data.amount < 0:
        problems.add("amount", "Amount cannot be negative")
    problems.raise_if_any()


# ============================================================================
# Inquiries
# ============================================================================

def validate_inquiry_create(data: InquiryCreateSchema) -> None:
    problems = _Problems()
    if _is_blank(data.subject):
        problems.add("subject", "Subject is required")
    if _is_blank(data.message):
        problems.add("message", "Message is required")
    if _is_blank(data.customerId):
        contact = data.contactInfo
        if contact is None or _is_blank(contact.name):
            problems.add("contactInfo.name", "Name is required")
        if contact is None or _is_blank(contact.email) or "@" not in contact.email:
            problems.add("contactInfo.email", "Valid email is required")
    problems.raise_if_any()


def validate_inquiry_update(fields: Dict[str, Any]) -> None:
    problems = _Problems()
    for param in ("subject", "message"):
        if param in fields and _is_blank(fields[param]):
            problems.add(param, f"{param.capitalize()} cannot be empty")
    problems.raise_if_any()


def validate_response_message(message: Optional[str]) -> None:
    if _is_blank(message):
        raise ValidationError.from_problems([{"param": "message", "msg": "Response message is required"}])
