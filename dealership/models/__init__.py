"""
Domain models package.
Plain pydantic records handed between services and the record store.
"""
from dealership.models.vehicle import (
    Vehicle,
    VehicleCategory,
    FuelType,
    Inventory,
    InventoryStatus,
    ColorGallery,
    Specifications,
)
from dealership.models.offer import Offer, OfferType, OfferConditions
from dealership.models.customer import (
    Customer,
    Purchase,
    TestDrive,
    TestDriveStatus,
    Address,
    Preferences,
)
from dealership.models.inquiry import (
    Inquiry,
    InquiryType,
    InquiryStatus,
    InquiryPriority,
    InquiryResponse,
    ContactInfo,
)
from dealership.models.user import CurrentUser, UserRole

__all__ = [
    "Vehicle",
    "VehicleCategory",
    "FuelType",
    "Inventory",
    "InventoryStatus",
    "ColorGallery",
    "Specifications",
    "Offer",
    "OfferType",
    "OfferConditions",
    "Customer",
    "Purchase",
    "TestDrive",
    "TestDriveStatus",
    "Address",
    "Preferences",
    "Inquiry",
    "InquiryType",
    "InquiryStatus",
    "InquiryPriority",
    "InquiryResponse",
    "ContactInfo",
    "CurrentUser",
    "UserRole",
]
