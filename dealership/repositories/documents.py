"""
Beanie documents for the MongoDB record store.

Each document carries the persisted fields of its domain model plus
Beanie's ObjectId identity. Only imported once the Mongo backend is chosen.
"""
from beanie import Document

from dealership.models.customer import CustomerFields
from dealership.models.inquiry import InquiryFields
from dealership.models.offer import OfferFields
from dealership.models.vehicle import VehicleFields


class VehicleDocument(Document, VehicleFields):
    class Settings:
        name = "vehicles"
        indexes = ["category", "featured", "is_active", "price"]


class OfferDocument(Document, OfferFields):
    class Settings:
        name = "offers"
        indexes = ["vehicle_id", "is_active", "valid_until"]


class CustomerDocument(Document, CustomerFields):
    class Settings:
        name = "customers"
        indexes = ["email", "phone", "is_active"]


class InquiryDocument(Document, InquiryFields):
    class Settings:
        name = "inquiries"
        indexes = ["status", "priority", "vehicle_id", "customer_id"]


DOCUMENT_MODELS = [
    VehicleDocument,
    OfferDocument,
    CustomerDocument,
    InquiryDocument,
]
