"""
Demo catalog seeding.

Loads a handful of vehicles and one offer through the regular services
(so every validation rule applies). Skipped when the catalog already has
vehicles.
"""
import logging

from dealership.models.vehicle import Vehicle
from dealership.repositories import RecordStore
from dealership.schemas.offer import OfferCreateSchema
from dealership.schemas.vehicle import VehicleCreateSchema
from dealership.services.offer_service import OfferService
from dealership.services.vehicle_service import VehicleService

logger = logging.getLogger(__name__)

DEMO_VEHICLES = [
    {
        "name": "Model 3",
        "brand": "Tesla",
        "price": 45000,
        "year": 2024,
        "category": "car",
        "chargingTime": "30 minutes",
        "range": "358 miles",
        "battery": "75 kWh",
        "topSpeed": "140 mph",
        "colors": ["White", "Black"],
        "images": ["https://images.unsplash.com/photo-1560958089-b8a1929cea89?w=800"],
        "colorImages": [
            {
                "color": "White",
                "images": ["https://images.unsplash.com/photo-1560958089-b8a1929cea89?w=800"],
                "primaryImage": "https://images.unsplash.com/photo-1560958089-b8a1929cea89?w=800",
            }
        ],
        "specifications": {
            "acceleration": "0-60 mph in 3.1s",
            "warranty": "4 years/50,000 miles",
            "chargingPort": "Tesla Supercharger",
        },
        "inventory": {"stock": 15, "reserved": 3, "status": "available"},
        "tags": ["luxury", "premium"],
        "featured": True,
    },
    {
        "name": "SR/F",
        "brand": "Zero",
        "price": 18995,
        "year": 2024,
        "category": "motorcycle",
        "chargingTime": "2 hours",
        "range": "161 miles",
        "battery": "14.4 kWh",
        "topSpeed": "124 mph",
        "colors": ["Black", "Blue"],
        "images": ["https://images.unsplash.com/photo-1558618047-3c8c76ca7d13?w=800"],
        "inventory": {"stock": 8, "reserved": 1, "status": "available"},
        "tags": ["sport"],
        "featured": True,
    },
    {
        "name": "S1 Pro",
        "brand": "Ola",
        "price": 1800,
        "year": 2024,
        "category": "scooter",
        "chargingTime": "6.5 hours",
        "range": "195 km",
        "battery": "4 kWh",
        "topSpeed": "120 km/h",
        "colors": ["Jet Black", "Porcelain White"],
        "inventory": {"stock": 25, "reserved": 5, "status": "available"},
        "tags": ["commuter"],
    },
]


async def seed_demo_data(store: RecordStore) -> int:
    """
    Seed the demo catalog.

    Returns:
        Number of vehicles created (0 when the catalog was not empty)
    """
    if await store.list(Vehicle):
        logger.info("Catalog already has vehicles, skipping demo seed")
        return 0

    vehicles = VehicleService(store)
    offers = OfferService(store)

    created = []
    for payload in DEMO_VEHICLES:
        created.append(await vehicles.create_vehicle(VehicleCreateSchema(**payload)))

    await offers.create_offer(OfferCreateSchema(
        vehicleId=created[0].id,
        title="Launch Discount",
        description=f"25% off the {created[0].brand} {created[0].name}",
        discount=25,
        type="percentage",
    ))

    logger.info(f"Seeded {len(created)} demo vehicles")
    return len(created)
