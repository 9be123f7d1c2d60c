"""
API v1 Router

Aggregates all v1 API routes.
"""
from fastapi import APIRouter
from dealership.api.v1 import vehicles, offers, customers, inquiries, analytics

# Create main v1 router
api_router = APIRouter()

# Include sub-routers
api_router.include_router(
    vehicles.router,
    prefix="/vehicles",
    tags=["Vehicles"]
)

api_router.include_router(
    offers.router,
    prefix="/offers",
    tags=["Offers"]
)

api_router.include_router(
    customers.router,
    prefix="/customers",
    tags=["Customers"]
)

api_router.include_router(
    inquiries.router,
    prefix="/inquiries",
    tags=["Inquiries"]
)

api_router.include_router(
    analytics.router,
    prefix="/analytics",
    tags=["Analytics"]
)
