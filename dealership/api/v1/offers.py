"""
Offer API Routes

Endpoints for promotional offers:
- GET / - List offers (newest first, optionally only currently valid)
- GET /views - Currently valid offers joined to their vehicles
- GET /stats/overview - Offer statistics
- GET /vehicle/{vehicle_id}/active - Currently valid offers for a vehicle
- GET /{offer_id} - Get offer by ID
- POST / - Create offer (admin)
- PUT /{offer_id} - Update offer (admin)
- PATCH /{offer_id}/toggle - Flip isActive (admin)
- DELETE /{offer_id} - Delete offer (admin)
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional, List, Literal

from dealership.core.dependencies import get_offer_service, require_admin
from dealership.schemas.common import MessageSchema
from dealership.schemas.offer import (
    OfferCreateSchema,
    OfferResponseSchema,
    OfferStatsSchema,
    OfferUpdateSchema,
    OfferViewSchema,
)
from dealership.services.offer_service import DEFAULT_LIST_LIMIT, OfferService

router = APIRouter()


@router.get(
    "",
    response_model=List[OfferResponseSchema],
    summary="List offers",
    description="Offers sorted newest first. active=true keeps only currently valid offers (active and not expired)."
)
async def list_offers(
    active: bool = Query(False, description="Only currently valid offers"),
    limit: int = Query(DEFAULT_LIST_LIMIT, ge=1),
    service: OfferService = Depends(get_offer_service)
):
    return await service.list_offers(active_only=active, limit=limit)


@router.get(
    "/views",
    response_model=List[OfferViewSchema],
    summary="Offer views",
    description="Currently valid offers with their vehicle, final price, savings and time remaining."
)
async def list_offer_views(
    filter: Literal["all", "expiring", "high_discount"] = Query("all", description="all, expiring or high_discount"),
    limit: Optional[int] = Query(None, ge=1),
    service: OfferService = Depends(get_offer_service)
):
    return await service.list_offer_views(kind=filter, limit=limit)


@router.get(
    "/stats/overview",
    response_model=OfferStatsSchema,
    summary="Offer statistics"
)
async def offer_stats(
    service: OfferService = Depends(get_offer_service)
):
    return await service.offer_stats()


@router.get(
    "/vehicle/{vehicle_id}/active",
    response_model=List[OfferResponseSchema],
    summary="Active offers for a vehicle",
    description="Currently valid offers attached to the given vehicle."
)
async def list_active_offers_for_vehicle(
    vehicle_id: str,
    service: OfferService = Depends(get_offer_service)
):
    return await service.list_active_offers_for_vehicle(vehicle_id)


@router.get(
    "/{offer_id}",
    response_model=OfferResponseSchema,
    summary="Get offer by ID"
)
async def get_offer(
    offer_id: str,
    service: OfferService = Depends(get_offer_service)
):
    return await service.get_offer(offer_id)


@router.post(
    "",
    response_model=OfferResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Create offer",
    description="Create an offer for an existing vehicle. Runs for 30 days from now unless validUntil is given."
)
async def create_offer(
    offer_data: OfferCreateSchema,
    service: OfferService = Depends(get_offer_service),
    _admin=Depends(require_admin)
):
    return await service.create_offer(offer_data)


@router.put(
    "/{offer_id}",
    response_model=OfferResponseSchema,
    summary="Update offer"
)
async def update_offer(
    offer_id: str,
    offer_data: OfferUpdateSchema,
    service: OfferService = Depends(get_offer_service),
    _admin=Depends(require_admin)
):
    return await service.update_offer(offer_id, offer_data)


@router.patch(
    "/{offer_id}/toggle",
    response_model=OfferResponseSchema,
    summary="Toggle offer",
    description="Activate an inactive offer or deactivate an active one."
)
async def toggle_offer(
    offer_id: str,
    service: OfferService = Depends(get_offer_service),
    _admin=Depends(require_admin)
):
    return await service.toggle_offer_active(offer_id)


@router.delete(
    "/{offer_id}",
    response_model=MessageSchema,
    summary="Delete offer"
)
async def delete_offer(
    offer_id: str,
    service: OfferService = Depends(get_offer_service),
    _admin=Depends(require_admin)
):
    await service.delete_offer(offer_id)
    return MessageSchema(message="Offer deleted successfully")
