"""
Vehicle API Routes

Endpoints for the vehicle catalog:
- GET / - Filtered, sorted, paginated listing
- GET /featured - Featured vehicles
- GET /stats/overview - Catalog and inventory statistics
- GET /{vehicle_id} - Get vehicle by ID
- POST / - Create vehicle (admin)
- PUT /{vehicle_id} - Update vehicle (admin)
- PATCH /{vehicle_id}/inventory - Replace inventory (admin)
- DELETE /{vehicle_id} - Delete vehicle (admin)
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional, List

from dealership.core.dependencies import get_vehicle_service, require_admin
from dealership.models.vehicle import VehicleCategory
from dealership.schemas.common import MessageSchema
from dealership.schemas.vehicle import (
    InventorySchema,
    VehicleCreateSchema,
    VehicleListResponseSchema,
    VehicleResponseSchema,
    VehicleStatsSchema,
    VehicleUpdateSchema,
)
from dealership.services.vehicle_service import VehicleService

router = APIRouter()


@router.get(
    "",
    response_model=VehicleListResponseSchema,
    summary="List vehicles",
    description="Catalog listing with filters, sorting and pagination. Pages past the end are clamped to the last page."
)
async def list_vehicles(
    category: Optional[VehicleCategory] = Query(None, description="scooter, motorcycle, car or bike"),
    brand: Optional[str] = Query(None, description="Exact brand"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    featured: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Matches name, brand or description"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder", description="asc or desc"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: VehicleService = Depends(get_vehicle_service)
):
    return await service.list_vehicles(
        category=category,
        brand=brand,
        min_price=min_price,
        max_price=max_price,
        featured=featured,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )


@router.get(
    "/featured",
    response_model=List[VehicleResponseSchema],
    summary="Featured vehicles",
    description="Active vehicles flagged as featured, for the storefront home page."
)
async def list_featured_vehicles(
    limit: Optional[int] = Query(None, ge=1),
    service: VehicleService = Depends(get_vehicle_service)
):
    return await service.list_featured_vehicles(limit)


@router.get(
    "/stats/overview",
    response_model=VehicleStatsSchema,
    summary="Vehicle statistics",
    description="Counts per category and brand, catalog value and inventory totals."
)
async def vehicle_stats(
    service: VehicleService = Depends(get_vehicle_service)
):
    return await service.vehicle_stats()


@router.get(
    "/{vehicle_id}",
    response_model=VehicleResponseSchema,
    summary="Get vehicle by ID"
)
async def get_vehicle(
    vehicle_id: str,
    service: VehicleService = Depends(get_vehicle_service)
):
    return await service.get_vehicle(vehicle_id)


@router.post(
    "",
    response_model=VehicleResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Create vehicle",
    description="Add a vehicle to the catalog. Inventory defaults to 0 in stock, 0 reserved, available."
)
async def create_vehicle(
    vehicle_data: VehicleCreateSchema,
    service: VehicleService = Depends(get_vehicle_service),
    _admin=Depends(require_admin)
):
    return await service.create_vehicle(vehicle_data)


@router.put(
    "/{vehicle_id}",
    response_model=VehicleResponseSchema,
    summary="Update vehicle",
    description="Partial update of catalog fields. Inventory is changed through the inventory endpoint."
)
async def update_vehicle(
    vehicle_id: str,
    vehicle_data: VehicleUpdateSchema,
    service: VehicleService = Depends(get_vehicle_service),
    _admin=Depends(require_admin)
):
    return await service.update_vehicle(vehicle_id, vehicle_data)


@router.patch(
    "/{vehicle_id}/inventory",
    response_model=VehicleResponseSchema,
    summary="Replace inventory",
    description="Replace stock, reserved and status as a whole. Reserved may exceed stock; it is stored as given."
)
async def update_inventory(
    vehicle_id: str,
    inventory: InventorySchema,
    service: VehicleService = Depends(get_vehicle_service),
    _admin=Depends(require_admin)
):
    return await service.update_inventory(vehicle_id, inventory)


@router.delete(
    "/{vehicle_id}",
    response_model=MessageSchema,
    summary="Delete vehicle",
    description="Remove the vehicle. Offers and customer history that reference it are kept."
)
async def delete_vehicle(
    vehicle_id: str,
    service: VehicleService = Depends(get_vehicle_service),
    _admin=Depends(require_admin)
):
    await service.delete_vehicle(vehicle_id)
    return MessageSchema(message="Vehicle deleted successfully")
