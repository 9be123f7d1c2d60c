"""
Vehicle Service - Business Logic Layer

Orchestrates vehicle operations by coordinating between:
- Validation rules (before any store access)
- Inventory arithmetic (derived availability, overcommit detection)
- Record store (persistence)
- Catalog service (filtering, sorting, pagination for listings)
"""
import logging
from collections import Counter
from datetime import datetime
from typing import Callable, List, Optional

from dealership.core.exceptions import NotFoundError
from dealership.domain.inventory import compute_available_stock, is_overcommitted, summarize_inventory
from dealership.domain.pricing import quantize, to_decimal
from dealership.domain.validation import validate_inventory, validate_vehicle_create, validate_vehicle_update
from dealership.models.vehicle import Inventory, Vehicle, VehicleCategory
from dealership.repositories import RecordNotFound, RecordStore
from dealership.schemas.common import PaginationSchema
from dealership.schemas.vehicle import (
    InventoryResponseSchema,
    InventorySchema,
    VehicleCreateSchema,
    VehicleListResponseSchema,
    VehicleResponseSchema,
    VehicleStatsSchema,
    VehicleUpdateSchema,
)
from dealership.services.catalog_service import paginate, select_featured_vehicles, sort_vehicles
from dealership.utils.casing import camel_keys, patch_changes, snake_keys
from dealership.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

NULLABLE_FIELDS = frozenset({"description", "charging_time", "range", "battery", "top_speed"})


def vehicle_to_response(vehicle: Vehicle) -> VehicleResponseSchema:
    """Convert a stored vehicle to its API shape, adding derived inventory figures."""
    data = camel_keys(vehicle.model_dump())
    data["inventory"] = InventoryResponseSchema(
        stock=vehicle.inventory.stock,
        reserved=vehicle.inventory.reserved,
        status=vehicle.inventory.status,
        available=compute_available_stock(vehicle),
        overcommitted=is_overcommitted(vehicle),
    )
    return VehicleResponseSchema.model_validate(data)


class VehicleService:
    """Service for vehicle business logic (Async)"""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    async def _require(self, vehicle_id: str) -> Vehicle:
        vehicle = await self.store.get(Vehicle, vehicle_id)
        if vehicle is None:
            raise NotFoundError("Vehicle not found")
        return vehicle

    async def create_vehicle(self, data: VehicleCreateSchema) -> VehicleResponseSchema:
        """
        Create a catalog entry.

        Defaults: inventory {0, 0, available}, isActive true, featured false.

        Raises:
            ValidationError: Before anything is written
        """
        now = self.clock()
        validate_vehicle_create(data, now)

        fields = snake_keys(data.model_dump(exclude_none=True))
        vehicle = Vehicle(**fields, created_at=now, updated_at=now)
        vehicle = await self.store.create(vehicle)

        logger.info(f"Created vehicle {vehicle.id} ({vehicle.display_name})")
        if is_overcommitted(vehicle):
            logger.warning(
                f"Vehicle {vehicle.id} created overcommitted: "
                f"reserved {vehicle.inventory.reserved} > stock {vehicle.inventory.stock}"
            )
        return vehicle_to_response(vehicle)

    async def get_vehicle(self, vehicle_id: str) -> VehicleResponseSchema:
        return vehicle_to_response(await self._require(vehicle_id))

    async def list_vehicles(
        self,
        category: Optional[VehicleCategory] = None,
        brand: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        featured: Optional[bool] = None,
        search: Optional[str] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 10
    ) -> VehicleListResponseSchema:
        """
        Filtered, sorted, paginated catalog listing.

        search matches name, brand or description, case-insensitively.
        """
        filters = {}
        if category is not None:
            filters["category"] = category
        if brand:
            filters["brand"] = brand
        if featured is not None:
            filters["featured"] = featured

        vehicles = await self.store.list(Vehicle, filters)

        if min_price is not None:
            vehicles = [v for v in vehicles if v.price >= min_price]
        if max_price is not None:
            vehicles = [v for v in vehicles if v.price <= max_price]
        if search:
            needle = search.casefold()
            vehicles = [
                v for v in vehicles
                if needle in v.name.casefold()
                or needle in v.brand.casefold()
                or needle in (v.description or "").casefold()
            ]

        ordered = sort_vehicles(vehicles, sort_by, sort_order)
        result = paginate(ordered, page, limit)

        return VehicleListResponseSchema(
            vehicles=[vehicle_to_response(v) for v in result.items],
            pagination=PaginationSchema(
                currentPage=result.page,
                pageSize=result.page_size,
                totalPages=result.total_pages,
                total=result.total,
                hasNextPage=result.has_next,
                hasPrevPage=result.has_prev,
            ),
        )

    async def list_featured_vehicles(self, limit: Optional[int] = None) -> List[VehicleResponseSchema]:
        vehicles = select_featured_vehicles(await self.store.list(Vehicle))
        if limit is not None:
            vehicles = vehicles[:limit]
        return [vehicle_to_response(v) for v in vehicles]

    async def update_vehicle(self, vehicle_id: str, data: VehicleUpdateSchema) -> VehicleResponseSchema:
        """
        Partial update. Only the fields sent are validated and written.
        Optional text fields (description, range, ...) can be cleared with null.
        The inventory sub-record is not reachable from here.

        Raises:
            ValidationError: Invalid field value
            NotFoundError: Unknown vehicle
        """
        sent = data.model_dump(exclude_unset=True)
        validate_vehicle_update(sent, self.clock())

        changes = patch_changes(sent, NULLABLE_FIELDS)
        try:
            vehicle = await self.store.update(Vehicle, vehicle_id, changes)
        except RecordNotFound:
            raise NotFoundError("Vehicle not found")

        logger.info(f"Updated vehicle {vehicle_id}: {', '.join(sorted(changes)) or 'no changes'}")
        return vehicle_to_response(vehicle)

    async def update_inventory(self, vehicle_id: str, data: InventorySchema) -> VehicleResponseSchema:
        """
        Replace the whole inventory sub-record.

        Stored as given, even when reserved exceeds stock. Concurrent
        calls are last-write-wins.

        Raises:
            ValidationError: Negative stock or reserved
            NotFoundError: Unknown vehicle
        """
        validate_inventory(data)
        inventory = Inventory(stock=data.stock, reserved=data.reserved, status=data.status)
        try:
            vehicle = await self.store.update(Vehicle, vehicle_id, {"inventory": inventory})
        except RecordNotFound:
            raise NotFoundError("Vehicle not found")

        logger.info(
            f"Inventory for vehicle {vehicle_id}: stock={inventory.stock} "
            f"reserved={inventory.reserved} status={inventory.status.value}"
        )
        if is_overcommitted(inventory):
            logger.warning(
                f"Vehicle {vehicle_id} is overcommitted: "
                f"reserved {inventory.reserved} > stock {inventory.stock}"
            )
        return vehicle_to_response(vehicle)

    async def delete_vehicle(self, vehicle_id: str) -> None:
        """
        Physically remove a vehicle. Offers and customer history that
        reference it are left untouched.
        """
        try:
            await self.store.delete(Vehicle, vehicle_id)
        except RecordNotFound:
            raise NotFoundError("Vehicle not found")
        logger.info(f"Deleted vehicle {vehicle_id}")

    async def vehicle_stats(self) -> VehicleStatsSchema:
        vehicles = await self.store.list(Vehicle)
        totals = summarize_inventory(vehicles)

        total_value = sum((to_decimal(v.price) for v in vehicles), to_decimal(0))
        average = total_value / len(vehicles) if vehicles else to_decimal(0)

        return VehicleStatsSchema(
            total=len(vehicles),
            active=sum(1 for v in vehicles if v.is_active),
            featured=sum(1 for v in vehicles if v.featured),
            categories=dict(Counter(v.category.value for v in vehicles)),
            brands=dict(Counter(v.brand for v in vehicles)),
            totalValue=float(quantize(total_value)),
            averagePrice=float(quantize(average)),
            totalStock=totals.stock,
            totalReserved=totals.reserved,
            totalAvailable=totals.available,
            overcommitted=totals.overcommitted,
        )
