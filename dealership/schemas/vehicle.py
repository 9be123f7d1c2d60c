from pydantic import BaseModel, Field
from typing import Optional, List, Dict
from datetime import datetime

from dealership.models.vehicle import VehicleCategory, FuelType, InventoryStatus
from dealership.schemas.common import PaginationSchema


# ============================================================================
# Nested Schemas
# ============================================================================

class InventorySchema(BaseModel):
    """Full inventory sub-record. Sent as a whole; never merged field by field."""
    stock: int = Field(0, description="Units held")
    reserved: int = Field(0, description="Units promised to customers")
    status: InventoryStatus = Field(InventoryStatus.AVAILABLE, description="Admin-set availability label")

    class Config:
        json_schema_extra = {
            "example": {
                "stock": 5,
                "reserved": 1,
                "status": "available"
            }
        }


class InventoryResponseSchema(InventorySchema):
    available: int = Field(..., ge=0, description="max(stock - reserved, 0)")
    overcommitted: bool = Field(False, description="reserved exceeds stock")


class ColorGallerySchema(BaseModel):
    color: str = Field(..., min_length=1, description="Colour name")
    images: List[str] = Field(default_factory=list, description="Ordered image references")
    primaryImage: Optional[str] = Field(None, description="Designated primary image")


class SpecificationsSchema(BaseModel):
    acceleration: Optional[str] = None
    weight: Optional[str] = None
    dimensions: Optional[str] = None
    warranty: Optional[str] = None
    chargingPort: Optional[str] = None


# ============================================================================
# Vehicle Request Schemas
# ============================================================================

class VehicleCreateSchema(BaseModel):
    """
    Vehicle creation payload from the admin console.
    Required fields are checked by the vehicle service so that every
    violation is reported together.
    """
    name: Optional[str] = Field(None, description="Model name")
    brand: Optional[str] = Field(None, description="Manufacturer")
    price: Optional[float] = Field(None, description="List price")
    year: Optional[int] = Field(None, description="Model year")
    category: VehicleCategory = VehicleCategory.SCOOTER
    fuelType: FuelType = FuelType.ELECTRIC
    description: Optional[str] = None
    chargingTime: Optional[str] = None
    range: Optional[str] = None
    battery: Optional[str] = None
    topSpeed: Optional[str] = None
    specifications: Optional[SpecificationsSchema] = None
    colors: List[str] = Field(default_factory=list)
    images: List[str] = Field(default_factory=list)
    colorImages: List[ColorGallerySchema] = Field(default_factory=list)
    inventory: Optional[InventorySchema] = None
    tags: List[str] = Field(default_factory=list)
    isActive: Optional[bool] = None
    featured: Optional[bool] = None

    class Config:
        json_schema_extra = {
            "example": {
                "name": "S1 Pro",
                "brand": "Ola",
                "price": 129999,
                "year": 2024,
                "category": "scooter",
                "colors": ["Jet Black", "Porcelain White"],
                "inventory": {"stock": 12, "reserved": 2, "status": "available"},
                "featured": True
            }
        }


class VehicleUpdateSchema(BaseModel):
    """Partial update. Only fields present are validated and written."""
    name: Optional[str] = None
    brand: Optional[str] = None
    price: Optional[float] = None
    year: Optional[int] = None
    category: Optional[VehicleCategory] = None
    fuelType: Optional[FuelType] = None
    description: Optional[str] = None
    chargingTime: Optional[str] = None
    range: Optional[str] = None
    battery: Optional[str] = None
    topSpeed: Optional[str] = None
    specifications: Optional[SpecificationsSchema] = None
    colors: Optional[List[str]] = None
    images: Optional[List[str]] = None
    colorImages: Optional[List[ColorGallerySchema]] = None
    tags: Optional[List[str]] = None
    isActive: Optional[bool] = None
    featured: Optional[bool] = None


# ============================================================================
# Vehicle Response Schemas
# ============================================================================

class VehicleResponseSchema(BaseModel):
    id: str
    name: str
    brand: str
    price: float
    year: int
    category: VehicleCategory
    fuelType: FuelType
    description: Optional[str] = None
    chargingTime: Optional[str] = None
    range: Optional[str] = None
    battery: Optional[str] = None
    topSpeed: Optional[str] = None
    specifications: SpecificationsSchema
    colors: List[str]
    images: List[str]
    colorImages: List[ColorGallerySchema]
    inventory: InventoryResponseSchema
    tags: List[str]
    isActive: bool
    featured: bool
    createdAt: datetime
    updatedAt: datetime


class VehicleListResponseSchema(BaseModel):
    vehicles: List[VehicleResponseSchema]
    pagination: PaginationSchema


class VehicleStatsSchema(BaseModel):
    total: int
    active: int
    featured: int
    categories: Dict[str, int]
    brands: Dict[str, int]
    totalValue: float
    averagePrice: float
    totalStock: int
    totalReserved: int
    totalAvailable: int
    overcommitted: int
