from pydantic import BaseModel, Field, BeforeValidator
from datetime import datetime
from typing import List, Optional, Annotated, Any
import enum

from dealership.utils.time_utils import utcnow


def coerce_float(v: Any) -> float:
    if v is None:
        return 0.0
    try:
        # Handle Decimal128 and other types by converting to string first
        return float(str(v))
    except (ValueError, TypeError):
        return 0.0


class VehicleCategory(str, enum.Enum):
    """Vehicle category enumeration."""
    SCOOTER = "scooter"
    MOTORCYCLE = "motorcycle"
    CAR = "car"
    BIKE = "bike"


class FuelType(str, enum.Enum):
    ELECTRIC = "Electric"
    HYBRID = "Hybrid"
    PLUG_IN_HYBRID = "Plug-in Hybrid"


class InventoryStatus(str, enum.Enum):
    """
    Admin-set availability label.
    Independent of the stock/reserved numbers; never derived from them.
    """
    AVAILABLE = "available"
    OUT_OF_STOCK = "out_of_stock"
    DISCONTINUED = "discontinued"


class Inventory(BaseModel):
    """
    Inventory sub-record.
    Replaced as a whole by the inventory operation. reserved may exceed
    stock; the stored numbers are never corrected.
    """
    stock: int = 0
    reserved: int = 0
    status: InventoryStatus = InventoryStatus.AVAILABLE


class ColorGallery(BaseModel):
    """Ordered images for one colour, with an optional designated primary."""
    color: str
    images: List[str] = []
    primary_image: Optional[str] = None


class Specifications(BaseModel):
    acceleration: Optional[str] = None
    weight: Optional[str] = None
    dimensions: Optional[str] = None
    warranty: Optional[str] = None
    charging_port: Optional[str] = None


class VehicleFields(BaseModel):
    """Persisted vehicle attributes (everything except identity)."""
    name: str
    brand: str
    price: Annotated[float, BeforeValidator(coerce_float)] = 0.0
    year: int
    category: VehicleCategory = VehicleCategory.SCOOTER
    fuel_type: FuelType = FuelType.ELECTRIC
    description: Optional[str] = None

    charging_time: Optional[str] = None
    range: Optional[str] = None
    battery: Optional[str] = None
    top_speed: Optional[str] = None
    specifications: Specifications = Field(default_factory=Specifications)

    colors: List[str] = []
    images: List[str] = []
    color_images: List[ColorGallery] = []

    inventory: Inventory = Field(default_factory=Inventory)
    tags: List[str] = []

    is_active: bool = True
    featured: bool = False

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Vehicle(VehicleFields):
    """
    Vehicle model.
    A catalog entry offered by the dealership.
    """
    id: Optional[str] = None

    @property
    def display_name(self):
        """Return formatted vehicle name."""
        parts = [self.brand, self.name, str(self.year) if self.year else None]
        return " ".join(filter(None, parts))
