from pydantic import BaseModel, Field, BeforeValidator
from datetime import datetime
from typing import List, Optional, Annotated
import enum

from dealership.models.vehicle import coerce_float
from dealership.utils.time_utils import utcnow


class OfferType(str, enum.Enum):
    """Offer type enumeration."""
    PERCENTAGE = "percentage"
    FIXED_AMOUNT = "fixed_amount"
    BUY_ONE_GET_ONE = "buy_one_get_one"


class OfferConditions(BaseModel):
    min_quantity: int = 1
    max_usage: Optional[int] = None
    applicable_colors: List[str] = []


class OfferFields(BaseModel):
    """Persisted offer attributes (everything except identity)."""
    vehicle_id: str
    title: str
    description: Optional[str] = None

    # Percentage (0-100) or raw amount depending on type; ignored for BOGO
    discount: Annotated[float, BeforeValidator(coerce_float)] = 0.0
    type: OfferType = OfferType.PERCENTAGE

    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None

    conditions: OfferConditions = Field(default_factory=OfferConditions)
    is_active: bool = True
    usage_count: int = 0
    max_usage: Optional[int] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Offer(OfferFields):
    """
    Offer model.
    A promotion attached to exactly one vehicle. The vehicle reference is
    not cascaded on delete and may dangle.
    """
    id: Optional[str] = None
