from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from dealership.models.offer import OfferType
from dealership.schemas.vehicle import VehicleResponseSchema


class OfferConditionsSchema(BaseModel):
    minQuantity: int = Field(1, ge=1)
    maxUsage: Optional[int] = Field(None, ge=0)
    applicableColors: List[str] = Field(default_factory=list)


# ============================================================================
# Offer Request Schemas
# ============================================================================

class OfferCreateSchema(BaseModel):
    """
    Offer creation payload.
    validFrom defaults to now and validUntil to now + 30 days when omitted.
    """
    vehicleId: Optional[str] = Field(None, description="Vehicle the offer applies to")
    title: Optional[str] = Field(None, description="Headline")
    description: Optional[str] = Field(None, description="Offer details")
    discount: Optional[float] = Field(None, description="Percent (0-100) or amount, depending on type")
    type: OfferType = OfferType.PERCENTAGE
    validFrom: Optional[datetime] = None
    validUntil: Optional[datetime] = None
    conditions: Optional[OfferConditionsSchema] = None
    isActive: Optional[bool] = None
    maxUsage: Optional[int] = Field(None, ge=0)

    class Config:
        json_schema_extra = {
            "example": {
                "vehicleId": "665f1c2e8b3a4d0012345678",
                "title": "Festive Season Sale",
                "description": "25% off the S1 Pro this festive season",
                "discount": 25,
                "type": "percentage"
            }
        }


class OfferUpdateSchema(BaseModel):
    vehicleId: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    discount: Optional[float] = None
    type: Optional[OfferType] = None
    validFrom: Optional[datetime] = None
    validUntil: Optional[datetime] = None
    conditions: Optional[OfferConditionsSchema] = None
    isActive: Optional[bool] = None
    usageCount: Optional[int] = Field(None, ge=0)
    maxUsage: Optional[int] = Field(None, ge=0)


# ============================================================================
# Offer Response Schemas
# ============================================================================

class OfferResponseSchema(BaseModel):
    id: str
    vehicleId: str
    title: str
    description: Optional[str] = None
    discount: float
    type: OfferType
    validFrom: Optional[datetime] = None
    validUntil: Optional[datetime] = None
    conditions: OfferConditionsSchema
    isActive: bool
    usageCount: int
    maxUsage: Optional[int] = None
    isCurrentlyValid: bool
    hasUsageRemaining: bool
    createdAt: datetime
    updatedAt: datetime


class OfferViewSchema(BaseModel):
    """An offer joined to its vehicle with display pricing."""
    offer: OfferResponseSchema
    vehicle: Optional[VehicleResponseSchema] = Field(None, description="None when the vehicle was deleted")
    originalPrice: Optional[float] = None
    finalPrice: Optional[float] = None
    savings: Optional[float] = None
    timeRemaining: Optional[str] = None
    isExpiringSoon: bool = False
    primaryImage: Optional[str] = None


class OfferStatsSchema(BaseModel):
    total: int
    active: int
    currentlyValid: int
    expired: int
    averageDiscount: float
    totalSavings: float
