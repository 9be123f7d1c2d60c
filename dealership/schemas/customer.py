from pydantic import BaseModel, Field, EmailStr
from typing import Optional, List
from datetime import datetime

from dealership.models.customer import TestDriveStatus


# ============================================================================
# Nested Schemas
# ============================================================================

class AddressSchema(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None
    country: str = "India"


class PriceRangeSchema(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


class PreferencesSchema(BaseModel):
    vehicleType: List[str] = Field(default_factory=list)
    priceRange: PriceRangeSchema = Field(default_factory=PriceRangeSchema)
    colors: List[str] = Field(default_factory=list)


# ============================================================================
# Customer Request Schemas
# ============================================================================

class CustomerCreateSchema(BaseModel):
    """Customer sign-up payload from the storefront."""
    firstName: Optional[str] = Field(None, description="Customer first name")
    lastName: Optional[str] = Field(None, description="Customer last name")
    email: Optional[EmailStr] = Field(None, description="Customer email address")
    phone: Optional[str] = Field(None, description="Customer phone number")
    address: Optional[AddressSchema] = None
    preferences: Optional[PreferencesSchema] = None
    notes: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "firstName": "Asha",
                "lastName": "Verma",
                "email": "asha.verma@example.com",
                "phone": "+91-98765-43210"
            }
        }


class CustomerUpdateSchema(BaseModel):
    """Profile update. Purchase and test drive history are not writable here."""
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    address: Optional[AddressSchema] = None
    preferences: Optional[PreferencesSchema] = None
    isActive: Optional[bool] = None
    lastContactDate: Optional[datetime] = None
    notes: Optional[str] = None


class PurchaseCreateSchema(BaseModel):
    vehicleId: str = Field(..., min_length=1, description="Vehicle purchased")
    amount: float = Field(..., description="Amount paid")
    purchaseDate: Optional[datetime] = Field(None, description="Defaults to the time of the call")
    offerUsed: Optional[str] = Field(None, description="Offer applied, if any")


class ScheduleTestDriveSchema(BaseModel):
    vehicleId: str = Field(..., min_length=1, description="Vehicle to test drive")
    scheduledDate: Optional[datetime] = Field(None, description="Defaults to the time of the call")


class UpdateTestDriveStatusSchema(BaseModel):
    status: str = Field(..., description="scheduled, completed or cancelled")


# ============================================================================
# Customer Response Schemas
# ============================================================================

class PurchaseSchema(BaseModel):
    vehicleId: str
    purchaseDate: datetime
    amount: float
    offerUsed: Optional[str] = None


class TestDriveSchema(BaseModel):
    id: str
    vehicleId: str
    scheduledDate: datetime
    status: TestDriveStatus
    updatedAt: Optional[datetime] = None


class CustomerResponseSchema(BaseModel):
    id: str
    firstName: str
    lastName: str
    fullName: str
    email: str
    phone: Optional[str] = None
    address: AddressSchema
    preferences: PreferencesSchema
    purchaseHistory: List[PurchaseSchema]
    testDriveHistory: List[TestDriveSchema]
    isActive: bool
    lastContactDate: Optional[datetime] = None
    notes: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime


class CustomerStatsSchema(BaseModel):
    total: int
    totalPurchases: int
    totalTestDrives: int
    averagePurchases: float
