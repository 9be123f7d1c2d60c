from pydantic import BaseModel, Field, BeforeValidator
from datetime import datetime
from typing import List, Optional, Annotated
import enum
import uuid

from dealership.models.vehicle import coerce_float
from dealership.utils.time_utils import utcnow


class TestDriveStatus(str, enum.Enum):
    """Test drive status enumeration."""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Address(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: str = "India"


class PriceRange(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


class Preferences(BaseModel):
    vehicle_type: List[str] = []
    price_range: PriceRange = Field(default_factory=PriceRange)
    colors: List[str] = []


class Purchase(BaseModel):
    """
    Purchase entry.
    Embedded in Customer.purchase_history; append-only.
    """
    vehicle_id: str
    purchase_date: datetime = Field(default_factory=utcnow)
    amount: Annotated[float, BeforeValidator(coerce_float)] = 0.0
    offer_used: Optional[str] = None


class TestDrive(BaseModel):
    """
    Test drive entry.
    Embedded in Customer.test_drive_history; addressed by its own id.
    """
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    vehicle_id: str
    scheduled_date: datetime = Field(default_factory=utcnow)
    status: TestDriveStatus = TestDriveStatus.SCHEDULED
    updated_at: Optional[datetime] = None


class CustomerFields(BaseModel):
    """Persisted customer attributes (everything except identity)."""
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None

    address: Address = Field(default_factory=Address)
    preferences: Preferences = Field(default_factory=Preferences)

    purchase_history: List[Purchase] = []
    test_drive_history: List[TestDrive] = []

    is_active: bool = True
    last_contact_date: Optional[datetime] = None
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Customer(CustomerFields):
    """
    Customer model.
    Represents a storefront customer with purchase and test drive history.
    """
    id: Optional[str] = None

    @property
    def full_name(self):
        """Return customer's full name."""
        return f"{self.first_name} {self.last_name}"
