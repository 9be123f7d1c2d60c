from pydantic import BaseModel, Field, BeforeValidator
from datetime import datetime
from typing import List, Optional, Annotated, Any
import enum

from dealership.utils.time_utils import utcnow


class InquiryType(str, enum.Enum):
    GENERAL = "general"
    VEHICLE_SPECIFIC = "vehicle_specific"
    TEST_DRIVE = "test_drive"
    PRICING = "pricing"
    TECHNICAL = "technical"
    COMPLAINT = "complaint"


class InquiryStatus(str, enum.Enum):
    """Canonical inquiry status enumeration."""
    NEW = "new"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class InquiryPriority(str, enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


# Older admin-console builds wrote these labels
LEGACY_STATUS_ALIASES = {
    "assigned": InquiryStatus.IN_PROGRESS.value,
    "responded": InquiryStatus.RESOLVED.value,
}


def migrate_status(v: Any) -> Any:
    if isinstance(v, str):
        return LEGACY_STATUS_ALIASES.get(v, v)
    return v


CanonicalStatus = Annotated[InquiryStatus, BeforeValidator(migrate_status)]


class ContactInfo(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class InquiryResponse(BaseModel):
    """
    Staff response.
    Embedded in Inquiry.responses; append-only.
    """
    message: str
    responded_by: str = "admin"
    responded_at: datetime = Field(default_factory=utcnow)


class InquiryFields(BaseModel):
    """Persisted inquiry attributes (everything except identity)."""
    customer_id: Optional[str] = None
    vehicle_id: Optional[str] = None
    type: InquiryType = InquiryType.GENERAL
    subject: str
    message: str
    contact_info: ContactInfo = Field(default_factory=ContactInfo)

    status: CanonicalStatus = InquiryStatus.NEW
    priority: InquiryPriority = InquiryPriority.MEDIUM
    assigned_to: Optional[str] = None

    responses: List[InquiryResponse] = []
    resolved_at: Optional[datetime] = None
    tags: List[str] = []

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class Inquiry(InquiryFields):
    """
    Inquiry model.
    A customer question tracked through new -> in_progress -> resolved -> closed.
    """
    id: Optional[str] = None
