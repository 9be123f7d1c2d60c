from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from dealership.models.inquiry import InquiryType, InquiryStatus, InquiryPriority


class ContactInfoSchema(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


# ============================================================================
# Inquiry Request Schemas
# ============================================================================

class InquiryCreateSchema(BaseModel):
    """
    Inquiry from the storefront contact page.
    Either customerId or contactInfo (name + email) identifies the sender.
    """
    customerId: Optional[str] = None
    vehicleId: Optional[str] = None
    type: InquiryType = InquiryType.GENERAL
    subject: Optional[str] = Field(None, description="Short summary")
    message: Optional[str] = Field(None, description="Inquiry body")
    contactInfo: Optional[ContactInfoSchema] = None
    priority: Optional[InquiryPriority] = None
    tags: List[str] = Field(default_factory=list)

    class Config:
        json_schema_extra = {
            "example": {
                "vehicleId": "665f1c2e8b3a4d0012345678",
                "type": "pricing",
                "subject": "On-road price",
                "message": "What is the on-road price in Pune?",
                "contactInfo": {"name": "Ravi", "email": "ravi@example.com"}
            }
        }


class InquiryUpdateSchema(BaseModel):
    """Admin update. status accepts legacy 'assigned'/'responded' labels."""
    type: Optional[InquiryType] = None
    subject: Optional[str] = None
    message: Optional[str] = None
    contactInfo: Optional[ContactInfoSchema] = None
    status: Optional[str] = None
    priority: Optional[InquiryPriority] = None
    assignedTo: Optional[str] = None
    tags: Optional[List[str]] = None


class ResponseCreateSchema(BaseModel):
    message: Optional[str] = Field(None, description="Reply text")
    respondedBy: Optional[str] = Field(None, description="Defaults to the calling admin")


class AssignSchema(BaseModel):
    assignedTo: Optional[str] = Field(None, description="Staff member id")


# ============================================================================
# Inquiry Response Schemas
# ============================================================================

class ResponseEntrySchema(BaseModel):
    message: str
    respondedBy: str
    respondedAt: datetime


class InquiryResponseSchema(BaseModel):
    id: str
    customerId: Optional[str] = None
    vehicleId: Optional[str] = None
    type: InquiryType
    subject: str
    message: str
    contactInfo: ContactInfoSchema
    status: InquiryStatus
    priority: InquiryPriority
    assignedTo: Optional[str] = None
    responses: List[ResponseEntrySchema]
    resolvedAt: Optional[datetime] = None
    tags: List[str]
    createdAt: datetime
    updatedAt: datetime


class InquiryStatsSchema(BaseModel):
    total: int
    new: int
    inProgress: int
    resolved: int
    closed: int
    highPriority: int
    urgent: int
