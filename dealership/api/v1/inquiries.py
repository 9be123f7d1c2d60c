"""
Inquiry API Routes

Endpoints for storefront inquiries:
- GET / - List inquiries (filter by status/priority)
- GET /stats/overview - Inquiry statistics
- GET /{inquiry_id} - Get inquiry by ID
- POST / - Submit inquiry
- PUT /{inquiry_id} - Update inquiry (admin)
- DELETE /{inquiry_id} - Delete inquiry (admin)
- POST /{inquiry_id}/responses - Respond (admin)
- PATCH /{inquiry_id}/assign - Assign to staff (admin)
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional, List

from dealership.core.dependencies import get_inquiry_service, require_admin
from dealership.models.inquiry import InquiryPriority
from dealership.models.user import CurrentUser
from dealership.schemas.common import MessageSchema
from dealership.schemas.inquiry import (
    AssignSchema,
    InquiryCreateSchema,
    InquiryResponseSchema,
    InquiryStatsSchema,
    InquiryUpdateSchema,
    ResponseCreateSchema,
)
from dealership.services.inquiry_service import InquiryService

router = APIRouter()


@router.get(
    "",
    response_model=List[InquiryResponseSchema],
    summary="List inquiries",
    description="Newest first. status accepts new, in_progress, resolved, closed (and the legacy assigned/responded)."
)
async def list_inquiries(
    status_filter: Optional[str] = Query(None, alias="status"),
    priority: Optional[InquiryPriority] = Query(None),
    service: InquiryService = Depends(get_inquiry_service)
):
    return await service.list_inquiries(status_filter, priority)


@router.get(
    "/stats/overview",
    response_model=InquiryStatsSchema,
    summary="Inquiry statistics"
)
async def inquiry_stats(
    service: InquiryService = Depends(get_inquiry_service)
):
    return await service.inquiry_stats()


@router.get(
    "/{inquiry_id}",
    response_model=InquiryResponseSchema,
    summary="Get inquiry by ID"
)
async def get_inquiry(
    inquiry_id: str,
    service: InquiryService = Depends(get_inquiry_service)
):
    return await service.get_inquiry(inquiry_id)


@router.post(
    "",
    response_model=InquiryResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Submit inquiry",
    description="Open an inquiry from a known customer (customerId) or a visitor (contactInfo name + email)."
)
async def create_inquiry(
    inquiry_data: InquiryCreateSchema,
    service: InquiryService = Depends(get_inquiry_service)
):
    return await service.create_inquiry(inquiry_data)


@router.put(
    "/{inquiry_id}",
    response_model=InquiryResponseSchema,
    summary="Update inquiry"
)
async def update_inquiry(
    inquiry_id: str,
    inquiry_data: InquiryUpdateSchema,
    service: InquiryService = Depends(get_inquiry_service),
    _admin=Depends(require_admin)
):
    return await service.update_inquiry(inquiry_id, inquiry_data)


@router.delete(
    "/{inquiry_id}",
    response_model=MessageSchema,
    summary="Delete inquiry"
)
async def delete_inquiry(
    inquiry_id: str,
    service: InquiryService = Depends(get_inquiry_service),
    _admin=Depends(require_admin)
):
    await service.delete_inquiry(inquiry_id)
    return MessageSchema(message="Inquiry deleted successfully")


@router.post(
    "/{inquiry_id}/responses",
    response_model=InquiryResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Respond to inquiry",
    description="Append a response and mark the inquiry resolved. Closed inquiries stay closed."
)
async def add_response(
    inquiry_id: str,
    response: ResponseCreateSchema,
    service: InquiryService = Depends(get_inquiry_service),
    current_user: CurrentUser = Depends(require_admin)
):
    return await service.add_response(inquiry_id, response, responded_by=current_user.id)


@router.patch(
    "/{inquiry_id}/assign",
    response_model=InquiryResponseSchema,
    summary="Assign inquiry",
    description="Assign to a staff member and move the inquiry to in_progress."
)
async def assign_inquiry(
    inquiry_id: str,
    assignment: AssignSchema,
    service: InquiryService = Depends(get_inquiry_service),
    _admin=Depends(require_admin)
):
    return await service.assign_inquiry(inquiry_id, assignment)
