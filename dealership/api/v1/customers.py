"""
Customer API Routes

Endpoints for customer operations:
- GET / - List customers
- GET /stats/overview - Customer statistics
- GET /{customer_id} - Get customer by ID
- POST / - Register customer
- PUT /{customer_id} - Update profile (admin)
- DELETE /{customer_id} - Delete customer (admin)
- POST /{customer_id}/purchases - Record a purchase
- POST /{customer_id}/test-drives - Schedule a test drive
- PATCH /{customer_id}/test-drives/{test_drive_id} - Update test drive status
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional, List

from dealership.core.dependencies import get_customer_service, require_admin
from dealership.schemas.common import MessageSchema
from dealership.schemas.customer import (
    CustomerCreateSchema,
    CustomerResponseSchema,
    CustomerStatsSchema,
    CustomerUpdateSchema,
    PurchaseCreateSchema,
    ScheduleTestDriveSchema,
    UpdateTestDriveStatusSchema,
)
from dealership.services.customer_service import CustomerService

router = APIRouter()


@router.get(
    "",
    response_model=List[CustomerResponseSchema],
    summary="List customers"
)
async def list_customers(
    is_active: Optional[bool] = Query(None, alias="isActive"),
    service: CustomerService = Depends(get_customer_service)
):
    return await service.list_customers(is_active)


@router.get(
    "/stats/overview",
    response_model=CustomerStatsSchema,
    summary="Customer statistics"
)
async def customer_stats(
    service: CustomerService = Depends(get_customer_service)
):
    return await service.customer_stats()


@router.get(
    "/{customer_id}",
    response_model=CustomerResponseSchema,
    summary="Get customer by ID"
)
async def get_customer(
    customer_id: str,
    service: CustomerService = Depends(get_customer_service)
):
    return await service.get_customer(customer_id)


@router.post(
    "",
    response_model=CustomerResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Register customer",
    description="Create a customer profile. Emails are unique (case-insensitive)."
)
async def create_customer(
    customer_data: CustomerCreateSchema,
    service: CustomerService = Depends(get_customer_service)
):
    return await service.create_customer(customer_data)


@router.put(
    "/{customer_id}",
    response_model=CustomerResponseSchema,
    summary="Update customer"
)
async def update_customer(
    customer_id: str,
    customer_data: CustomerUpdateSchema,
    service: CustomerService = Depends(get_customer_service),
    _admin=Depends(require_admin)
):
    return await service.update_customer(customer_id, customer_data)


@router.delete(
    "/{customer_id}",
    response_model=MessageSchema,
    summary="Delete customer"
)
async def delete_customer(
    customer_id: str,
    service: CustomerService = Depends(get_customer_service),
    _admin=Depends(require_admin)
):
    await service.delete_customer(customer_id)
    return MessageSchema(message="Customer deleted successfully")


@router.post(
    "/{customer_id}/purchases",
    response_model=CustomerResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Record purchase",
    description="Append to the purchase history. Inventory and offer usage are not changed."
)
async def add_purchase(
    customer_id: str,
    purchase: PurchaseCreateSchema,
    service: CustomerService = Depends(get_customer_service)
):
    return await service.add_purchase(customer_id, purchase)


@router.post(
    "/{customer_id}/test-drives",
    response_model=CustomerResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule test drive"
)
async def schedule_test_drive(
    customer_id: str,
    test_drive: ScheduleTestDriveSchema,
    service: CustomerService = Depends(get_customer_service)
):
    return await service.schedule_test_drive(customer_id, test_drive)


@router.patch(
    "/{customer_id}/test-drives/{test_drive_id}",
    response_model=CustomerResponseSchema,
    summary="Update test drive status",
    description="Set the status to scheduled, completed or cancelled."
)
async def update_test_drive_status(
    customer_id: str,
    test_drive_id: str,
    status_data: UpdateTestDriveStatusSchema,
    service: CustomerService = Depends(get_customer_service)
):
    return await service.update_test_drive_status(customer_id, test_drive_id, status_data)
