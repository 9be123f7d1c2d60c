"""
Customer Service - Business Logic Layer

Customer profiles plus their append-only purchase and test drive history.
History entries go through the store's atomic append, so concurrent
bookings for the same customer are all kept.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from dealership.core.exceptions import ConflictError, NotFoundError, ValidationError
from dealership.domain.validation import validate_customer_create, validate_customer_update, validate_purchase
from dealership.domain.workflow import can_transition_test_drive, parse_test_drive_status
from dealership.models.customer import Customer, Purchase, TestDrive
from dealership.repositories import EntryNotFound, RecordNotFound, RecordStore
from dealership.schemas.customer import (
    CustomerCreateSchema,
    CustomerResponseSchema,
    CustomerStatsSchema,
    CustomerUpdateSchema,
    PurchaseCreateSchema,
    ScheduleTestDriveSchema,
    UpdateTestDriveStatusSchema,
)
from dealership.utils.casing import camel_keys, patch_changes, snake_keys
from dealership.utils.time_utils import utcnow

logger = logging.getLogger(__name__)

# Optional profile fields an update may clear with an explicit null
NULLABLE_FIELDS = frozenset({"last_contact_date", "notes"})


def customer_to_response(customer: Customer) -> CustomerResponseSchema:
    data = camel_keys(customer.model_dump())
    data["fullName"] = customer.full_name
    return CustomerResponseSchema.model_validate(data)


class CustomerService:
    """Service for customer business logic (Async)"""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    async def _require(self, customer_id: str) -> Customer:
        customer = await self.store.get(Customer, customer_id)
        if customer is None:
            raise NotFoundError("Customer not found")
        return customer

    async def _ensure_email_free(self, email: str, customer_id: Optional[str] = None):
        for other in await self.store.list(Customer, {"email": email}):
            if other.id != customer_id:
                raise ConflictError("Customer with this email already exists")

    async def create_customer(self, data: CustomerCreateSchema) -> CustomerResponseSchema:
        """
        Register a customer. Email is stored lower-cased and must be unique.

        Raises:
            ValidationError: Missing names, email or phone
            ConflictError: Email already registered
        """
        validate_customer_create(data)
        email = str(data.email).lower()
        await self._ensure_email_free(email)

        now = self.clock()
        fields = snake_keys(data.model_dump(exclude_none=True))
        fields.update(
            first_name=data.firstName.strip(),
            last_name=data.lastName.strip(),
            email=email,
            phone=data.phone.strip(),
        )
        customer = await self.store.create(Customer(**fields, created_at=now, updated_at=now))

        logger.info(f"Created customer {customer.id} ({customer.full_name})")
        return customer_to_response(customer)

    async def get_customer(self, customer_id: str) -> CustomerResponseSchema:
        return customer_to_response(await self._require(customer_id))

    async def list_customers(self, is_active: Optional[bool] = None) -> List[CustomerResponseSchema]:
        filters = {"is_active": is_active} if is_active is not None else {}
        customers = await self.store.list(Customer, filters)
        return [customer_to_response(c) for c in customers]

    async def update_customer(self, customer_id: str, data: CustomerUpdateSchema) -> CustomerResponseSchema:
        """
        Profile update. Purchase and test drive history cannot be written here.
        lastContactDate and notes can be cleared with null.

        Raises:
            ValidationError: Blank names or email
            NotFoundError: Unknown customer
            ConflictError: New email belongs to another customer
        """
        sent = data.model_dump(exclude_unset=True)
        validate_customer_update(sent)

        changes = patch_changes(sent, NULLABLE_FIELDS)
        if "email" in changes:
            changes["email"] = str(changes["email"]).lower()
            await self._ensure_email_free(changes["email"], customer_id)

        try:
            customer = await self.store.update(Customer, customer_id, changes)
        except RecordNotFound:
            raise NotFoundError("Customer not found")

        logger.info(f"Updated customer {customer_id}: {', '.join(sorted(changes)) or 'no changes'}")
        return customer_to_response(customer)

    async def delete_customer(self, customer_id: str) -> None:
        try:
            await self.store.delete(Customer, customer_id)
        except RecordNotFound:
            raise NotFoundError("Customer not found")
        logger.info(f"Deleted customer {customer_id}")

    async def add_purchase(self, customer_id: str, data: PurchaseCreateSchema) -> CustomerResponseSchema:
        """
        Record a purchase.

        Bookkeeping only: vehicle inventory and offer usage counts are
        not touched.
        """
        validate_purchase(data)
        purchase = Purchase(
            vehicle_id=data.vehicleId,
            purchase_date=data.purchaseDate or self.clock(),
            amount=data.amount,
            offer_used=data.offerUsed,
        )
        try:
            customer = await self.store.append(Customer, customer_id, "purchase_history", purchase)
        except RecordNotFound:
            raise NotFoundError("Customer not found")

        logger.info(f"Customer {customer_id} purchased vehicle {purchase.vehicle_id} for {purchase.amount}")
        return customer_to_response(customer)

    async def schedule_test_drive(self, customer_id: str, data: ScheduleTestDriveSchema) -> CustomerResponseSchema:
        """Book a test drive; it starts out scheduled."""
        now = self.clock()
        test_drive = TestDrive(
            vehicle_id=data.vehicleId,
            scheduled_date=data.scheduledDate or now,
            updated_at=now,
        )
        try:
            customer = await self.store.append(Customer, customer_id, "test_drive_history", test_drive)
        except RecordNotFound:
            raise NotFoundError("Customer not found")

        logger.info(f"Scheduled test drive {test_drive.id} for customer {customer_id}")
        return customer_to_response(customer)

    async def update_test_drive_status(
        self,
        customer_id: str,
        test_drive_id: str,
        data: UpdateTestDriveStatusSchema
    ) -> CustomerResponseSchema:
        """
        Move a test drive to a new status. Every transition is allowed.

        Raises:
            ValidationError: Unknown status value
            NotFoundError: Unknown customer or test drive
        """
        new_status = parse_test_drive_status(data.status)
        customer = await self._require(customer_id)

        current = next((t for t in customer.test_drive_history if t.id == test_drive_id), None)
        if current is None:
            raise NotFoundError("Test drive not found")
        if not can_transition_test_drive(current.status, new_status):
            raise ValidationError.from_problems([{
                "param": "status",
                "msg": f"Cannot move test drive from {current.status.value} to {new_status.value}",
            }])

        try:
            customer = await self.store.update_entry(
                Customer,
                customer_id,
                "test_drive_history",
                test_drive_id,
                {"status": new_status, "updated_at": self.clock()},
            )
        except EntryNotFound:
            raise NotFoundError("Test drive not found")
        except RecordNotFound:
            raise NotFoundError("Customer not found")

        logger.info(f"Test drive {test_drive_id} for customer {customer_id} -> {new_status.value}")
        return customer_to_response(customer)

    async def customer_stats(self) -> CustomerStatsSchema:
        customers = await self.store.list(Customer)
        purchases = sum(len(c.purchase_history) for c in customers)
        test_drives = sum(len(c.test_drive_history) for c in customers)
        return CustomerStatsSchema(
            total=len(customers),
            totalPurchases=purchases,
            totalTestDrives=test_drives,
            averagePurchases=round(purchases / len(customers), 2) if customers else 0.0,
        )
