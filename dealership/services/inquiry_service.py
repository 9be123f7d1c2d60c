"""
Inquiry Service - Business Logic Layer

Tracks storefront inquiries through new -> in_progress -> resolved -> closed.
Assignment and responses move the status implicitly; everything else is
an explicit admin update.
"""
import logging
from datetime import datetime
from typing import Callable, List, Optional

from dealership.core.exceptions import NotFoundError, ValidationError
from dealership.domain.validation import validate_inquiry_create, validate_inquiry_update, validate_response_message
from dealership.domain.workflow import (
    parse_inquiry_status,
    resolved_at_for,
    status_after_assignment,
    status_after_response,
)
from dealership.models.inquiry import (
    ContactInfo,
    Inquiry,
    InquiryPriority,
    InquiryResponse,
    InquiryStatus,
)
from dealership.repositories import RecordNotFound, RecordStore
from dealership.schemas.inquiry import (
    AssignSchema,
    InquiryCreateSchema,
    InquiryResponseSchema,
    InquiryStatsSchema,
    InquiryUpdateSchema,
    ResponseCreateSchema,
)
from dealership.utils.casing import camel_keys, patch_changes
from dealership.utils.time_utils import as_utc, utcnow

logger = logging.getLogger(__name__)

NULLABLE_FIELDS = frozenset({"assigned_to"})


def inquiry_to_response(inquiry: Inquiry) -> InquiryResponseSchema:
    return InquiryResponseSchema.model_validate(camel_keys(inquiry.model_dump()))


class InquiryService:
    """Service for inquiry business logic (Async)"""

    def __init__(self, store: RecordStore, clock: Callable[[], datetime] = utcnow):
        self.store = store
        self.clock = clock

    async def _require(self, inquiry_id: str) -> Inquiry:
        inquiry = await self.store.get(Inquiry, inquiry_id)
        if inquiry is None:
            raise NotFoundError("Inquiry not found")
        return inquiry

    async def _update(self, inquiry_id: str, changes: dict) -> Inquiry:
        try:
            return await self.store.update(Inquiry, inquiry_id, changes)
        except RecordNotFound:
            raise NotFoundError("Inquiry not found")

    async def create_inquiry(self, data: InquiryCreateSchema) -> InquiryResponseSchema:
        """
        Open a new inquiry (status new, priority medium unless given).

        Raises:
            ValidationError: Missing subject/message, or neither a customerId
                nor contact name + email
        """
        validate_inquiry_create(data)

        now = self.clock()
        contact = ContactInfo(**data.contactInfo.model_dump()) if data.contactInfo else ContactInfo()
        inquiry = Inquiry(
            customer_id=data.customerId or None,
            vehicle_id=data.vehicleId or None,
            type=data.type,
            subject=data.subject.strip(),
            message=data.message.strip(),
            contact_info=contact,
            status=InquiryStatus.NEW,
            priority=data.priority or InquiryPriority.MEDIUM,
            tags=data.tags,
            created_at=now,
            updated_at=now,
        )
        inquiry = await self.store.create(inquiry)

        logger.info(f"New {inquiry.type.value} inquiry {inquiry.id}: {inquiry.subject}")
        return inquiry_to_response(inquiry)

    async def get_inquiry(self, inquiry_id: str) -> InquiryResponseSchema:
        return inquiry_to_response(await self._require(inquiry_id))

    async def list_inquiries(
        self,
        status: Optional[str] = None,
        priority: Optional[InquiryPriority] = None
    ) -> List[InquiryResponseSchema]:
        """Inquiries, newest first. status accepts the legacy labels too."""
        filters = {}
        if status is not None:
            filters["status"] = parse_inquiry_status(status)
        if priority is not None:
            filters["priority"] = priority

        inquiries = await self.store.list(Inquiry, filters)
        inquiries.sort(key=lambda i: as_utc(i.created_at), reverse=True)
        return [inquiry_to_response(i) for i in inquiries]

    async def update_inquiry(self, inquiry_id: str, data: InquiryUpdateSchema) -> InquiryResponseSchema:
        """
        Admin update. Any status may be set here; the first move into
        resolved or closed stamps resolvedAt, and reopening clears it.
        assignedTo can be cleared with null.
        """
        sent = data.model_dump(exclude_unset=True)
        validate_inquiry_update(sent)
        existing = await self._require(inquiry_id)

        changes = patch_changes(sent, NULLABLE_FIELDS)
        if "status" in changes:
            status = parse_inquiry_status(changes["status"])
            changes["status"] = status
            changes["resolved_at"] = resolved_at_for(status, existing.resolved_at, self.clock())

        inquiry = await self._update(inquiry_id, changes)
        logger.info(f"Updated inquiry {inquiry_id}: {', '.join(sorted(changes)) or 'no changes'}")
        return inquiry_to_response(inquiry)

    async def delete_inquiry(self, inquiry_id: str) -> None:
        try:
            await self.store.delete(Inquiry, inquiry_id)
        except RecordNotFound:
            raise NotFoundError("Inquiry not found")
        logger.info(f"Deleted inquiry {inquiry_id}")

    async def add_response(
        self,
        inquiry_id: str,
        data: ResponseCreateSchema,
        responded_by: Optional[str] = None
    ) -> InquiryResponseSchema:
        """
        Append a staff response and mark the inquiry resolved.

        A closed inquiry stays closed. resolvedAt is only stamped once.

        Args:
            responded_by: Fallback responder when the payload names none
        """
        validate_response_message(data.message)
        now = self.clock()
        response = InquiryResponse(
            message=data.message.strip(),
            responded_by=data.respondedBy or responded_by or "admin",
            responded_at=now,
        )
        try:
            inquiry = await self.store.append(Inquiry, inquiry_id, "responses", response)
        except RecordNotFound:
            raise NotFoundError("Inquiry not found")

        status = status_after_response(inquiry.status)
        inquiry = await self._update(inquiry_id, {
            "status": status,
            "resolved_at": resolved_at_for(status, inquiry.resolved_at, now),
        })

        logger.info(f"Response added to inquiry {inquiry_id} by {response.responded_by}")
        return inquiry_to_response(inquiry)

    async def assign_inquiry(self, inquiry_id: str, data: AssignSchema) -> InquiryResponseSchema:
        """Hand the inquiry to a staff member; status moves to in_progress."""
        if not data.assignedTo or not data.assignedTo.strip():
            raise ValidationError.from_problems([{"param": "assignedTo", "msg": "Assignee is required"}])

        existing = await self._require(inquiry_id)
        status = status_after_assignment(existing.status)
        inquiry = await self._update(inquiry_id, {
            "assigned_to": data.assignedTo.strip(),
            "status": status,
            "resolved_at": resolved_at_for(status, existing.resolved_at, self.clock()),
        })

        logger.info(f"Inquiry {inquiry_id} assigned to {inquiry.assigned_to}")
        return inquiry_to_response(inquiry)

    async def inquiry_stats(self) -> InquiryStatsSchema:
        inquiries = await self.store.list(Inquiry)

        def count_status(status: InquiryStatus) -> int:
            return sum(1 for i in inquiries if i.status == status)

        return InquiryStatsSchema(
            total=len(inquiries),
            new=count_status(InquiryStatus.NEW),
            inProgress=count_status(InquiryStatus.IN_PROGRESS),
            resolved=count_status(InquiryStatus.RESOLVED),
            closed=count_status(InquiryStatus.CLOSED),
            highPriority=sum(1 for i in inquiries if i.priority == InquiryPriority.HIGH),
            urgent=sum(1 for i in inquiries if i.priority == InquiryPriority.URGENT),
        )
