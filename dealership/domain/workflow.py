"""
Lifecycle rules for test drives and inquiries.

Test drives: scheduled / completed / cancelled with every transition
allowed (including back to scheduled).

Inquiries: new -> in_progress (on assignment) -> resolved (on response)
-> closed. Only assignment and response move the status implicitly;
anything else is an explicit admin update.
"""
from datetime import datetime
from typing import Any, Dict, FrozenSet, Optional

from dealership.core.exceptions import ValidationError
from dealership.models.customer import TestDriveStatus
from dealership.models.inquiry import InquiryStatus, migrate_status

TEST_DRIVE_TRANSITIONS: Dict[TestDriveStatus, FrozenSet[TestDriveStatus]] = {
    status: frozenset(TestDriveStatus) for status in TestDriveStatus
}


def parse_test_drive_status(value: Any) -> TestDriveStatus:
    try:
        return TestDriveStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in TestDriveStatus)
        raise ValidationError.from_problems([{
            "param": "status",
            "msg": f"Invalid test drive status '{value}'. Allowed: {allowed}",
        }])


def can_transition_test_drive(current: TestDriveStatus, new: TestDriveStatus) -> bool:
    return new in TEST_DRIVE_TRANSITIONS[current]


def parse_inquiry_status(value: Any) -> InquiryStatus:
    """Accept canonical values plus the legacy 'assigned'/'responded' labels."""
    try:
        return InquiryStatus(migrate_status(value))
    except ValueError:
        allowed = ", ".join(s.value for s in InquiryStatus)
        raise ValidationError.from_problems([{
            "param": "status",
            "msg": f"Invalid inquiry status '{value}'. Allowed: {allowed}",
        }])


def status_after_assignment(current: InquiryStatus) -> InquiryStatus:
    return InquiryStatus.IN_PROGRESS


def status_after_response(current: InquiryStatus) -> InquiryStatus:
    # A response never reopens a closed inquiry
    if current == InquiryStatus.CLOSED:
        return current
    return InquiryStatus.RESOLVED


def resolved_at_for(
    status: InquiryStatus,
    resolved_at: Optional[datetime],
    now: datetime
) -> Optional[datetime]:
    """
    Stamp the first move into resolved/closed and keep it through later
    moves between the two. Reopening (new or in_progress) clears it.
    """
    if status not in (InquiryStatus.RESOLVED, InquiryStatus.CLOSED):
        return None
    return resolved_at if resolved_at is not None else now
