from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel


class ResourceType(str, Enum):
    PROJECT = "project"
    EVENT = "event"


class MembershipStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    DECLINED = "declined"
    WITHDRAWN = "withdrawn"


class Decision(str, Enum):
    APPROVE = "approve"
    DECLINE = "decline"


# Valid state transitions for a membership request
MEMBERSHIP_TRANSITIONS: dict[MembershipStatus, list[MembershipStatus]] = {
    MembershipStatus.PENDING: [
        MembershipStatus.APPROVED,
        MembershipStatus.DECLINED,
        MembershipStatus.WITHDRAWN,
    ],
    MembershipStatus.APPROVED: [MembershipStatus.WITHDRAWN],
    MembershipStatus.DECLINED: [],
    MembershipStatus.WITHDRAWN: [],
}

# Statuses that occupy the (resource, user) slot
LIVE_STATUSES: list[MembershipStatus] = [
    MembershipStatus.PENDING,
    MembershipStatus.APPROVED,
    MembershipStatus.DECLINED,
]

DECISION_TARGETS: dict[Decision, MembershipStatus] = {
    Decision.APPROVE: MembershipStatus.APPROVED,
    Decision.DECLINE: MembershipStatus.DECLINED,
}


def validate_transition(
    current: MembershipStatus, target: MembershipStatus
) -> tuple[bool, str]:
    """Validate a membership status transition.

    Returns (is_valid, error_message).
    """
    if target in MEMBERSHIP_TRANSITIONS[current]:
        return True, ""
    if not MEMBERSHIP_TRANSITIONS[current]:
        return False, f"Request is already {current.value}"
    return False, f"Cannot move a request from {current.value} to {target.value}"


class ErrorBody(BaseModel):
    code: str
    message: str


class APIError(BaseModel):
    error: ErrorBody
    detail: Optional[Any] = None
