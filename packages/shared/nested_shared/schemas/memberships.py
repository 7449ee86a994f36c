"""
Membership-related Pydantic schemas shared between server and clients.

Covers: join/cancel/decide request and response bodies, the membership
view returned to resource pages, and the bounds on a project pitch.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_serializer, model_validator

from .common import Decision, MembershipStatus, ResourceType
from .resources import ResourceRead

# Pitch bounds for project join requests (inclusive)
MESSAGE_MIN_LENGTH = 20
MESSAGE_MAX_LENGTH = 300
ROLE_MAX_LENGTH = 80


def validate_pitch(
    resource_type: ResourceType,
    role: Optional[str],
    message: Optional[str],
) -> tuple[bool, str]:
    """Validate the optional role and message sent with a join request.

    Rules:
    - Role and message apply to project requests only.
    - A role is at most ROLE_MAX_LENGTH characters.
    - A message is MESSAGE_MIN_LENGTH..MESSAGE_MAX_LENGTH characters.

    Returns (is_valid, error_message).
    """
    if resource_type == ResourceType.EVENT:
        if role is not None or message is not None:
            return False, "Role and message can only be sent with a project request"
        return True, ""

    if role is not None and len(role) > ROLE_MAX_LENGTH:
        return False, f"Role must be at most {ROLE_MAX_LENGTH} characters"

    if message is not None and not (
        MESSAGE_MIN_LENGTH <= len(message) <= MESSAGE_MAX_LENGTH
    ):
        return False, (
            f"Message must be between {MESSAGE_MIN_LENGTH} and "
            f"{MESSAGE_MAX_LENGTH} characters (got {len(message)})"
        )

    return True, ""


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class JoinRequest(BaseModel):
    resource_id: uuid.UUID
    resource_type: ResourceType
    role: Optional[str] = Field(None, description="Team role the requester wants to fill")
    message: Optional[str] = Field(None, description="Short pitch shown to the owner")

    @model_validator(mode="after")
    def _check_pitch(self) -> "JoinRequest":
        valid, msg = validate_pitch(self.resource_type, self.role, self.message)
        if not valid:
            raise ValueError(msg)
        return self


class CancelRequest(BaseModel):
    resource_id: uuid.UUID


class DecideRequest(BaseModel):
    decision: Decision


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class MembershipStatusResponse(BaseModel):
    request_id: uuid.UUID
    status: MembershipStatus


class OkResponse(BaseModel):
    ok: bool = True


class MemberRead(BaseModel):
    request_id: uuid.UUID
    user_id: uuid.UUID
    status: MembershipStatus
    role: Optional[str] = None
    message: Optional[str] = None
    requested_at: datetime
    decided_at: Optional[datetime] = None

    @model_serializer(mode="wrap")
    def _omit_hidden_message(self, handler):
        # Pitches are only shown to the owner and the member who wrote them.
        data = handler(self)
        if self.message is None:
            data.pop("message", None)
        return data


class MembershipView(BaseModel):
    resource: ResourceRead
    approved_members: list[MemberRead]
    pending_requests: Optional[list[MemberRead]] = None  # owner only
    my_request: Optional[MemberRead] = None
    spots_left: Optional[int] = None  # null = unlimited


class MyMembershipItem(BaseModel):
    request_id: uuid.UUID
    resource_id: uuid.UUID
    resource_type: ResourceType
    resource_title: str
    status: MembershipStatus
    role: Optional[str] = None
    requested_at: datetime
    decided_at: Optional[datetime] = None


class MyMembershipListResponse(BaseModel):
    data: list[MyMembershipItem]
