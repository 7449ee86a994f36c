"""
Resource membership view: what a resource page shows about its members.

Pending requests carry free-text pitches meant for the owner only, so
they are filtered here rather than left to the client.
"""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.membership import MembershipRequest
from app.models.resource import Resource
from app.services import store
from app.services.capacity import spots_left
from app.services.resources import get_resource_or_404
from nested_shared.schemas.common import MembershipStatus
from nested_shared.schemas.memberships import (
    MemberRead,
    MembershipView,
    MyMembershipItem,
)
from nested_shared.schemas.resources import ResourceRead


def _member(record: MembershipRequest, *, show_message: bool) -> MemberRead:
    return MemberRead(
        request_id=record.id,
        user_id=record.user_id,
        status=record.status,
        role=record.role,
        message=record.message if show_message else None,
        requested_at=record.requested_at,
        decided_at=record.decided_at,
    )


def _resource(resource: Resource) -> ResourceRead:
    return ResourceRead.model_validate(resource)


async def get_membership_view(
    session: AsyncSession, resource_id: uuid.UUID, caller_id: uuid.UUID
) -> MembershipView:
    resource = await get_resource_or_404(session, resource_id)
    is_owner = caller_id == resource.owner_id

    approved = await store.list_requests(session, resource_id, MembershipStatus.APPROVED)
    approved_members = [
        _member(r, show_message=is_owner or r.user_id == caller_id) for r in approved
    ]

    pending_requests: Optional[list[MemberRead]] = None
    if is_owner:
        pending = await store.list_requests(
            session, resource_id, MembershipStatus.PENDING, newest_first=True
        )
        pending_requests = [_member(r, show_message=True) for r in pending]

    mine = await store.find_live_request(session, resource_id, caller_id)

    return MembershipView(
        resource=_resource(resource),
        approved_members=approved_members,
        pending_requests=pending_requests,
        my_request=_member(mine, show_message=True) if mine else None,
        spots_left=spots_left(resource, resource.approved_count),
    )


async def list_user_memberships(
    session: AsyncSession,
    user_id: uuid.UUID,
    status: Optional[MembershipStatus] = None,
) -> list[MyMembershipItem]:
    """The user's own records across all resources, newest first."""
    rows = await store.list_user_requests(session, user_id, status)
    return [
        MyMembershipItem(
            request_id=req.id,
            resource_id=res.id,
            resource_type=res.type,
            resource_title=res.title,
            status=req.status,
            role=req.role,
            requested_at=req.requested_at,
            decided_at=req.decided_at,
        )
        for req, res in rows
    ]
