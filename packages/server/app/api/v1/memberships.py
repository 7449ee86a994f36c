"""
Membership API endpoints.

POST /api/v1/memberships/join                — Request to join a project / RSVP to an event
POST /api/v1/memberships/cancel              — Withdraw a request or leave
POST /api/v1/memberships/{request_id}/decide — Owner approves or declines
GET  /api/v1/memberships/mine                — Caller's own memberships
"""

from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_caller_id
from app.core.database import get_session
from app.core.errors import ERROR_RESPONSES
from app.services import approvals, requests, views
from nested_shared.schemas.common import MembershipStatus
from nested_shared.schemas.memberships import (
    CancelRequest,
    DecideRequest,
    JoinRequest,
    MembershipStatusResponse,
    MyMembershipListResponse,
    OkResponse,
)

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("/join", response_model=MembershipStatusResponse, status_code=201)
async def join(
    body: JoinRequest,
    response: Response,
    caller_id: uuid.UUID = Depends(get_caller_id),
    session: AsyncSession = Depends(get_session),
):
    """Request to join a resource. Re-joining returns the existing record (200)."""
    record, created = await requests.request_join(
        session,
        body.resource_id,
        caller_id,
        resource_type=body.resource_type,
        role=body.role,
        message=body.message,
    )
    if not created:
        response.status_code = 200
    return MembershipStatusResponse(request_id=record.id, status=record.status)


@router.post("/cancel", response_model=OkResponse)
async def cancel(
    body: CancelRequest,
    caller_id: uuid.UUID = Depends(get_caller_id),
    session: AsyncSession = Depends(get_session),
):
    """Withdraw a pending request or leave an approved membership."""
    await requests.cancel_request(session, body.resource_id, caller_id)
    return OkResponse()


@router.post("/{request_id}/decide", response_model=MembershipStatusResponse)
async def decide(
    request_id: uuid.UUID,
    body: DecideRequest,
    caller_id: uuid.UUID = Depends(get_caller_id),
    session: AsyncSession = Depends(get_session),
):
    """Approve or decline a pending request (resource owner only)."""
    record = await approvals.decide(session, request_id, caller_id, body.decision)
    return MembershipStatusResponse(request_id=record.id, status=record.status)


@router.get("/mine", response_model=MyMembershipListResponse)
async def list_mine(
    status: Optional[MembershipStatus] = None,
    caller_id: uuid.UUID = Depends(get_caller_id),
    session: AsyncSession = Depends(get_session),
):
    """List the caller's memberships, optionally filtered by status."""
    items = await views.list_user_memberships(session, caller_id, status)
    return MyMembershipListResponse(data=items)
