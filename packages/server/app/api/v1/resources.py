"""
Resource endpoints: registration, lookup, membership view, member removal.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import get_caller_id
from app.core.database import get_session
from app.core.errors import ERROR_RESPONSES
from app.services import requests, views
from app.services import resources as resource_service
from nested_shared.schemas.memberships import MembershipStatusResponse, MembershipView
from nested_shared.schemas.resources import ResourceCreate, ResourceRead

router = APIRouter(responses=ERROR_RESPONSES)


@router.post("", response_model=ResourceRead, status_code=201)
async def create_resource(
    body: ResourceCreate,
    caller_id: uuid.UUID = Depends(get_caller_id),
    session: AsyncSession = Depends(get_session),
):
    """Register a project or event. The caller becomes its owner."""
    resource = await resource_service.create_resource(body, caller_id, session)
    return ResourceRead.model_validate(resource)


@router.get("/{resource_id}", response_model=ResourceRead)
async def get_resource(
    resource_id: uuid.UUID,
    caller_id: uuid.UUID = Depends(get_caller_id),
    session: AsyncSession = Depends(get_session),
):
    resource = await resource_service.get_resource_or_404(session, resource_id)
    return ResourceRead.model_validate(resource)


@router.get("/{resource_id}/membership", response_model=MembershipView)
async def get_membership(
    resource_id: uuid.UUID,
    caller_id: uuid.UUID = Depends(get_caller_id),
    session: AsyncSession = Depends(get_session),
):
    """Approved members for everyone; pending requests for the owner only."""
    return await views.get_membership_view(session, resource_id, caller_id)


@router.delete("/{resource_id}/members/{user_id}", response_model=MembershipStatusResponse)
async def remove_member(
    resource_id: uuid.UUID,
    user_id: uuid.UUID,
    caller_id: uuid.UUID = Depends(get_caller_id),
    session: AsyncSession = Depends(get_session),
):
    """Remove an approved member (owner only)."""
    record = await requests.remove_member(session, resource_id, user_id, caller_id)
    return MembershipStatusResponse(request_id=record.id, status=record.status)
