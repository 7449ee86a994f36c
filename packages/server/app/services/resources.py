"""
Resource registry: the projects and events people can join.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFound
from app.models.resource import Resource
from app.services import store
from nested_shared.schemas.resources import ResourceCreate

log = structlog.get_logger()


async def create_resource(
    req: ResourceCreate, owner_id: uuid.UUID, session: AsyncSession
) -> Resource:
    """Register a project or event; the creator becomes its owner."""
    resource = Resource(
        type=req.type.value,
        title=req.title,
        owner_id=owner_id,
        capacity=req.capacity,
    )
    session.add(resource)
    await session.flush()
    await session.refresh(resource)

    log.info(
        "resource.created",
        resource_id=str(resource.id),
        type=resource.type,
        owner_id=str(owner_id),
        capacity=resource.capacity,
    )
    return resource


async def get_resource_or_404(session: AsyncSession, resource_id: uuid.UUID) -> Resource:
    resource = await store.get_resource(session, resource_id)
    if not resource:
        raise NotFound("Resource not found")
    return resource
