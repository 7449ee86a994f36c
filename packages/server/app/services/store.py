"""
Membership record store: reads and conditional writes for join records.

Status changes and seat counts are never read-modify-write in Python:
- a status change is an UPDATE guarded on the status the caller last saw,
- a seat is taken or released with a single-statement increment/decrement.
A zero row count means another writer got there first.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.membership import MembershipRequest
from app.models.resource import Resource
from nested_shared.schemas.common import LIVE_STATUSES, MembershipStatus

_ROW_SYNC = {"synchronize_session": False}


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def get_resource(session: AsyncSession, resource_id: uuid.UUID) -> Optional[Resource]:
    return await session.get(Resource, resource_id)


async def get_request(
    session: AsyncSession, request_id: uuid.UUID
) -> Optional[MembershipRequest]:
    return await session.get(MembershipRequest, request_id)


async def find_live_request(
    session: AsyncSession, resource_id: uuid.UUID, user_id: uuid.UUID
) -> Optional[MembershipRequest]:
    """The pair's non-withdrawn record, if any."""
    result = await session.execute(
        select(MembershipRequest).where(
            MembershipRequest.resource_id == resource_id,
            MembershipRequest.user_id == user_id,
            MembershipRequest.status.in_([s.value for s in LIVE_STATUSES]),
        )
    )
    return result.scalars().first()


async def list_requests(
    session: AsyncSession,
    resource_id: uuid.UUID,
    status: MembershipStatus,
    *,
    newest_first: bool = False,
) -> list[MembershipRequest]:
    order_col = (
        MembershipRequest.requested_at
        if status == MembershipStatus.PENDING
        else MembershipRequest.decided_at
    )
    stmt = select(MembershipRequest).where(
        MembershipRequest.resource_id == resource_id,
        MembershipRequest.status == status.value,
    )
    stmt = stmt.order_by(order_col.desc() if newest_first else order_col.asc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_user_requests(
    session: AsyncSession,
    user_id: uuid.UUID,
    status: Optional[MembershipStatus] = None,
) -> list[tuple[MembershipRequest, Resource]]:
    """A user's records joined with their resources, newest first."""
    stmt = (
        select(MembershipRequest, Resource)
        .join(Resource, Resource.id == MembershipRequest.resource_id)
        .where(MembershipRequest.user_id == user_id)
    )
    if status is not None:
        stmt = stmt.where(MembershipRequest.status == status.value)
    stmt = stmt.order_by(MembershipRequest.requested_at.desc())
    result = await session.execute(stmt)
    return [(req, res) for req, res in result.all()]


# ---------------------------------------------------------------------------
# Writes
# ---------------------------------------------------------------------------


async def insert_request(
    session: AsyncSession, record: MembershipRequest
) -> MembershipRequest:
    """Insert a new record. The live-pair unique index may raise IntegrityError."""
    session.add(record)
    await session.flush()
    return record


async def transition(
    session: AsyncSession,
    record: MembershipRequest,
    target: MembershipStatus,
    *,
    actor_id: Optional[uuid.UUID] = None,
) -> bool:
    """Move ``record`` to ``target`` if it still has the status it was read with.

    Returns False when the row changed underneath us. The record is
    refreshed from the database either way.
    """
    now = datetime.now(timezone.utc)
    values: dict = {"status": target.value}
    if target == MembershipStatus.WITHDRAWN:
        values["withdrawn_at"] = now
        values["withdrawn_by"] = actor_id
    else:
        values["decided_at"] = now

    result = await session.execute(
        update(MembershipRequest)
        .where(
            MembershipRequest.id == record.id,
            MembershipRequest.status == record.status,
        )
        .values(**values)
        .execution_options(**_ROW_SYNC)
    )
    await session.refresh(record)
    return result.rowcount == 1


async def reserve_seat(session: AsyncSession, resource: Resource) -> bool:
    """Atomically take one seat. False when the resource is full."""
    result = await session.execute(
        update(Resource)
        .where(
            Resource.id == resource.id,
            or_(Resource.capacity == 0, Resource.approved_count < Resource.capacity),
        )
        .values(approved_count=Resource.approved_count + 1)
        .execution_options(**_ROW_SYNC)
    )
    await session.refresh(resource)
    return result.rowcount == 1


async def release_seat(session: AsyncSession, resource: Resource) -> None:
    """Atomically give back one seat (never below zero)."""
    await session.execute(
        update(Resource)
        .where(Resource.id == resource.id, Resource.approved_count > 0)
        .values(approved_count=Resource.approved_count - 1)
        .execution_options(**_ROW_SYNC)
    )
    await session.refresh(resource)
