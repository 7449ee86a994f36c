"""
Request service: join, cancel/leave, and owner removal.

Projects always accept the request itself and park it as pending for the
owner to review. Events have no review step: a join is approved on the
spot if a seat is free and rejected with ResourceFull otherwise.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Forbidden, InvalidState, NotFound, ResourceFull, ValidationError
from app.models.membership import MembershipRequest
from app.services import store
from app.services.capacity import can_accept
from app.services.resources import get_resource_or_404
from nested_shared.schemas.common import MembershipStatus, ResourceType
from nested_shared.schemas.memberships import validate_pitch

log = structlog.get_logger()

CANCELLABLE = (MembershipStatus.PENDING.value, MembershipStatus.APPROVED.value)


def _event_full(resource, user_id: uuid.UUID) -> ResourceFull:
    log.info(
        "membership.join_rejected",
        resource_id=str(resource.id),
        user_id=str(user_id),
        capacity=resource.capacity,
        approved_count=resource.approved_count,
    )
    return ResourceFull("This event is full")


async def request_join(
    session: AsyncSession,
    resource_id: uuid.UUID,
    user_id: uuid.UUID,
    *,
    resource_type: Optional[ResourceType] = None,
    role: Optional[str] = None,
    message: Optional[str] = None,
) -> tuple[MembershipRequest, bool]:
    """Create a join request, or return the pair's existing live record.

    Returns (record, created).
    """
    resource = await get_resource_or_404(session, resource_id)
    actual_type = ResourceType(resource.type)
    if resource_type is not None and resource_type != actual_type:
        raise ValidationError(
            f"Resource is a {actual_type.value}, not a {resource_type.value}"
        )

    valid, msg = validate_pitch(actual_type, role, message)
    if not valid:
        raise ValidationError(msg)

    existing = await store.find_live_request(session, resource_id, user_id)
    if existing:
        log.info(
            "membership.request_reused",
            request_id=str(existing.id),
            resource_id=str(resource_id),
            user_id=str(user_id),
            status=existing.status,
        )
        return existing, False

    is_event = actual_type == ResourceType.EVENT
    if is_event and not can_accept(resource, resource.approved_count):
        raise _event_full(resource, user_id)

    if is_event:
        record = MembershipRequest(
            resource_id=resource_id,
            resource_type=actual_type.value,
            user_id=user_id,
            status=MembershipStatus.APPROVED.value,
            decided_at=datetime.now(timezone.utc),
        )
    else:
        record = MembershipRequest(
            resource_id=resource_id,
            resource_type=actual_type.value,
            user_id=user_id,
            status=MembershipStatus.PENDING.value,
            role=role,
            message=message,
        )

    try:
        # Savepoint: a lost race undoes only this join, not the caller's other work.
        async with session.begin_nested():
            if is_event and not await store.reserve_seat(session, resource):
                raise _event_full(resource, user_id)
            await store.insert_request(session, record)
    except IntegrityError:
        # A concurrent join for the same pair won; use theirs.
        await session.refresh(resource)
        existing = await store.find_live_request(session, resource_id, user_id)
        if existing is None:
            raise
        return existing, False

    log.info(
        "membership.requested",
        request_id=str(record.id),
        resource_id=str(resource_id),
        resource_type=record.resource_type,
        user_id=str(user_id),
        status=record.status,
    )
    return record, True


async def cancel_request(
    session: AsyncSession, resource_id: uuid.UUID, user_id: uuid.UUID
) -> Optional[MembershipRequest]:
    """Withdraw the caller's pending request or leave an approved membership.

    A missing or already-terminal record is a no-op and returns None.
    """
    resource = await get_resource_or_404(session, resource_id)
    record = await store.find_live_request(session, resource_id, user_id)

    while record is not None and record.status in CANCELLABLE:
        was_approved = record.status == MembershipStatus.APPROVED.value
        if await store.transition(
            session, record, MembershipStatus.WITHDRAWN, actor_id=user_id
        ):
            if was_approved:
                await store.release_seat(session, resource)
            log.info(
                "membership.withdrawn",
                request_id=str(record.id),
                resource_id=str(resource_id),
                user_id=str(user_id),
                was_approved=was_approved,
            )
            return record
        # Status moved underneath us (record was refreshed); re-evaluate.

    log.info(
        "membership.cancel_noop",
        resource_id=str(resource_id),
        user_id=str(user_id),
        status=record.status if record else None,
    )
    return None


async def remove_member(
    session: AsyncSession,
    resource_id: uuid.UUID,
    member_user_id: uuid.UUID,
    owner_id: uuid.UUID,
) -> MembershipRequest:
    """Owner removes an approved member; the seat is released."""
    resource = await get_resource_or_404(session, resource_id)
    if resource.owner_id != owner_id:
        raise Forbidden("Only the owner can remove members")

    record = await store.find_live_request(session, resource_id, member_user_id)
    if record is None or record.status != MembershipStatus.APPROVED.value:
        raise NotFound("User is not an approved member")

    if not await store.transition(
        session, record, MembershipStatus.WITHDRAWN, actor_id=owner_id
    ):
        raise InvalidState(f"Membership is already {record.status}")
    await store.release_seat(session, resource)

    log.info(
        "membership.removed",
        request_id=str(record.id),
        resource_id=str(resource_id),
        user_id=str(member_user_id),
        owner_id=str(owner_id),
    )
    return record
