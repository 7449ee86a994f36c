"""
Approval service: the owner's approve/decline decision on a join request.
"""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Forbidden, InvalidState, NotFound, ResourceFull
from app.models.membership import MembershipRequest
from app.services import store
from app.services.capacity import can_accept
from nested_shared.schemas.common import (
    DECISION_TARGETS,
    Decision,
    MembershipStatus,
    validate_transition,
)

log = structlog.get_logger()


async def decide(
    session: AsyncSession,
    request_id: uuid.UUID,
    decider_id: uuid.UUID,
    decision: Decision,
) -> MembershipRequest:
    """Approve or decline a pending request (resource owner only).

    Capacity is checked against the approved count at decision time, not
    at request time. A full resource leaves the request pending.
    """
    record = await store.get_request(session, request_id)
    if not record:
        raise NotFound("Request not found")

    resource = await store.get_resource(session, record.resource_id)
    if not resource:
        raise NotFound("Resource not found")

    if decider_id != resource.owner_id:
        raise Forbidden("Only the owner can decide on requests")
    if decider_id == record.user_id:
        raise Forbidden("You cannot decide on your own request")

    target = DECISION_TARGETS[decision]
    is_valid, error_msg = validate_transition(MembershipStatus(record.status), target)
    if not is_valid:
        raise InvalidState(error_msg)

    if decision == Decision.APPROVE:
        if not can_accept(resource, resource.approved_count) or not await store.reserve_seat(
            session, resource
        ):
            log.info(
                "membership.approve_rejected",
                request_id=str(record.id),
                resource_id=str(resource.id),
                capacity=resource.capacity,
                approved_count=resource.approved_count,
            )
            raise ResourceFull("No spots left; decline the request or free a spot first")

        if not await store.transition(session, record, target):
            await store.release_seat(session, resource)
            raise InvalidState(f"Request is already {record.status}")

        log.info(
            "membership.approved",
            request_id=str(record.id),
            resource_id=str(resource.id),
            user_id=str(record.user_id),
            approved_count=resource.approved_count,
        )
        return record

    if not await store.transition(session, record, target):
        raise InvalidState(f"Request is already {record.status}")

    log.info(
        "membership.declined",
        request_id=str(record.id),
        resource_id=str(resource.id),
        user_id=str(record.user_id),
    )
    return record
