"""
Service tests for joining, cancelling and member removal.

Tests cover:
- Idempotent join (one live record per resource/user)
- Event RSVP capacity gating
- Project pitch validation
- Cancel / leave semantics and seat release
- Owner removal of approved members
- A join that loses the insert race to a concurrent join
"""

from __future__ import annotations

import uuid

import pytest

from app.core.errors import Forbidden, NotFound, ResourceFull, ValidationError
from app.services import approvals, requests, store
from nested_shared.schemas.common import Decision, MembershipStatus, ResourceType

PITCH = "I would love to help build the onboarding flow."


class TestJoinProject:
    @pytest.mark.asyncio
    async def test_join_creates_pending(self, session, make_resource):
        project = await make_resource()
        user = uuid.uuid4()
        record, created = await requests.request_join(
            session, project.id, user, role="Designer", message=PITCH
        )
        assert created
        assert record.status == MembershipStatus.PENDING.value
        assert record.role == "Designer"
        assert record.message == PITCH
        assert record.decided_at is None

    @pytest.mark.asyncio
    async def test_join_twice_returns_existing(self, session, make_resource):
        project = await make_resource()
        user = uuid.uuid4()
        first, _ = await requests.request_join(session, project.id, user, message=PITCH)
        second, created = await requests.request_join(session, project.id, user)
        assert not created
        assert second.id == first.id
        rows = await store.list_requests(session, project.id, MembershipStatus.PENDING)
        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_short_message_rejected(self, session, make_resource):
        project = await make_resource()
        with pytest.raises(ValidationError):
            await requests.request_join(session, project.id, uuid.uuid4(), message="x" * 15)

    @pytest.mark.asyncio
    async def test_25_char_message_accepted(self, session, make_resource):
        project = await make_resource()
        record, _ = await requests.request_join(
            session, project.id, uuid.uuid4(), message="x" * 25
        )
        assert record.status == MembershipStatus.PENDING.value

    @pytest.mark.asyncio
    async def test_full_project_still_accepts_requests(self, session, make_resource, owner_id):
        project = await make_resource(capacity=1)
        first, _ = await requests.request_join(session, project.id, uuid.uuid4())
        await approvals.decide(session, first.id, owner_id, Decision.APPROVE)

        record, created = await requests.request_join(session, project.id, uuid.uuid4())
        assert created
        assert record.status == MembershipStatus.PENDING.value

    @pytest.mark.asyncio
    async def test_unknown_resource(self, session):
        with pytest.raises(NotFound):
            await requests.request_join(session, uuid.uuid4(), uuid.uuid4())

    @pytest.mark.asyncio
    async def test_type_mismatch_rejected(self, session, make_resource):
        project = await make_resource()
        with pytest.raises(ValidationError):
            await requests.request_join(
                session, project.id, uuid.uuid4(), resource_type=ResourceType.EVENT
            )

    @pytest.mark.asyncio
    async def test_declined_user_gets_declined_record_back(self, session, make_resource, owner_id):
        project = await make_resource()
        user = uuid.uuid4()
        record, _ = await requests.request_join(session, project.id, user)
        await approvals.decide(session, record.id, owner_id, Decision.DECLINE)

        again, created = await requests.request_join(session, project.id, user)
        assert not created
        assert again.id == record.id
        assert again.status == MembershipStatus.DECLINED.value


class TestJoinEvent:
    @pytest.mark.asyncio
    async def test_capacity_two_scenario(self, session, make_resource):
        event = await make_resource(type=ResourceType.EVENT, capacity=2)

        a, _ = await requests.request_join(session, event.id, uuid.uuid4())
        assert a.status == MembershipStatus.APPROVED.value
        assert a.decided_at is not None
        assert event.approved_count == 1

        b, _ = await requests.request_join(session, event.id, uuid.uuid4())
        assert b.status == MembershipStatus.APPROVED.value
        assert event.approved_count == 2

        with pytest.raises(ResourceFull):
            await requests.request_join(session, event.id, uuid.uuid4())
        assert event.approved_count == 2

    @pytest.mark.asyncio
    async def test_unlimited_event(self, session, make_resource):
        event = await make_resource(type=ResourceType.EVENT, capacity=0)
        for _ in range(5):
            record, _ = await requests.request_join(session, event.id, uuid.uuid4())
            assert record.status == MembershipStatus.APPROVED.value
        assert event.approved_count == 5
        assert event.capacity == 0

    @pytest.mark.asyncio
    async def test_attendee_rejoin_is_idempotent_when_full(self, session, make_resource):
        event = await make_resource(type=ResourceType.EVENT, capacity=1)
        user = uuid.uuid4()
        first, _ = await requests.request_join(session, event.id, user)
        again, created = await requests.request_join(session, event.id, user)
        assert not created
        assert again.id == first.id

    @pytest.mark.asyncio
    async def test_event_rejects_message(self, session, make_resource):
        event = await make_resource(type=ResourceType.EVENT)
        with pytest.raises(ValidationError):
            await requests.request_join(session, event.id, uuid.uuid4(), message=PITCH)


class TestJoinRace:
    @pytest.fixture
    def stale_next_lookup(self, monkeypatch):
        """Make the next live-record lookup miss, as if a concurrent join had not landed yet."""
        real_find = store.find_live_request

        def _arm():
            calls = []

            async def _find(*args):
                calls.append(args)
                if len(calls) == 1:
                    return None
                return await real_find(*args)

            monkeypatch.setattr(store, "find_live_request", _find)

        return _arm

    @pytest.mark.asyncio
    async def test_duplicate_insert_returns_winner_and_keeps_earlier_work(
        self, session, session_factory, make_resource, stale_next_lookup
    ):
        event = await make_resource(type=ResourceType.EVENT, capacity=5)
        user = uuid.uuid4()
        winner, _ = await requests.request_join(session, event.id, user)
        await session.commit()

        # Uncommitted work the caller did before joining
        unrelated = await make_resource(title="Robotics Club Site")
        stale_next_lookup()

        record, created = await requests.request_join(session, event.id, user)
        assert not created
        assert record.id == winner.id
        assert event.approved_count == 1
        await session.commit()

        async with session_factory() as fresh:
            assert await store.get_resource(fresh, unrelated.id) is not None
            reloaded = await store.get_resource(fresh, event.id)
            assert reloaded.approved_count == 1


class TestCancel:
    @pytest.mark.asyncio
    async def test_cancel_without_request_is_noop(self, session, make_resource):
        project = await make_resource()
        assert await requests.cancel_request(session, project.id, uuid.uuid4()) is None

    @pytest.mark.asyncio
    async def test_cancel_pending(self, session, make_resource):
        project = await make_resource()
        user = uuid.uuid4()
        await requests.request_join(session, project.id, user)

        record = await requests.cancel_request(session, project.id, user)
        assert record.status == MembershipStatus.WITHDRAWN.value
        assert record.withdrawn_by == user
        assert record.withdrawn_at is not None

    @pytest.mark.asyncio
    async def test_leave_releases_seat(self, session, make_resource):
        event = await make_resource(type=ResourceType.EVENT, capacity=1)
        user = uuid.uuid4()
        await requests.request_join(session, event.id, user)
        assert event.approved_count == 1

        await requests.cancel_request(session, event.id, user)
        assert event.approved_count == 0

        # The freed seat is available again
        other, _ = await requests.request_join(session, event.id, uuid.uuid4())
        assert other.status == MembershipStatus.APPROVED.value

    @pytest.mark.asyncio
    async def test_cancel_after_decline_is_noop(self, session, make_resource, owner_id):
        project = await make_resource()
        user = uuid.uuid4()
        record, _ = await requests.request_join(session, project.id, user)
        await approvals.decide(session, record.id, owner_id, Decision.DECLINE)

        assert await requests.cancel_request(session, project.id, user) is None
        await session.refresh(record)
        assert record.status == MembershipStatus.DECLINED.value

    @pytest.mark.asyncio
    async def test_rejoin_after_withdraw_creates_new_record(self, session, make_resource):
        project = await make_resource()
        user = uuid.uuid4()
        first, _ = await requests.request_join(session, project.id, user)
        await requests.cancel_request(session, project.id, user)

        second, created = await requests.request_join(session, project.id, user)
        assert created
        assert second.id != first.id
        assert second.status == MembershipStatus.PENDING.value


class TestRemoveMember:
    @pytest.mark.asyncio
    async def test_owner_removes_member(self, session, make_resource, owner_id):
        event = await make_resource(type=ResourceType.EVENT, capacity=3)
        user = uuid.uuid4()
        await requests.request_join(session, event.id, user)

        record = await requests.remove_member(session, event.id, user, owner_id)
        assert record.status == MembershipStatus.WITHDRAWN.value
        assert record.withdrawn_by == owner_id
        assert event.approved_count == 0

    @pytest.mark.asyncio
    async def test_non_owner_cannot_remove(self, session, make_resource):
        event = await make_resource(type=ResourceType.EVENT)
        user = uuid.uuid4()
        await requests.request_join(session, event.id, user)
        with pytest.raises(Forbidden):
            await requests.remove_member(session, event.id, user, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_remove_pending_is_not_found(self, session, make_resource, owner_id):
        project = await make_resource()
        user = uuid.uuid4()
        await requests.request_join(session, project.id, user)
        with pytest.raises(NotFound):
            await requests.remove_member(session, project.id, user, owner_id)
