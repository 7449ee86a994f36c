"""
Unit tests for the capacity policy (no DB needed).
"""

import uuid

from app.models.resource import Resource
from app.services.capacity import can_accept, spots_left


def _resource(capacity: int) -> Resource:
    return Resource(type="event", title="Hack Night", owner_id=uuid.uuid4(), capacity=capacity)


class TestCanAccept:
    def test_unlimited_always_accepts(self):
        r = _resource(0)
        assert can_accept(r, 0)
        assert can_accept(r, 10_000)

    def test_below_capacity(self):
        assert can_accept(_resource(2), 1)

    def test_at_capacity(self):
        assert not can_accept(_resource(2), 2)

    def test_over_capacity(self):
        assert not can_accept(_resource(2), 3)


class TestSpotsLeft:
    def test_unlimited_has_no_count(self):
        assert spots_left(_resource(0), 5) is None

    def test_finite(self):
        assert spots_left(_resource(5), 3) == 2

    def test_never_negative(self):
        assert spots_left(_resource(1), 4) == 0
