"""
Capacity policy: can a resource take one more approved member?
"""

from __future__ import annotations

from app.models.resource import Resource

UNLIMITED = 0


def can_accept(resource: Resource, current_approved_count: int) -> bool:
    """Return True when one more approved member fits.

    A capacity of 0 means unlimited.
    """
    if resource.capacity == UNLIMITED:
        return True
    return current_approved_count < resource.capacity


def spots_left(resource: Resource, current_approved_count: int) -> int | None:
    """Remaining seats, or None for an unlimited resource."""
    if resource.capacity == UNLIMITED:
        return None
    return max(resource.capacity - current_approved_count, 0)
