# SQLModel definitions, imported here to ensure metadata is populated for Alembic.
from .base import UUIDMixin, TimestampMixin  # noqa: F401
from .resource import Resource  # noqa: F401
from .membership import MembershipRequest  # noqa: F401
