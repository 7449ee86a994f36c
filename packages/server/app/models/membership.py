"""Membership request model (one live row per resource/user pair)."""

from datetime import datetime, timezone
from typing import Optional
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import UUIDMixin

# Withdrawn rows are history; every other status holds the pair's slot.
_LIVE_ROW = sa.text("status <> 'withdrawn'")


class MembershipRequest(UUIDMixin, SQLModel, table=True):
    __tablename__ = "membership_requests"
    __table_args__ = (
        sa.Index(
            "uq_membership_requests_live_pair",
            "resource_id",
            "user_id",
            unique=True,
            postgresql_where=_LIVE_ROW,
            sqlite_where=_LIVE_ROW,
        ),
    )

    resource_id: uuid.UUID = Field(foreign_key="resources.id", nullable=False, index=True)
    resource_type: str = Field(nullable=False)  # project | event
    user_id: uuid.UUID = Field(nullable=False, index=True)
    status: str = Field(default="pending", nullable=False, index=True)
    role: Optional[str] = None
    message: Optional[str] = None
    requested_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
    )
    decided_at: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
    withdrawn_at: Optional[datetime] = Field(default=None, sa_type=sa.DateTime(timezone=True))
    withdrawn_by: Optional[uuid.UUID] = None
