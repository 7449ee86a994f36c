"""Resource model (a joinable project or event)."""

import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Resource(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "resources"
    __table_args__ = (
        sa.CheckConstraint("capacity >= 0", name="ck_resources_capacity_non_negative"),
        sa.CheckConstraint("approved_count >= 0", name="ck_resources_approved_count_non_negative"),
    )

    type: str = Field(nullable=False, index=True)  # project | event
    title: str = Field(nullable=False)
    owner_id: uuid.UUID = Field(nullable=False, index=True)
    capacity: int = Field(default=0, nullable=False)  # 0 = unlimited
    approved_count: int = Field(default=0, nullable=False)
