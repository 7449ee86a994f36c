from typing import Optional
from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from .common import ResourceType


class ResourceCreate(BaseModel):
    type: ResourceType
    title: str = Field(..., min_length=1, max_length=200)
    capacity: int = Field(0, ge=0, description="Maximum approved members (0 = unlimited)")


class ResourceRead(BaseModel):
    id: UUID
    type: ResourceType
    title: str
    owner_id: UUID
    capacity: int
    approved_count: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
