"""Activity log schemas."""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel


class ActivityLogRead(BaseModel):
    id: int
    project_id: UUID
    user_id: UUID | None
    action: str
    detail: dict[str, Any]
    created_at: datetime

    model_config = {"from_attributes": True}
