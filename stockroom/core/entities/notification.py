"""Notification entity."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from stockroom.core.clock import utc_now


class Notification(BaseModel):
    """An event addressed to one user, or to everyone when user_id is None."""

    id: int | None = None
    user_id: int | None = None
    title: str
    message: str = ""
    type: str = "info"
    meta: dict[str, Any] | None = None
    created_at: datetime = Field(default_factory=utc_now)
    read_at: datetime | None = None

    @property
    def is_read(self) -> bool:
        return self.read_at is not None
