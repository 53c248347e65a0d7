"""
Event model
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
import uuid

from ashram_connect.core.clock import utc_now
from ashram_connect.models.columns import timestamp_column


class Event(SQLModel, table=True):
    """Ashram event shown on the events page"""

    __tablename__ = "events"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    ashram_id: Optional[uuid.UUID] = Field(default=None, foreign_key="ashrams.id", index=True, nullable=True)

    title: str = Field(max_length=200)
    description: Optional[str] = None
    event_date: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True, index=True))
    location: Optional[str] = Field(default=None, max_length=255)
    image_url: Optional[str] = None
    is_upcoming: bool = Field(default=True, index=True)

    created_by: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", nullable=True)
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
    updated_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))
