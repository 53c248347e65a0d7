"""
Donor visit model for in-person visit bookings
"""

from sqlmodel import Field, SQLModel
from datetime import date, datetime
from typing import Optional
from enum import Enum
import uuid

from ashram_connect.core.clock import utc_now
from ashram_connect.models.columns import enum_column, timestamp_column


# Bookable visiting slots, in display order
TIME_SLOTS = (
    "10:00 AM - 11:00 AM",
    "11:00 AM - 12:00 PM",
    "12:00 PM - 1:00 PM",
    "2:00 PM - 3:00 PM",
    "3:00 PM - 4:00 PM",
    "4:00 PM - 5:00 PM",
)


class VisitStatus(str, Enum):
    """Status of a visit booking"""
    CONFIRMED = "confirmed"


class DonorVisit(SQLModel, table=True):
    """Scheduled in-person visit"""

    __tablename__ = "donor_visits"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    ashram_id: Optional[uuid.UUID] = Field(default=None, foreign_key="ashrams.id", index=True, nullable=True)
    need_id: Optional[uuid.UUID] = Field(default=None, foreign_key="children_needs.id", index=True, nullable=True)

    donor_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", index=True, nullable=True)
    donor_name: str = Field(max_length=100)
    donor_email: str = Field(max_length=255)
    donor_phone: Optional[str] = Field(default=None, max_length=50)

    visit_date: date = Field(index=True)
    time_slot: str = Field(max_length=50)
    message: Optional[str] = Field(default=None, max_length=2000)
    status: VisitStatus = Field(default=VisitStatus.CONFIRMED, sa_column=enum_column(VisitStatus, "visit_status"))

    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
