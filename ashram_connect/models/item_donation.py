"""
Item donation model for pledged goods
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid

from ashram_connect.core.clock import utc_now
from ashram_connect.models.columns import enum_column, timestamp_column


class ItemDonationStatus(str, Enum):
    """Status of an item pledge"""
    PLEDGED = "pledged"


class ItemDonation(SQLModel, table=True):
    """Free-text item pledge with an optional delivery note"""

    __tablename__ = "item_donations"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    ashram_id: Optional[uuid.UUID] = Field(default=None, foreign_key="ashrams.id", index=True, nullable=True)
    need_id: Optional[uuid.UUID] = Field(default=None, foreign_key="children_needs.id", index=True, nullable=True)

    donor_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", index=True, nullable=True)
    donor_name: str = Field(max_length=100)
    donor_email: str = Field(max_length=255)
    donor_phone: Optional[str] = Field(default=None, max_length=50)

    items_description: str = Field(max_length=2000)
    delivery_note: Optional[str] = Field(default=None, max_length=2000)
    status: ItemDonationStatus = Field(
        default=ItemDonationStatus.PLEDGED, sa_column=enum_column(ItemDonationStatus, "item_donation_status")
    )

    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
