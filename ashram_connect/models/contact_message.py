"""
Contact message model for inbound inquiries
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid

from ashram_connect.core.clock import utc_now
from ashram_connect.models.columns import enum_column, timestamp_column


class InquiryType(str, Enum):
    """Type tag of an inquiry"""
    GENERAL = "general"
    DONATION = "donation"
    VOLUNTEER = "volunteer"
    VENDOR = "vendor"


class ContactMessage(SQLModel, table=True):
    """Inbound inquiry with a read/unread flag"""

    __tablename__ = "contact_messages"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    ashram_id: Optional[uuid.UUID] = Field(default=None, foreign_key="ashrams.id", index=True, nullable=True)

    name: str = Field(max_length=100)
    email: str = Field(max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    inquiry_type: InquiryType = Field(default=InquiryType.GENERAL, sa_column=enum_column(InquiryType, "inquiry_type"))
    subject: Optional[str] = Field(default=None, max_length=200)
    message: str = Field(max_length=2000)
    is_read: bool = Field(default=False, index=True)

    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column(index=True))
