"""
Ashram model - Multi-tenancy foundation
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import UniqueConstraint
from datetime import datetime
from typing import Optional
import uuid

from ashram_connect.core.clock import utc_now
from ashram_connect.models.columns import timestamp_column


class Ashram(SQLModel, table=True):
    """An independently branded orphanage account (the tenant)"""

    __tablename__ = "ashrams"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(index=True, max_length=255)
    slug: str = Field(unique=True, index=True, max_length=100, description="Unique identifier used in /tenant/{slug} paths")
    description: Optional[str] = None

    # Contact
    address: Optional[str] = None
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=255)
    website: Optional[str] = None

    # Branding
    logo_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    primary_color: Optional[str] = Field(default=None, max_length=32)
    secondary_color: Optional[str] = Field(default=None, max_length=32)
    accent_color: Optional[str] = Field(default=None, max_length=32)

    # Deactivation hides the ashram from public listings, history is kept
    is_active: bool = Field(default=True, index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
    updated_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))


class AshramAdmin(SQLModel, table=True):
    """Per-ashram management right, distinct from the global role"""

    __tablename__ = "ashram_admins"
    __table_args__ = (
        UniqueConstraint("ashram_id", "user_id", name="uq_ashram_admin_user"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    ashram_id: uuid.UUID = Field(foreign_key="ashrams.id", index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    role: str = Field(default="admin", max_length=50)
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
