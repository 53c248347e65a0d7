"""
Identity models: credentials, profile and global role assignment
"""

from sqlmodel import Field, SQLModel
from datetime import datetime
from typing import Optional
import uuid
from enum import Enum

from ashram_connect.core.clock import utc_now
from ashram_connect.models.columns import enum_column, timestamp_column


class AppRole(str, Enum):
    """Global roles for RBAC"""
    ADMIN = "admin"
    SUB_ADMIN = "sub_admin"
    USER = "user"


class User(SQLModel, table=True):
    """Account identifier plus sign-in credentials"""

    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # Authentication
    email: str = Field(index=True, unique=True, nullable=False, max_length=255)
    password_hash: str = Field(nullable=False)

    # Status
    is_active: bool = Field(default=True, index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
    last_login_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))


class Profile(SQLModel, table=True):
    """Public profile of an identity"""

    __tablename__ = "profiles"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", unique=True, index=True)
    full_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    avatar_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
    updated_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))


class UserRole(SQLModel, table=True):
    """Zero-or-one global role per identity; no row means a plain user"""

    __tablename__ = "user_roles"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", unique=True, index=True)
    role: AppRole = Field(default=AppRole.USER, sa_column=enum_column(AppRole, "app_role"))
    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
