"""
Pydantic schemas for users
"""

from pydantic import BaseModel, Field, EmailStr
from typing import List, Optional
from datetime import datetime
import uuid

from ashram_connect.models.user import AppRole


class UserCreate(BaseModel):
    """User registration schema"""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    full_name: str = Field(..., min_length=2, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)


class UserLogin(BaseModel):
    """User login schema"""
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)


class UserResponse(BaseModel):
    """Current identity with its role and capabilities"""
    id: uuid.UUID
    email: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    role: AppRole
    is_admin: bool
    is_sub_admin: bool
    tenant_admin_of: List[uuid.UUID] = []
    capabilities: List[str] = []
    created_at: datetime
    last_login_at: Optional[datetime] = None


class UserWithRole(BaseModel):
    """Row of the admin users tab"""
    user_id: uuid.UUID
    email: str
    full_name: Optional[str] = None
    role: AppRole
    created_at: datetime


class RoleUpdate(BaseModel):
    """Global role reassignment"""
    role: AppRole
