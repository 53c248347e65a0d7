"""
Ashram (tenant) API endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select, SQLModel, Field
from pydantic import EmailStr, field_validator
from typing import List, Optional
from datetime import datetime
import re
import structlog
import uuid

from ashram_connect.core.clock import utc_now
from ashram_connect.core.database import get_session
from ashram_connect.core.dependencies import get_actor, get_current_user_id, require_capability
from ashram_connect.core.permissions import Actor, Capability
from ashram_connect.models.ashram import Ashram, AshramAdmin
from ashram_connect.models.user import User

logger = structlog.get_logger(__name__)
router = APIRouter()

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


# Pydantic schemas
class AshramCreate(SQLModel):
    """Schema for creating an ashram"""
    name: str = Field(min_length=2, max_length=255)
    slug: str = Field(min_length=2, max_length=100)
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    primary_color: Optional[str] = Field(default=None, max_length=32)
    secondary_color: Optional[str] = Field(default=None, max_length=32)
    accent_color: Optional[str] = Field(default=None, max_length=32)
    is_active: bool = True

    @field_validator("slug")
    @classmethod
    def slug_is_url_safe(cls, value: str) -> str:
        if not re.match(SLUG_PATTERN, value):
            raise ValueError("Slug may only contain lowercase letters, digits and single hyphens")
        return value


class AshramUpdate(SQLModel):
    """Schema for updating an ashram; the slug is fixed once created"""
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[EmailStr] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    primary_color: Optional[str] = Field(default=None, max_length=32)
    secondary_color: Optional[str] = Field(default=None, max_length=32)
    accent_color: Optional[str] = Field(default=None, max_length=32)
    is_active: Optional[bool] = None


class AshramResponse(SQLModel):
    """Schema for ashram response"""
    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    logo_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    accent_color: Optional[str] = None
    is_active: bool
    created_at: datetime


class AshramAdminCreate(SQLModel):
    """Schema for granting tenant-admin rights by account email"""
    email: EmailStr
    role: str = Field(default="admin", max_length=50)


class AshramAdminResponse(SQLModel):
    id: uuid.UUID
    ashram_id: uuid.UUID
    user_id: uuid.UUID
    email: Optional[str] = None
    role: str
    created_at: datetime


def _get_ashram(session: Session, ashram_id: uuid.UUID) -> Ashram:
    ashram = session.get(Ashram, ashram_id)
    if not ashram:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ashram not found")
    return ashram


def _require_ashram_manager(actor: Actor, ashram_id: uuid.UUID) -> None:
    """Platform admins manage every ashram, tenant admins only their own"""
    if actor.can(Capability.MANAGE_TENANTS) or actor.is_tenant_admin(ashram_id):
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=f"Permission required: {Capability.MANAGE_TENANTS.value}"
    )


@router.get("/", response_model=List[AshramResponse])
def list_ashrams(session: Session = Depends(get_session)):
    """Public directory of active ashrams"""
    return session.exec(
        select(Ashram).where(Ashram.is_active == True).order_by(Ashram.name)  # noqa: E712
    ).all()


@router.get("/all", response_model=List[AshramResponse])
def list_all_ashrams(
    skip: int = 0,
    limit: int = 100,
    actor: Actor = Depends(require_capability(Capability.MANAGE_TENANTS)),
    session: Session = Depends(get_session)
):
    """Every ashram, including inactive ones"""
    return session.exec(
        select(Ashram).order_by(Ashram.created_at.desc()).offset(skip).limit(limit)
    ).all()


@router.get("/{slug}", response_model=AshramResponse)
def get_ashram_by_slug(
    slug: str,
    session: Session = Depends(get_session)
):
    """Public ashram page with branding"""
    ashram = session.exec(
        select(Ashram).where(Ashram.slug == slug, Ashram.is_active == True)  # noqa: E712
    ).first()
    if not ashram:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ashram not found")
    return ashram


@router.post("/", response_model=AshramResponse, status_code=status.HTTP_201_CREATED)
def create_ashram(
    ashram_data: AshramCreate,
    actor: Actor = Depends(require_capability(Capability.MANAGE_TENANTS)),
    session: Session = Depends(get_session)
):
    """Create a new ashram"""
    if session.exec(select(Ashram).where(Ashram.slug == ashram_data.slug)).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Slug already in use"
        )

    try:
        ashram = Ashram(**ashram_data.model_dump())
        session.add(ashram)
        session.commit()
        session.refresh(ashram)
        logger.info(f"Ashram created: {ashram.id} ({ashram.slug})")
        return ashram
    except Exception as e:
        session.rollback()
        logger.error(f"Failed to create ashram: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Failed to create ashram"
        )


@router.patch("/{ashram_id}", response_model=AshramResponse)
def update_ashram(
    ashram_id: uuid.UUID,
    ashram_update: AshramUpdate,
    actor: Actor = Depends(require_capability(Capability.MANAGE_TENANTS)),
    session: Session = Depends(get_session)
):
    """Update ashram details, branding and lifecycle"""
    ashram = _get_ashram(session, ashram_id)

    for key, value in ashram_update.model_dump(exclude_unset=True).items():
        setattr(ashram, key, value)

    ashram.updated_at = utc_now()
    session.add(ashram)
    session.commit()
    session.refresh(ashram)
    logger.info(f"Ashram updated: {ashram_id}")
    return ashram


@router.get("/{ashram_id}/admins", response_model=List[AshramAdminResponse])
def list_ashram_admins(
    ashram_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    actor: Actor = Depends(get_actor),
    session: Session = Depends(get_session)
):
    """Accounts administering one ashram"""
    _require_ashram_manager(actor, ashram_id)
    _get_ashram(session, ashram_id)

    rows = session.exec(
        select(AshramAdmin, User.email)
        .join(User, User.id == AshramAdmin.user_id)
        .where(AshramAdmin.ashram_id == ashram_id)
        .order_by(AshramAdmin.created_at)
    ).all()
    return [
        AshramAdminResponse(**assignment.model_dump(), email=email)
        for assignment, email in rows
    ]


@router.post("/{ashram_id}/admins", response_model=AshramAdminResponse, status_code=status.HTTP_201_CREATED)
def add_ashram_admin(
    ashram_id: uuid.UUID,
    admin_data: AshramAdminCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    actor: Actor = Depends(get_actor),
    session: Session = Depends(get_session)
):
    """Grant an account admin rights over one ashram"""
    _require_ashram_manager(actor, ashram_id)
    _get_ashram(session, ashram_id)

    user = session.exec(select(User).where(User.email == admin_data.email.lower())).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    existing = session.exec(
        select(AshramAdmin).where(AshramAdmin.ashram_id == ashram_id, AshramAdmin.user_id == user.id)
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User already administers this ashram"
        )

    assignment = AshramAdmin(ashram_id=ashram_id, user_id=user.id, role=admin_data.role)
    session.add(assignment)
    session.commit()
    session.refresh(assignment)

    logger.info(f"Ashram admin added: {user.id} on {ashram_id} by {user_id}")
    return AshramAdminResponse(**assignment.model_dump(), email=user.email)


@router.delete("/{ashram_id}/admins/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_ashram_admin(
    ashram_id: uuid.UUID,
    assignment_id: uuid.UUID,
    user_id: uuid.UUID = Depends(get_current_user_id),
    actor: Actor = Depends(get_actor),
    session: Session = Depends(get_session)
):
    """Revoke an ashram admin assignment"""
    _require_ashram_manager(actor, ashram_id)

    assignment = session.get(AshramAdmin, assignment_id)
    if not assignment or assignment.ashram_id != ashram_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Assignment not found")

    session.delete(assignment)
    session.commit()

    logger.info(f"Ashram admin removed: {assignment_id} on {ashram_id} by {user_id}")
    return None
