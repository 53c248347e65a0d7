"""
Contact inquiries API endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select, SQLModel, Field
from pydantic import EmailStr
from typing import List, Optional
from datetime import datetime
import structlog
import uuid

from ashram_connect.core.database import get_session
from ashram_connect.core.dependencies import require_capability
from ashram_connect.core.permissions import Actor, Capability
from ashram_connect.core.tenant import TenantScope, apply_tenant_scope, get_scoped_or_404, get_tenant_scope
from ashram_connect.models.contact_message import ContactMessage, InquiryType

logger = structlog.get_logger(__name__)
router = APIRouter()


# Pydantic schemas
class ContactCreate(SQLModel):
    """Schema for submitting an inquiry"""
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=50)
    inquiry_type: InquiryType = InquiryType.GENERAL
    subject: Optional[str] = Field(default=None, max_length=200)
    message: str = Field(min_length=1, max_length=2000)


class ContactResponse(SQLModel):
    """Schema for inquiry response"""
    id: uuid.UUID
    ashram_id: Optional[uuid.UUID] = None
    name: str
    email: str
    phone: Optional[str] = None
    inquiry_type: InquiryType
    subject: Optional[str] = None
    message: str
    is_read: bool
    created_at: datetime


class ReadUpdate(SQLModel):
    is_read: bool = True


@router.post("/", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
def submit_inquiry(
    contact_data: ContactCreate,
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Submit an inquiry; no sign-in needed"""
    message = ContactMessage(**contact_data.model_dump(), ashram_id=scope.tenant_id)
    session.add(message)
    session.commit()
    session.refresh(message)

    logger.info(f"Contact message received: {message.id} ({message.inquiry_type.value})")
    return message


@router.get("/", response_model=List[ContactResponse])
def list_inquiries(
    unread_only: bool = False,
    actor: Actor = Depends(require_capability(Capability.MANAGE_MESSAGES)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """List inquiries, newest first"""
    statement = apply_tenant_scope(select(ContactMessage), ContactMessage.ashram_id, scope)
    if unread_only:
        statement = statement.where(ContactMessage.is_read == False)  # noqa: E712

    return session.exec(statement.order_by(ContactMessage.created_at.desc())).all()


@router.patch("/{message_id}/read", response_model=ContactResponse)
def mark_inquiry_read(
    message_id: uuid.UUID,
    read_update: Optional[ReadUpdate] = None,
    actor: Actor = Depends(require_capability(Capability.MANAGE_MESSAGES)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Mark an inquiry read, or back to unread"""
    message = get_scoped_or_404(session, ContactMessage, message_id, scope, "Message not found")

    message.is_read = read_update.is_read if read_update else True
    session.add(message)
    session.commit()
    session.refresh(message)

    return message
