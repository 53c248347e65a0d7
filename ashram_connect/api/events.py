"""
Events API endpoints
"""

from fastapi import APIRouter, Depends, status
from pydantic import field_validator
from sqlmodel import Session, select, SQLModel, Field
from typing import List, Optional
from datetime import datetime
import structlog
import uuid

from ashram_connect.core.clock import as_utc, utc_now
from ashram_connect.core.database import get_session
from ashram_connect.core.dependencies import require_capability
from ashram_connect.core.permissions import Actor, Capability
from ashram_connect.core.tenant import TenantScope, apply_tenant_scope, get_scoped_or_404, get_tenant_scope
from ashram_connect.models.event import Event

logger = structlog.get_logger(__name__)
router = APIRouter()


# Pydantic schemas
class EventCreate(SQLModel):
    """Schema for creating an event"""
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = Field(default=None, max_length=255)
    image_url: Optional[str] = None
    is_upcoming: bool = True
    ashram_id: Optional[uuid.UUID] = None

    @field_validator("event_date")
    @classmethod
    def event_date_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class EventUpdate(SQLModel):
    """Schema for updating an event"""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = Field(default=None, max_length=255)
    image_url: Optional[str] = None
    is_upcoming: Optional[bool] = None

    @field_validator("event_date")
    @classmethod
    def event_date_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


class EventResponse(SQLModel):
    """Schema for event response"""
    id: uuid.UUID
    ashram_id: Optional[uuid.UUID] = None
    title: str
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    location: Optional[str] = None
    image_url: Optional[str] = None
    is_upcoming: bool
    created_at: datetime


@router.get("/", response_model=List[EventResponse])
def list_events(
    upcoming: Optional[bool] = None,
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """List events by date, optionally only upcoming or only past ones"""
    statement = apply_tenant_scope(select(Event), Event.ashram_id, scope)
    if upcoming is not None:
        statement = statement.where(Event.is_upcoming == upcoming)

    return session.exec(statement.order_by(Event.event_date.asc())).all()


@router.post("/", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    event_data: EventCreate,
    actor: Actor = Depends(require_capability(Capability.MANAGE_EVENTS)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Create an event"""
    event = Event(
        **event_data.model_dump(exclude={"ashram_id"}),
        ashram_id=scope.tenant_id if scope.is_scoped else event_data.ashram_id,
        created_by=actor.user_id,
    )
    session.add(event)
    session.commit()
    session.refresh(event)

    logger.info(f"Created event {event.id}")
    return event


@router.patch("/{event_id}", response_model=EventResponse)
def update_event(
    event_id: uuid.UUID,
    event_update: EventUpdate,
    actor: Actor = Depends(require_capability(Capability.MANAGE_EVENTS)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Update an event"""
    event = get_scoped_or_404(session, Event, event_id, scope, "Event not found")

    for key, value in event_update.model_dump(exclude_unset=True).items():
        setattr(event, key, value)

    event.updated_at = utc_now()
    session.add(event)
    session.commit()
    session.refresh(event)

    logger.info(f"Updated event {event.id}")
    return event


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: uuid.UUID,
    actor: Actor = Depends(require_capability(Capability.MANAGE_EVENTS)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Delete an event"""
    event = get_scoped_or_404(session, Event, event_id, scope, "Event not found")

    session.delete(event)
    session.commit()

    logger.info(f"Deleted event {event_id}")
    return None
