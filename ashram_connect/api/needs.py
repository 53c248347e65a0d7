"""
Children needs API endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select, SQLModel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
import structlog
import uuid

from ashram_connect.core.clock import utc_now
from ashram_connect.core.database import get_session
from ashram_connect.core.dependencies import require_capability
from ashram_connect.core.permissions import Actor, Capability
from ashram_connect.core.tenant import TenantScope, apply_tenant_scope, get_scoped_or_404, get_tenant_scope
from ashram_connect.models.need import ChildrenNeed, NeedCategory, NeedUrgency

logger = structlog.get_logger(__name__)
router = APIRouter()


# Pydantic schemas
class NeedCreate(SQLModel):
    """Schema for creating a need"""
    title: str
    description: Optional[str] = None
    category: NeedCategory
    urgency: NeedUrgency = NeedUrgency.MEDIUM
    quantity_needed: int = 1
    estimated_cost: Optional[Decimal] = None
    image_url: Optional[str] = None
    is_active: bool = True
    ashram_id: Optional[uuid.UUID] = None


class NeedUpdate(SQLModel):
    """Schema for updating a need"""
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[NeedCategory] = None
    urgency: Optional[NeedUrgency] = None
    quantity_needed: Optional[int] = None
    quantity_fulfilled: Optional[int] = None
    estimated_cost: Optional[Decimal] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = None


class NeedFulfill(SQLModel):
    """Schema for recording fulfilled units"""
    quantity: int


class NeedResponse(SQLModel):
    """Schema for need response with progress"""
    id: uuid.UUID
    ashram_id: Optional[uuid.UUID] = None
    title: str
    description: Optional[str] = None
    category: NeedCategory
    urgency: NeedUrgency
    quantity_needed: int
    quantity_fulfilled: int
    estimated_cost: Optional[Decimal] = None
    image_url: Optional[str] = None
    is_active: bool
    fulfilled_percent: int
    remaining_percent: int
    fulfilled_label: str
    remaining_label: str
    created_at: datetime


def to_response(need: ChildrenNeed) -> NeedResponse:
    fulfilled_label, remaining_label = need.progress_labels()
    return NeedResponse(
        id=need.id,
        ashram_id=need.ashram_id,
        title=need.title,
        description=need.description,
        category=need.category,
        urgency=need.urgency,
        quantity_needed=need.quantity_needed,
        quantity_fulfilled=need.quantity_fulfilled,
        estimated_cost=need.estimated_cost,
        image_url=need.image_url,
        is_active=need.is_active,
        fulfilled_percent=need.fulfilled_percent(),
        remaining_percent=need.remaining_percent(),
        fulfilled_label=fulfilled_label,
        remaining_label=remaining_label,
        created_at=need.created_at,
    )


@router.get("/", response_model=List[NeedResponse])
def list_needs(
    category: Optional[NeedCategory] = None,
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """List active needs, most urgent first and newest first within an urgency"""
    statement = select(ChildrenNeed).where(ChildrenNeed.is_active == True)  # noqa: E712
    statement = apply_tenant_scope(statement, ChildrenNeed.ashram_id, scope)
    if category:
        statement = statement.where(ChildrenNeed.category == category)

    needs = session.exec(statement.order_by(ChildrenNeed.created_at.desc())).all()
    needs = sorted(needs, key=lambda need: need.urgency.rank, reverse=True)
    return [to_response(need) for need in needs]


@router.get("/{need_id}", response_model=NeedResponse)
def get_need(
    need_id: uuid.UUID,
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Get a need with its progress"""
    need = get_scoped_or_404(session, ChildrenNeed, need_id, scope, "Need not found")
    return to_response(need)


@router.post("/", response_model=NeedResponse, status_code=status.HTTP_201_CREATED)
def create_need(
    need_data: NeedCreate,
    actor: Actor = Depends(require_capability(Capability.MANAGE_NEEDS)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Create a need in the ashram in scope"""
    if need_data.quantity_needed < 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Quantity needed must be at least 1"
        )

    try:
        need = ChildrenNeed(
            **need_data.model_dump(exclude={"ashram_id"}),
            ashram_id=scope.tenant_id if scope.is_scoped else need_data.ashram_id,
            created_by=actor.user_id,
        )
        session.add(need)
        session.commit()
        session.refresh(need)

        logger.info(f"Created need {need.id}")
        return to_response(need)

    except Exception as e:
        session.rollback()
        logger.error(f"Error creating need: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create need"
        )


@router.patch("/{need_id}", response_model=NeedResponse)
def update_need(
    need_id: uuid.UUID,
    need_update: NeedUpdate,
    actor: Actor = Depends(require_capability(Capability.MANAGE_NEEDS)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Update a need; fulfilled quantity can only grow up to the quantity needed"""
    need = get_scoped_or_404(session, ChildrenNeed, need_id, scope, "Need not found")

    update_data = need_update.model_dump(exclude_unset=True)
    quantity_needed = update_data.pop("quantity_needed", None)
    quantity_fulfilled = update_data.pop("quantity_fulfilled", None)

    try:
        need.set_quantities(quantity_needed, quantity_fulfilled)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    for key, value in update_data.items():
        setattr(need, key, value)

    need.updated_at = utc_now()
    session.add(need)
    session.commit()
    session.refresh(need)

    logger.info(f"Updated need {need.id}")
    return to_response(need)


@router.post("/{need_id}/fulfill", response_model=NeedResponse)
def fulfill_need(
    need_id: uuid.UUID,
    fulfill_data: NeedFulfill,
    actor: Actor = Depends(require_capability(Capability.MANAGE_NEEDS)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Record units received against a need"""
    need = get_scoped_or_404(session, ChildrenNeed, need_id, scope, "Need not found")

    try:
        need.record_fulfillment(fulfill_data.quantity)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    session.add(need)
    session.commit()
    session.refresh(need)

    logger.info(f"Need {need.id} fulfilled {need.quantity_fulfilled}/{need.quantity_needed}")
    return to_response(need)


@router.delete("/{need_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_need(
    need_id: uuid.UUID,
    actor: Actor = Depends(require_capability(Capability.MANAGE_NEEDS)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Retire a need; donations linked to it keep their reference"""
    need = get_scoped_or_404(session, ChildrenNeed, need_id, scope, "Need not found")

    need.is_active = False
    need.updated_at = utc_now()
    session.add(need)
    session.commit()

    logger.info(f"Deactivated need {need.id}")
    return None
