"""
Donate API endpoints

Each submission is one donor session ending in exactly one recorded row:
a visit booking, a money donation or an item pledge.
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlmodel import Session, SQLModel
from typing import Optional
from datetime import date, datetime
import structlog
import uuid

from ashram_connect.core.database import get_session
from ashram_connect.core.dependencies import get_optional_user_id
from ashram_connect.core.tenant import TenantScope, get_tenant_scope
from ashram_connect.models.donation import DonationType, PaymentMethod, PaymentStatus
from ashram_connect.models.donor_visit import VisitStatus
from ashram_connect.models.item_donation import ItemDonationStatus
from ashram_connect.schemas.donation import (
    DonationOptions, ItemDonationCreate, MoneyDonationCreate, VisitBookingCreate
)
from ashram_connect.services.donation_workflow import (
    DonationFlow, DonationFulfillmentService, NeedUnavailable, WorkflowError
)

logger = structlog.get_logger(__name__)
router = APIRouter()


class VisitResponse(SQLModel):
    """Schema for a confirmed visit booking"""
    id: uuid.UUID
    ashram_id: Optional[uuid.UUID] = None
    need_id: Optional[uuid.UUID] = None
    donor_name: str
    donor_email: str
    donor_phone: Optional[str] = None
    visit_date: date
    time_slot: str
    message: Optional[str] = None
    status: VisitStatus
    created_at: datetime


class MoneyDonationResponse(SQLModel):
    """Schema for a recorded money donation"""
    id: uuid.UUID
    ashram_id: Optional[uuid.UUID] = None
    need_id: Optional[uuid.UUID] = None
    donor_name: Optional[str] = None
    donor_email: Optional[str] = None
    is_anonymous: bool
    amount: int
    donation_type: DonationType
    is_recurring: bool
    payment_method: Optional[PaymentMethod] = None
    payment_status: PaymentStatus
    transaction_id: Optional[str] = None
    message: Optional[str] = None
    created_at: datetime
    completed_at: Optional[datetime] = None


class ItemDonationResponse(SQLModel):
    """Schema for a recorded item pledge"""
    id: uuid.UUID
    ashram_id: Optional[uuid.UUID] = None
    need_id: Optional[uuid.UUID] = None
    donor_name: str
    donor_email: str
    donor_phone: Optional[str] = None
    items_description: str
    delivery_note: Optional[str] = None
    status: ItemDonationStatus
    created_at: datetime


def _submit(record_fn, data, need_id: Optional[uuid.UUID]):
    """Run one donor session to its terminal step"""
    flow = DonationFlow(need_id=need_id)
    try:
        return record_fn(data, flow)
    except NeedUnavailable as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except WorkflowError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get("/options", response_model=DonationOptions)
def get_donation_options():
    """Time slots, preset amounts and payment methods offered to donors"""
    return DonationOptions()


@router.post("/visits", response_model=VisitResponse, status_code=status.HTTP_201_CREATED)
def book_visit(
    visit_data: VisitBookingCreate,
    need_id: Optional[uuid.UUID] = Query(None),
    scope: TenantScope = Depends(get_tenant_scope),
    user_id: Optional[uuid.UUID] = Depends(get_optional_user_id),
    session: Session = Depends(get_session)
):
    """Book an in-person visit"""
    service = DonationFulfillmentService(session, scope, donor_id=user_id)
    return _submit(service.record_visit, visit_data, need_id)


@router.post("/money", response_model=MoneyDonationResponse, status_code=status.HTTP_201_CREATED)
def donate_money(
    donation_data: MoneyDonationCreate,
    need_id: Optional[uuid.UUID] = Query(None),
    scope: TenantScope = Depends(get_tenant_scope),
    user_id: Optional[uuid.UUID] = Depends(get_optional_user_id),
    session: Session = Depends(get_session)
):
    """Record a money donation as pending"""
    service = DonationFulfillmentService(session, scope, donor_id=user_id)
    return _submit(service.record_money, donation_data, need_id)


@router.post("/items", response_model=ItemDonationResponse, status_code=status.HTTP_201_CREATED)
def pledge_items(
    pledge_data: ItemDonationCreate,
    need_id: Optional[uuid.UUID] = Query(None),
    scope: TenantScope = Depends(get_tenant_scope),
    user_id: Optional[uuid.UUID] = Depends(get_optional_user_id),
    session: Session = Depends(get_session)
):
    """Pledge goods"""
    service = DonationFulfillmentService(session, scope, donor_id=user_id)
    return _submit(service.record_items, pledge_data, need_id)
