"""
Donation records API endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select
from typing import List, Optional
import structlog
import uuid

from ashram_connect.api.donate import ItemDonationResponse, MoneyDonationResponse, VisitResponse
from ashram_connect.core.database import get_session
from ashram_connect.core.dependencies import get_current_user_id, require_capability
from ashram_connect.core.permissions import Actor, Capability
from ashram_connect.core.tenant import TenantScope, apply_tenant_scope, get_scoped_or_404, get_tenant_scope
from ashram_connect.models.donation import Donation, PaymentStatus
from ashram_connect.models.donor_visit import DonorVisit
from ashram_connect.models.item_donation import ItemDonation
from ashram_connect.schemas.donation import DonationComplete

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.get("/mine", response_model=List[MoneyDonationResponse])
def list_my_donations(
    user_id: uuid.UUID = Depends(get_current_user_id),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Money donations made by the signed-in donor"""
    statement = select(Donation).where(Donation.donor_id == user_id)
    statement = apply_tenant_scope(statement, Donation.ashram_id, scope)
    return session.exec(statement.order_by(Donation.created_at.desc())).all()


@router.get("/", response_model=List[MoneyDonationResponse])
def list_donations(
    payment_status: Optional[PaymentStatus] = None,
    skip: int = 0,
    limit: int = 100,
    actor: Actor = Depends(require_capability(Capability.MANAGE_DONATIONS)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """List money donations in scope"""
    statement = apply_tenant_scope(select(Donation), Donation.ashram_id, scope)
    if payment_status:
        statement = statement.where(Donation.payment_status == payment_status)

    statement = statement.order_by(Donation.created_at.desc()).offset(skip).limit(limit)
    return session.exec(statement).all()


@router.post("/{donation_id}/complete", response_model=MoneyDonationResponse)
def complete_donation(
    donation_id: uuid.UUID,
    complete_data: Optional[DonationComplete] = None,
    actor: Actor = Depends(require_capability(Capability.MANAGE_DONATIONS)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Mark a pending donation as received"""
    donation = get_scoped_or_404(session, Donation, donation_id, scope, "Donation not found")

    try:
        donation.transition_to_completed(complete_data.transaction_id if complete_data else None)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    session.add(donation)
    session.commit()
    session.refresh(donation)

    logger.info(f"Donation {donation.id} marked completed by {actor.user_id}")
    return donation


@router.get("/visits", response_model=List[VisitResponse])
def list_visits(
    actor: Actor = Depends(require_capability(Capability.MANAGE_DONATIONS)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """List visit bookings in scope, soonest first"""
    statement = apply_tenant_scope(select(DonorVisit), DonorVisit.ashram_id, scope)
    return session.exec(statement.order_by(DonorVisit.visit_date.asc())).all()


@router.get("/items", response_model=List[ItemDonationResponse])
def list_item_pledges(
    actor: Actor = Depends(require_capability(Capability.MANAGE_DONATIONS)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """List item pledges in scope"""
    statement = apply_tenant_scope(select(ItemDonation), ItemDonation.ashram_id, scope)
    return session.exec(statement.order_by(ItemDonation.created_at.desc())).all()
