"""
Admin dashboard API endpoint
"""

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlmodel import Session, select, SQLModel
from typing import List, Optional
import structlog
import uuid

from ashram_connect.core.database import get_session
from ashram_connect.core.dependencies import require_capability
from ashram_connect.core.permissions import Actor, Capability, admin_tabs
from ashram_connect.core.tenant import TenantScope, apply_tenant_scope, get_tenant_scope
from ashram_connect.models.contact_message import ContactMessage
from ashram_connect.models.donation import Donation, PaymentStatus
from ashram_connect.models.need import ChildrenNeed
from ashram_connect.models.vendor import Vendor

logger = structlog.get_logger(__name__)
router = APIRouter()


class QuickStats(SQLModel):
    total_donations: int
    active_needs: int
    vendors: int
    unread_messages: int


class DashboardResponse(SQLModel):
    """Tabs the caller may open plus headline numbers for the scope"""
    tenant_id: Optional[uuid.UUID] = None
    tabs: List[str]
    capabilities: List[str]
    stats: QuickStats


def _count(session: Session, statement) -> int:
    return session.exec(statement).one()


@router.get("/", response_model=DashboardResponse)
def get_dashboard(
    actor: Actor = Depends(require_capability(Capability.VIEW_ADMIN_DASHBOARD)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Admin dashboard for the ashram in scope, or platform-wide"""
    # Only money an admin has marked as received
    total_donations = session.exec(
        apply_tenant_scope(
            select(func.coalesce(func.sum(Donation.amount), 0)).where(
                Donation.payment_status == PaymentStatus.COMPLETED
            ),
            Donation.ashram_id,
            scope,
        )
    ).one()

    stats = QuickStats(
        total_donations=total_donations,
        active_needs=_count(session, apply_tenant_scope(
            select(func.count(ChildrenNeed.id)).where(ChildrenNeed.is_active == True),  # noqa: E712
            ChildrenNeed.ashram_id,
            scope,
        )),
        vendors=_count(session, apply_tenant_scope(
            select(func.count(Vendor.id)),
            Vendor.ashram_id,
            scope,
        )),
        unread_messages=_count(session, apply_tenant_scope(
            select(func.count(ContactMessage.id)).where(ContactMessage.is_read == False),  # noqa: E712
            ContactMessage.ashram_id,
            scope,
        )),
    )

    capabilities = actor.capabilities(scope.tenant_id)
    return DashboardResponse(
        tenant_id=scope.tenant_id,
        tabs=admin_tabs(actor, scope.tenant_id),
        capabilities=sorted(capability.value for capability in capabilities),
        stats=stats,
    )
