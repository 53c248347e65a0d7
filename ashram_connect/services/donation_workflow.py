"""
Donation fulfillment workflow

A donor session follows exactly one of three paths and records exactly one
row:

    start -> visit_booking -> visit_confirmed
    start -> method_choice -> money -> money_done
    start -> method_choice -> items -> items_done

Terminal steps never lead anywhere; a new session starts a new flow.
"""

from enum import Enum
from typing import List, Optional, Union
import uuid

from sqlmodel import Session
import structlog

from ashram_connect.core.tenant import TenantScope
from ashram_connect.models.donation import Donation, DonationType, PaymentStatus
from ashram_connect.models.donor_visit import DonorVisit, VisitStatus
from ashram_connect.models.item_donation import ItemDonation, ItemDonationStatus
from ashram_connect.models.need import ChildrenNeed
from ashram_connect.schemas.donation import (
    DonationCadence, ItemDonationCreate, MoneyDonationCreate, VisitBookingCreate
)

logger = structlog.get_logger(__name__)

FulfillmentRecord = Union[DonorVisit, Donation, ItemDonation]


class FlowStep(str, Enum):
    """Steps of a donor session"""
    START = "start"
    VISIT_BOOKING = "visit_booking"
    VISIT_CONFIRMED = "visit_confirmed"
    METHOD_CHOICE = "method_choice"
    MONEY = "money"
    MONEY_DONE = "money_done"
    ITEMS = "items"
    ITEMS_DONE = "items_done"


ALLOWED_TRANSITIONS = {
    FlowStep.START: {FlowStep.VISIT_BOOKING, FlowStep.METHOD_CHOICE},
    FlowStep.VISIT_BOOKING: {FlowStep.VISIT_CONFIRMED},
    FlowStep.METHOD_CHOICE: {FlowStep.MONEY, FlowStep.ITEMS},
    FlowStep.MONEY: {FlowStep.MONEY_DONE},
    FlowStep.ITEMS: {FlowStep.ITEMS_DONE},
    FlowStep.VISIT_CONFIRMED: set(),
    FlowStep.MONEY_DONE: set(),
    FlowStep.ITEMS_DONE: set(),
}

TERMINAL_STEPS = frozenset(
    step for step, targets in ALLOWED_TRANSITIONS.items() if not targets
)

# Step reached when the path's single row has been written
COMPLETION_STEP = {
    FlowStep.VISIT_BOOKING: FlowStep.VISIT_CONFIRMED,
    FlowStep.MONEY: FlowStep.MONEY_DONE,
    FlowStep.ITEMS: FlowStep.ITEMS_DONE,
}


class WorkflowError(ValueError):
    """Transition not allowed from the current step"""


class NeedUnavailable(LookupError):
    """Linked need is missing, inactive or outside the ashram in scope"""


class DonationFlow:
    """State of one donor session"""

    def __init__(self, need_id: Optional[uuid.UUID] = None):
        self.step = FlowStep.START
        self.need_id = need_id
        self.record: Optional[FulfillmentRecord] = None
        self.history: List[FlowStep] = [FlowStep.START]

    def is_terminal(self) -> bool:
        return self.step in TERMINAL_STEPS

    def can_transition(self, target: FlowStep) -> bool:
        return target in ALLOWED_TRANSITIONS[self.step]

    def _transition(self, target: FlowStep) -> None:
        if not self.can_transition(target):
            raise WorkflowError(
                f"Cannot move from {self.step.value} to {target.value}"
            )
        self.step = target
        self.history.append(target)

    def answer_can_visit(self, can_visit: bool) -> None:
        """The branching question at the start of every session"""
        self._transition(FlowStep.VISIT_BOOKING if can_visit else FlowStep.METHOD_CHOICE)

    def choose_method(self, method: str) -> None:
        """Pick between a money and an item donation"""
        targets = {"money": FlowStep.MONEY, "items": FlowStep.ITEMS}
        if method not in targets:
            raise WorkflowError(f"Unknown donation method: {method}")
        self._transition(targets[method])

    def link_need(self, need_id: Optional[uuid.UUID]) -> None:
        if self.is_terminal():
            raise WorkflowError("Cannot change the need of a completed donation")
        self.need_id = need_id

    def require_step(self, step: FlowStep) -> None:
        if self.step != step:
            raise WorkflowError(
                f"Expected step {step.value}, flow is at {self.step.value}"
            )

    def complete(self, record: FulfillmentRecord) -> None:
        """Enter the terminal step of the current path with its recorded row"""
        if self.record is not None:
            raise WorkflowError("Donation already recorded for this session")
        if self.step not in COMPLETION_STEP:
            raise WorkflowError(f"Nothing to submit at step {self.step.value}")
        self._transition(COMPLETION_STEP[self.step])
        self.record = record


class DonationFulfillmentService:
    """Records the single canonical result of a donor session"""

    def __init__(
        self,
        session: Session,
        scope: TenantScope,
        donor_id: Optional[uuid.UUID] = None
    ):
        self.session = session
        self.scope = scope
        self.donor_id = donor_id

    def resolve_need(self, need_id: Optional[uuid.UUID]) -> Optional[ChildrenNeed]:
        if need_id is None:
            return None

        need = self.session.get(ChildrenNeed, need_id)
        if need is None or not need.is_active or not self.scope.contains(need.ashram_id):
            raise NeedUnavailable("Need not found")
        return need

    def _ashram_id(self, need: Optional[ChildrenNeed]) -> Optional[uuid.UUID]:
        if self.scope.tenant_id is not None:
            return self.scope.tenant_id
        return need.ashram_id if need else None

    def _persist(self, flow: DonationFlow, record: FulfillmentRecord) -> FulfillmentRecord:
        try:
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
        except Exception as e:
            self.session.rollback()
            logger.error(f"Failed to record {type(record).__name__}: {e}")
            raise

        flow.complete(record)
        logger.info(
            "Donation recorded",
            record_type=type(record).__tablename__,
            record_id=str(record.id),
            ashram_id=str(record.ashram_id),
            need_id=str(record.need_id),
        )
        return record

    def record_visit(
        self,
        data: VisitBookingCreate,
        flow: Optional[DonationFlow] = None
    ) -> DonorVisit:
        flow = flow or DonationFlow()
        if flow.step == FlowStep.START:
            flow.answer_can_visit(True)
        flow.require_step(FlowStep.VISIT_BOOKING)

        need = self.resolve_need(data.need_id or flow.need_id)
        visit = DonorVisit(
            ashram_id=self._ashram_id(need),
            need_id=need.id if need else None,
            donor_id=self.donor_id,
            donor_name=data.donor_name,
            donor_email=data.donor_email,
            donor_phone=data.donor_phone,
            visit_date=data.visit_date,
            time_slot=data.time_slot,
            message=data.message,
            status=VisitStatus.CONFIRMED,
        )
        return self._persist(flow, visit)

    def record_money(
        self,
        data: MoneyDonationCreate,
        flow: Optional[DonationFlow] = None
    ) -> Donation:
        flow = flow or DonationFlow()
        if flow.step == FlowStep.START:
            flow.answer_can_visit(False)
        if flow.step == FlowStep.METHOD_CHOICE:
            flow.choose_method("money")
        flow.require_step(FlowStep.MONEY)

        need = self.resolve_need(data.need_id or flow.need_id)
        is_recurring = data.cadence == DonationCadence.MONTHLY
        donation = Donation(
            ashram_id=self._ashram_id(need),
            need_id=need.id if need else None,
            donor_id=self.donor_id,
            donor_name=data.donor_name,
            donor_email=data.donor_email,
            donor_phone=data.donor_phone,
            is_anonymous=data.is_anonymous,
            amount=data.amount,
            donation_type=DonationType.RECURRING if is_recurring else DonationType.GENERAL,
            is_recurring=is_recurring,
            payment_method=data.payment_method,
            payment_status=PaymentStatus.PENDING,
            message=data.message,
        )
        return self._persist(flow, donation)

    def record_items(
        self,
        data: ItemDonationCreate,
        flow: Optional[DonationFlow] = None
    ) -> ItemDonation:
        flow = flow or DonationFlow()
        if flow.step == FlowStep.START:
            flow.answer_can_visit(False)
        if flow.step == FlowStep.METHOD_CHOICE:
            flow.choose_method("items")
        flow.require_step(FlowStep.ITEMS)

        need = self.resolve_need(data.need_id or flow.need_id)
        pledge = ItemDonation(
            ashram_id=self._ashram_id(need),
            need_id=need.id if need else None,
            donor_id=self.donor_id,
            donor_name=data.donor_name,
            donor_email=data.donor_email,
            donor_phone=data.donor_phone,
            items_description=data.items_description,
            delivery_note=data.delivery_note,
            status=ItemDonationStatus.PLEDGED,
        )
        return self._persist(flow, pledge)
