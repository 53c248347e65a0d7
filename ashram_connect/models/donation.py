"""
Money donation model
Payments are recorded as a preference only, nothing is settled
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import CheckConstraint
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid

from ashram_connect.core.clock import utc_now
from ashram_connect.models.columns import enum_column, timestamp_column


class DonationType(str, Enum):
    """Kind of money donation"""
    GENERAL = "general"
    RECURRING = "recurring"


class PaymentMethod(str, Enum):
    """Payment method chosen by the donor (informational)"""
    UPI = "upi"
    CARD = "card"
    NETBANKING = "netbanking"
    WALLET = "wallet"


class PaymentStatus(str, Enum):
    """Status of a donation payment"""
    PENDING = "pending"       # Recorded, not settled
    COMPLETED = "completed"   # Marked as received by an admin


class Donation(SQLModel, table=True):
    """Money donation"""

    __tablename__ = "donations"
    __table_args__ = (
        CheckConstraint("amount >= 1", name="ck_donation_amount_positive"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    ashram_id: Optional[uuid.UUID] = Field(default=None, foreign_key="ashrams.id", index=True, nullable=True)
    need_id: Optional[uuid.UUID] = Field(default=None, foreign_key="children_needs.id", index=True, nullable=True)

    # Donor; donor_id is null for guests
    donor_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", index=True, nullable=True)
    donor_name: Optional[str] = Field(default=None, max_length=100)
    donor_email: Optional[str] = Field(default=None, max_length=255)
    donor_phone: Optional[str] = Field(default=None, max_length=50)
    is_anonymous: bool = Field(default=False)

    # Amount in whole currency units
    amount: int = Field(nullable=False)
    donation_type: DonationType = Field(default=DonationType.GENERAL, sa_column=enum_column(DonationType, "donation_type"))
    is_recurring: bool = Field(default=False)

    # Payment
    payment_method: Optional[PaymentMethod] = Field(
        default=None, sa_column=enum_column(PaymentMethod, "payment_method", nullable=True, index=False)
    )
    payment_status: PaymentStatus = Field(default=PaymentStatus.PENDING, sa_column=enum_column(PaymentStatus, "payment_status"))
    transaction_id: Optional[str] = Field(default=None, max_length=255)

    message: Optional[str] = Field(default=None, max_length=2000)

    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column(index=True))
    completed_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))

    def can_complete(self) -> bool:
        return self.payment_status == PaymentStatus.PENDING

    def transition_to_completed(self, transaction_id: Optional[str] = None) -> None:
        """Mark the donation as received (pending -> completed)"""
        if not self.can_complete():
            raise ValueError("Cannot complete donation: payment is not pending")

        self.payment_status = PaymentStatus.COMPLETED
        self.completed_at = utc_now()
        if transaction_id:
            self.transaction_id = transaction_id
