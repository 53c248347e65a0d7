"""
Children need model with fulfillment progress
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import CheckConstraint, Column, Numeric
from decimal import Decimal
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid

from ashram_connect.core.clock import utc_now
from ashram_connect.models.columns import enum_column, timestamp_column


class NeedCategory(str, Enum):
    """Category of a need"""
    FOOD = "food"
    CLOTHING = "clothing"
    EDUCATION = "education"
    HEALTHCARE = "healthcare"
    DAILY_ESSENTIALS = "daily_essentials"
    OTHER = "other"


class NeedUrgency(str, Enum):
    """Urgency of a need, lowest first"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return list(NeedUrgency).index(self)


class ChildrenNeed(SQLModel, table=True):
    """A specific request for aid with quantity and urgency"""

    __tablename__ = "children_needs"
    __table_args__ = (
        CheckConstraint("quantity_fulfilled >= 0", name="ck_need_fulfilled_non_negative"),
        CheckConstraint("quantity_fulfilled <= quantity_needed", name="ck_need_fulfilled_within_needed"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    ashram_id: Optional[uuid.UUID] = Field(
        default=None,
        foreign_key="ashrams.id",
        index=True,
        nullable=True,
        description="Owning ashram; null for legacy/global needs"
    )

    title: str = Field(max_length=200)
    description: Optional[str] = None
    category: NeedCategory = Field(sa_column=enum_column(NeedCategory, "need_category"))
    urgency: NeedUrgency = Field(default=NeedUrgency.MEDIUM, sa_column=enum_column(NeedUrgency, "need_urgency"))

    # Progress
    quantity_needed: int = Field(default=1, ge=1)
    quantity_fulfilled: int = Field(default=0, ge=0)
    estimated_cost: Optional[Decimal] = Field(
        default=None,
        sa_column=Column(Numeric(12, 2), nullable=True)
    )

    image_url: Optional[str] = None
    is_active: bool = Field(default=True, index=True)
    created_by: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", nullable=True)

    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column(index=True))
    updated_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))

    def fulfilled_percent(self) -> int:
        """Share of the needed quantity already fulfilled, 0-100"""
        if self.quantity_needed <= 0:
            return 0
        percent = round(self.quantity_fulfilled * 100 / self.quantity_needed)
        return max(0, min(100, percent))

    def remaining_percent(self) -> int:
        return 100 - self.fulfilled_percent()

    def quantity_remaining(self) -> int:
        return max(0, self.quantity_needed - self.quantity_fulfilled)

    def is_fulfilled(self) -> bool:
        return self.quantity_fulfilled >= self.quantity_needed

    def progress_labels(self) -> tuple[str, str]:
        return (
            f"{self.fulfilled_percent()}% fulfilled",
            f"{self.remaining_percent()}% remaining",
        )

    def record_fulfillment(self, quantity: int) -> None:
        """Add fulfilled units; the count only grows and stays within the need"""
        if quantity <= 0:
            raise ValueError("Fulfilled quantity must be positive")
        if self.quantity_fulfilled + quantity > self.quantity_needed:
            raise ValueError(
                f"Cannot fulfill {quantity}: only {self.quantity_remaining()} remaining"
            )

        self.quantity_fulfilled += quantity
        self.updated_at = utc_now()

    def set_quantities(self, quantity_needed: Optional[int] = None, quantity_fulfilled: Optional[int] = None) -> None:
        """Apply an admin edit of the quantities, keeping the invariants"""
        needed = self.quantity_needed if quantity_needed is None else quantity_needed
        fulfilled = self.quantity_fulfilled if quantity_fulfilled is None else quantity_fulfilled

        if needed < 1:
            raise ValueError("Quantity needed must be at least 1")
        if fulfilled < self.quantity_fulfilled:
            raise ValueError("Fulfilled quantity cannot decrease")
        if fulfilled > needed:
            raise ValueError("Fulfilled quantity cannot exceed quantity needed")

        self.quantity_needed = needed
        self.quantity_fulfilled = fulfilled
        self.updated_at = utc_now()
