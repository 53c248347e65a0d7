"""
Pydantic schemas for the donation fulfillment paths

All donor-side validation happens here, before any database work.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from datetime import date
from enum import Enum
from typing import List, Optional
import uuid

from ashram_connect.core.config import get_settings
from ashram_connect.models.donation import PaymentMethod
from ashram_connect.models.donor_visit import TIME_SLOTS

settings = get_settings()

PRESET_AMOUNTS = (500, 1000, 2500, 5000, 10000, 25000)


class DonationCadence(str, Enum):
    """How often a money donation repeats"""
    ONE_TIME = "one_time"
    MONTHLY = "monthly"


class DonorContact(BaseModel):
    """Donor fields required on every fulfillment path"""
    model_config = ConfigDict(str_strip_whitespace=True)

    donor_name: str = Field(..., min_length=2, max_length=100)
    donor_email: EmailStr
    donor_phone: Optional[str] = Field(default=None, max_length=50)
    need_id: Optional[uuid.UUID] = None


class VisitBookingCreate(DonorContact):
    """In-person visit booking"""
    visit_date: date
    time_slot: str
    message: Optional[str] = Field(default=None, max_length=2000)

    @field_validator("visit_date")
    @classmethod
    def visit_date_not_in_past(cls, value: date) -> date:
        if value < date.today():
            raise ValueError("Visit date cannot be in the past")
        return value

    @field_validator("time_slot")
    @classmethod
    def time_slot_is_offered(cls, value: str) -> str:
        if value not in TIME_SLOTS:
            raise ValueError(f"Time slot must be one of: {', '.join(TIME_SLOTS)}")
        return value


class MoneyDonationCreate(DonorContact):
    """Money donation; the payment method is recorded, never charged"""
    amount: int = Field(..., ge=1, description="Preset or custom amount in whole units")
    cadence: DonationCadence = DonationCadence.ONE_TIME
    payment_method: PaymentMethod = PaymentMethod.UPI
    is_anonymous: bool = False
    message: Optional[str] = Field(default=None, max_length=2000)


class ItemDonationCreate(DonorContact):
    """Pledge of goods"""
    items_description: str = Field(
        ...,
        min_length=settings.ITEMS_DESCRIPTION_MIN_LENGTH,
        max_length=2000
    )
    delivery_note: Optional[str] = Field(default=None, max_length=2000)


class DonationOptions(BaseModel):
    """Choices offered by the donate screens"""
    time_slots: List[str] = list(TIME_SLOTS)
    preset_amounts: List[int] = list(PRESET_AMOUNTS)
    cadences: List[DonationCadence] = list(DonationCadence)
    payment_methods: List[PaymentMethod] = list(PaymentMethod)
    items_description_min_length: int = settings.ITEMS_DESCRIPTION_MIN_LENGTH


class DonationComplete(BaseModel):
    """Admin confirmation that a pending donation was received"""
    transaction_id: Optional[str] = Field(default=None, max_length=255)
