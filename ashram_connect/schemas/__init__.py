"""
Schemas module
"""

from ashram_connect.schemas.token import TokenResponse
from ashram_connect.schemas.user import RoleUpdate, UserCreate, UserLogin, UserResponse, UserWithRole
from ashram_connect.schemas.donation import (
    DonationCadence, DonationComplete, DonationOptions, DonorContact,
    ItemDonationCreate, MoneyDonationCreate, VisitBookingCreate, PRESET_AMOUNTS
)

__all__ = [
    "TokenResponse",
    "RoleUpdate",
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserWithRole",
    "DonationCadence",
    "DonationComplete",
    "DonationOptions",
    "DonorContact",
    "ItemDonationCreate",
    "MoneyDonationCreate",
    "VisitBookingCreate",
    "PRESET_AMOUNTS",
]
