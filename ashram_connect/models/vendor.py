"""
Vendor marketplace models: vendors, products and orders
"""

from sqlmodel import Field, SQLModel
from sqlalchemy import CheckConstraint, Column, Numeric
from decimal import Decimal, ROUND_HALF_UP
from datetime import datetime
from typing import Optional
from enum import Enum
import uuid

from ashram_connect.core.clock import utc_now
from ashram_connect.models.columns import enum_column, timestamp_column


class VendorCategory(str, Enum):
    """Category of a vendor business"""
    CLOUD_KITCHEN = "cloud_kitchen"
    HANDICRAFTS = "handicrafts"
    HOMEMADE = "homemade"
    SERVICES = "services"
    OTHER = "other"


class OrderStatus(str, Enum):
    """Status of a marketplace order"""
    PENDING = "pending"


class Vendor(SQLModel, table=True):
    """Vendor business profile owned by one identity"""

    __tablename__ = "vendors"
    __table_args__ = (
        CheckConstraint("charity_percentage BETWEEN 5 AND 25", name="ck_vendor_charity_range"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True, description="Owning identity")
    ashram_id: Optional[uuid.UUID] = Field(default=None, foreign_key="ashrams.id", index=True, nullable=True)

    business_name: str = Field(max_length=200)
    description: Optional[str] = None
    category: VendorCategory = Field(sa_column=enum_column(VendorCategory, "vendor_category"))
    logo_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=255)
    address: Optional[str] = None

    # Share of each sale routed to the ashram, in percent
    charity_percentage: int = Field(default=10)

    # Admin controlled
    is_verified: bool = Field(default=False, index=True)
    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column(index=True))
    updated_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))

    def is_listed(self) -> bool:
        """Whether the vendor shows up in the public marketplace"""
        return self.is_verified and self.is_active

    def charity_share(self, amount: Decimal) -> Decimal:
        """Part of a sale amount that goes to the ashram"""
        share = Decimal(amount) * Decimal(self.charity_percentage) / Decimal(100)
        return share.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class Product(SQLModel, table=True):
    """Product offered by exactly one vendor"""

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    vendor_id: uuid.UUID = Field(foreign_key="vendors.id", index=True)

    name: str = Field(max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(sa_column=Column(Numeric(10, 2), nullable=False))
    category: Optional[str] = Field(default=None, max_length=100)
    image_url: Optional[str] = None
    is_available: bool = Field(default=True, index=True)

    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column(index=True))
    updated_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))


class Order(SQLModel, table=True):
    """Marketplace order with the charity split frozen at order time"""

    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_order_quantity_positive"),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    product_id: uuid.UUID = Field(foreign_key="products.id", index=True)
    vendor_id: uuid.UUID = Field(foreign_key="vendors.id", index=True)
    buyer_id: Optional[uuid.UUID] = Field(default=None, foreign_key="users.id", index=True, nullable=True)
    buyer_phone: Optional[str] = Field(default=None, max_length=50)

    quantity: int = Field(default=1)
    total_amount: Decimal = Field(sa_column=Column(Numeric(12, 2), nullable=False))
    charity_amount: Decimal = Field(sa_column=Column(Numeric(12, 2), nullable=False))
    shipping_address: Optional[str] = None
    status: OrderStatus = Field(default=OrderStatus.PENDING, sa_column=enum_column(OrderStatus, "order_status"))

    created_at: datetime = Field(default_factory=utc_now, sa_column=timestamp_column())
    updated_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))
