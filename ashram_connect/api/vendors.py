"""
Vendor marketplace API endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select, SQLModel, Field
from pydantic import EmailStr
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
import structlog
import uuid

from ashram_connect.core.clock import utc_now
from ashram_connect.core.config import get_settings
from ashram_connect.core.database import get_session
from ashram_connect.core.dependencies import get_current_user_id, require_capability
from ashram_connect.core.permissions import Actor, Capability
from ashram_connect.core.tenant import TenantScope, apply_tenant_scope, get_scoped_or_404, get_tenant_scope
from ashram_connect.models.vendor import OrderStatus, Product, Vendor, VendorCategory
from ashram_connect.services.marketplace import (
    ProductUnavailable, listed_vendors, marketplace_products, place_order, vendor_products
)

logger = structlog.get_logger(__name__)
settings = get_settings()
router = APIRouter()


# Pydantic schemas
class VendorRegister(SQLModel):
    """Schema for vendor self-registration"""
    business_name: str = Field(min_length=2, max_length=200)
    description: Optional[str] = None
    category: VendorCategory
    logo_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[EmailStr] = None
    address: Optional[str] = None
    charity_percentage: int = Field(
        default=10,
        ge=settings.VENDOR_CHARITY_MIN,
        le=settings.VENDOR_CHARITY_MAX
    )


class VendorResponse(SQLModel):
    """Schema for vendor response"""
    id: uuid.UUID
    user_id: uuid.UUID
    ashram_id: Optional[uuid.UUID] = None
    business_name: str
    description: Optional[str] = None
    category: VendorCategory
    logo_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    charity_percentage: int
    is_verified: bool
    is_active: bool
    created_at: datetime


class ProductCreate(SQLModel):
    """Schema for creating a product"""
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    category: Optional[str] = Field(default=None, max_length=100)
    image_url: Optional[str] = None
    is_available: bool = True


class ProductUpdate(SQLModel):
    """Schema for updating a product"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    category: Optional[str] = Field(default=None, max_length=100)
    image_url: Optional[str] = None
    is_available: Optional[bool] = None


class ProductResponse(SQLModel):
    """Schema for product response"""
    id: uuid.UUID
    vendor_id: uuid.UUID
    name: str
    description: Optional[str] = None
    price: Decimal
    category: Optional[str] = None
    image_url: Optional[str] = None
    is_available: bool
    created_at: datetime


class VendorDetailResponse(VendorResponse):
    """Vendor with its available products"""
    products: List[ProductResponse] = []


class OrderCreate(SQLModel):
    """Schema for ordering a product"""
    quantity: int = Field(default=1, ge=1)
    buyer_phone: Optional[str] = Field(default=None, max_length=50)
    shipping_address: Optional[str] = None


class OrderResponse(SQLModel):
    """Schema for order response with the charity split"""
    id: uuid.UUID
    product_id: uuid.UUID
    vendor_id: uuid.UUID
    buyer_id: Optional[uuid.UUID] = None
    quantity: int
    total_amount: Decimal
    charity_amount: Decimal
    shipping_address: Optional[str] = None
    status: OrderStatus
    created_at: datetime


class VerificationUpdate(SQLModel):
    is_verified: bool


class ActivationUpdate(SQLModel):
    is_active: bool


def _own_vendor(session: Session, user_id: uuid.UUID) -> Optional[Vendor]:
    return session.exec(select(Vendor).where(Vendor.user_id == user_id)).first()


def _require_own_vendor(session: Session, user_id: uuid.UUID) -> Vendor:
    vendor = _own_vendor(session, user_id)
    if not vendor:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No vendor profile for this account"
        )
    return vendor


def _own_product(session: Session, vendor: Vendor, product_id: uuid.UUID) -> Product:
    product = session.get(Product, product_id)
    if not product or product.vendor_id != vendor.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.get("/", response_model=List[VendorResponse])
def list_vendors(
    category: Optional[VendorCategory] = None,
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Public vendor directory: verified and active vendors only"""
    return listed_vendors(session, scope, category)


@router.post("/register", response_model=VendorResponse, status_code=status.HTTP_201_CREATED)
def register_vendor(
    vendor_data: VendorRegister,
    actor: Actor = Depends(require_capability(Capability.REGISTER_VENDOR)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Register a business; it stays hidden until an admin verifies it"""
    if _own_vendor(session, actor.user_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Vendor profile already exists for this account"
        )

    vendor = Vendor(
        **vendor_data.model_dump(),
        user_id=actor.user_id,
        ashram_id=scope.tenant_id,
        is_verified=False,
        is_active=True,
    )
    session.add(vendor)
    session.commit()
    session.refresh(vendor)

    logger.info(f"Vendor registered: {vendor.id} ({vendor.business_name})")
    return vendor


@router.get("/me", response_model=VendorResponse)
def get_my_vendor(
    actor: Actor = Depends(require_capability(Capability.REGISTER_VENDOR)),
    session: Session = Depends(get_session)
):
    """Vendor profile of the signed-in account"""
    return _require_own_vendor(session, actor.user_id)


@router.get("/all", response_model=List[VendorResponse])
def list_all_vendors(
    actor: Actor = Depends(require_capability(Capability.MANAGE_VENDORS)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Every vendor in scope, including unverified and inactive ones"""
    statement = apply_tenant_scope(select(Vendor), Vendor.ashram_id, scope)
    return session.exec(statement.order_by(Vendor.created_at.desc())).all()


@router.get("/products", response_model=List[ProductResponse])
def list_marketplace_products(
    vendor_id: Optional[uuid.UUID] = None,
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Public marketplace: available products of verified active vendors"""
    return marketplace_products(session, scope, vendor_id)


@router.post("/products/{product_id}/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def order_product(
    product_id: uuid.UUID,
    order_data: OrderCreate,
    user_id: uuid.UUID = Depends(get_current_user_id),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Order a product; the charity share is computed from the vendor's percentage"""
    try:
        return place_order(
            session,
            product_id,
            quantity=order_data.quantity,
            scope=scope,
            buyer_id=user_id,
            buyer_phone=order_data.buyer_phone,
            shipping_address=order_data.shipping_address,
        )
    except ProductUnavailable as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/me/products", response_model=List[ProductResponse])
def list_my_products(
    actor: Actor = Depends(require_capability(Capability.REGISTER_VENDOR)),
    session: Session = Depends(get_session)
):
    """Every product of the caller's vendor, available or not"""
    vendor = _require_own_vendor(session, actor.user_id)
    return vendor_products(session, vendor)


@router.post("/me/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(
    product_data: ProductCreate,
    actor: Actor = Depends(require_capability(Capability.REGISTER_VENDOR)),
    session: Session = Depends(get_session)
):
    """Add a product to the caller's vendor"""
    vendor = _require_own_vendor(session, actor.user_id)

    product = Product(**product_data.model_dump(), vendor_id=vendor.id)
    session.add(product)
    session.commit()
    session.refresh(product)

    logger.info(f"Product created: {product.id} for vendor {vendor.id}")
    return product


@router.patch("/me/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: uuid.UUID,
    product_update: ProductUpdate,
    actor: Actor = Depends(require_capability(Capability.REGISTER_VENDOR)),
    session: Session = Depends(get_session)
):
    """Update one of the caller's products"""
    vendor = _require_own_vendor(session, actor.user_id)
    product = _own_product(session, vendor, product_id)

    for key, value in product_update.model_dump(exclude_unset=True).items():
        setattr(product, key, value)

    product.updated_at = utc_now()
    session.add(product)
    session.commit()
    session.refresh(product)

    logger.info(f"Product updated: {product.id}")
    return product


@router.delete("/me/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: uuid.UUID,
    actor: Actor = Depends(require_capability(Capability.REGISTER_VENDOR)),
    session: Session = Depends(get_session)
):
    """Withdraw one of the caller's products; ordered products are only marked unavailable"""
    vendor = _require_own_vendor(session, actor.user_id)
    product = _own_product(session, vendor, product_id)

    product.is_available = False
    product.updated_at = utc_now()
    session.add(product)
    session.commit()

    logger.info(f"Product withdrawn: {product.id}")
    return None


@router.get("/{vendor_id}", response_model=VendorDetailResponse)
def get_vendor(
    vendor_id: uuid.UUID,
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Public vendor page with its available products"""
    vendor = get_scoped_or_404(session, Vendor, vendor_id, scope, "Vendor not found")
    if not vendor.is_listed():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Vendor not found")

    products = marketplace_products(session, scope, vendor.id)
    return VendorDetailResponse(
        **vendor.model_dump(),
        products=[ProductResponse(**product.model_dump()) for product in products],
    )


@router.patch("/{vendor_id}/verification", response_model=VendorResponse)
def set_vendor_verification(
    vendor_id: uuid.UUID,
    verification: VerificationUpdate,
    actor: Actor = Depends(require_capability(Capability.MANAGE_VENDORS)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Verify or unverify a vendor"""
    vendor = get_scoped_or_404(session, Vendor, vendor_id, scope, "Vendor not found")

    vendor.is_verified = verification.is_verified
    vendor.updated_at = utc_now()
    session.add(vendor)
    session.commit()
    session.refresh(vendor)

    logger.info(f"Vendor {vendor.id} verification set to {vendor.is_verified} by {actor.user_id}")
    return vendor


@router.patch("/{vendor_id}/activation", response_model=VendorResponse)
def set_vendor_activation(
    vendor_id: uuid.UUID,
    activation: ActivationUpdate,
    actor: Actor = Depends(require_capability(Capability.MANAGE_VENDORS)),
    scope: TenantScope = Depends(get_tenant_scope),
    session: Session = Depends(get_session)
):
    """Activate or deactivate a vendor"""
    vendor = get_scoped_or_404(session, Vendor, vendor_id, scope, "Vendor not found")

    vendor.is_active = activation.is_active
    vendor.updated_at = utc_now()
    session.add(vendor)
    session.commit()
    session.refresh(vendor)

    logger.info(f"Vendor {vendor.id} activation set to {vendor.is_active} by {actor.user_id}")
    return vendor
