"""
Vendor marketplace: listing rules and orders with the charity split
"""

from decimal import Decimal
from typing import List, Optional
import uuid

from sqlmodel import Session, select
import structlog

from ashram_connect.core.tenant import GLOBAL_SCOPE, TenantScope, apply_tenant_scope
from ashram_connect.models.vendor import Order, OrderStatus, Product, Vendor, VendorCategory

logger = structlog.get_logger(__name__)


class ProductUnavailable(LookupError):
    """Product is missing, unavailable or its vendor is not listed"""


def listed_vendors(
    session: Session,
    scope: TenantScope = GLOBAL_SCOPE,
    category: Optional[VendorCategory] = None
) -> List[Vendor]:
    """Vendors shown publicly: verified and active, newest first"""
    statement = select(Vendor).where(Vendor.is_verified == True, Vendor.is_active == True)  # noqa: E712
    statement = apply_tenant_scope(statement, Vendor.ashram_id, scope)
    if category:
        statement = statement.where(Vendor.category == category)
    return list(session.exec(statement.order_by(Vendor.created_at.desc())).all())


def marketplace_products(
    session: Session,
    scope: TenantScope = GLOBAL_SCOPE,
    vendor_id: Optional[uuid.UUID] = None
) -> List[Product]:
    """Available products of listed vendors only"""
    statement = (
        select(Product)
        .join(Vendor, Vendor.id == Product.vendor_id)
        .where(
            Product.is_available == True,  # noqa: E712
            Vendor.is_verified == True,  # noqa: E712
            Vendor.is_active == True,  # noqa: E712
        )
    )
    statement = apply_tenant_scope(statement, Vendor.ashram_id, scope)
    if vendor_id:
        statement = statement.where(Product.vendor_id == vendor_id)
    return list(session.exec(statement.order_by(Product.created_at.desc())).all())


def vendor_products(session: Session, vendor: Vendor) -> List[Product]:
    """Every product of a vendor, as its own dashboard shows them"""
    return list(session.exec(
        select(Product).where(Product.vendor_id == vendor.id).order_by(Product.created_at.desc())
    ).all())


def place_order(
    session: Session,
    product_id: uuid.UUID,
    quantity: int = 1,
    scope: TenantScope = GLOBAL_SCOPE,
    buyer_id: Optional[uuid.UUID] = None,
    buyer_phone: Optional[str] = None,
    shipping_address: Optional[str] = None,
) -> Order:
    """Record a pending order; the charity share is fixed at order time"""
    if quantity < 1:
        raise ValueError("Quantity must be at least 1")

    product = session.get(Product, product_id)
    vendor = session.get(Vendor, product.vendor_id) if product else None
    if product is None or vendor is None or not product.is_available or not vendor.is_listed():
        raise ProductUnavailable("Product not found")
    if not scope.contains(vendor.ashram_id):
        raise ProductUnavailable("Product not found")

    total = Decimal(product.price) * quantity
    order = Order(
        product_id=product.id,
        vendor_id=vendor.id,
        buyer_id=buyer_id,
        buyer_phone=buyer_phone,
        quantity=quantity,
        total_amount=total,
        charity_amount=vendor.charity_share(total),
        shipping_address=shipping_address,
        status=OrderStatus.PENDING,
    )

    try:
        session.add(order)
        session.commit()
        session.refresh(order)
    except Exception as e:
        session.rollback()
        logger.error(f"Failed to place order for product {product_id}: {e}")
        raise

    logger.info(
        "Order placed",
        order_id=str(order.id),
        vendor_id=str(vendor.id),
        total_amount=str(order.total_amount),
        charity_amount=str(order.charity_amount),
    )
    return order
