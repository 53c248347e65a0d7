"""
Tests for the vendor marketplace
"""

import pytest
from decimal import Decimal

from ashram_connect.core.tenant import GLOBAL_SCOPE, resolve_tenant_scope
from ashram_connect.models import AppRole, Product, Vendor, VendorCategory
from ashram_connect.services.marketplace import (
    ProductUnavailable, listed_vendors, marketplace_products, place_order
)


@pytest.fixture
def make_vendor(db, make_user):
    def _make_vendor(is_verified=True, is_active=True, charity_percentage=10, ashram=None, name="Annapurna Kitchen"):
        owner = make_user()
        vendor = Vendor(
            user_id=owner.id,
            ashram_id=ashram.id if ashram else None,
            business_name=name,
            category=VendorCategory.CLOUD_KITCHEN,
            charity_percentage=charity_percentage,
            is_verified=is_verified,
            is_active=is_active,
        )
        db.add(vendor)
        db.commit()
        db.refresh(vendor)
        return vendor
    return _make_vendor


@pytest.fixture
def make_product(db):
    def _make_product(vendor, price="250.00", is_available=True, name="Thali"):
        product = Product(vendor_id=vendor.id, name=name, price=Decimal(price), is_available=is_available)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product
    return _make_product


def test_charity_share_rounding():
    vendor = Vendor(user_id=None, business_name="Crafts", category=VendorCategory.HANDICRAFTS, charity_percentage=15)
    assert vendor.charity_share(Decimal("99.99")) == Decimal("15.00")
    assert vendor.charity_share(Decimal("500")) == Decimal("75.00")


class TestListing:
    """Only verified and active vendors are public"""

    def test_unverified_and_inactive_vendors_are_hidden(self, db, make_vendor, make_product):
        listed = make_vendor(name="Listed")
        unverified = make_vendor(is_verified=False, name="Unverified")
        inactive = make_vendor(is_active=False, name="Inactive")
        for vendor in (listed, unverified, inactive):
            make_product(vendor)

        assert [v.business_name for v in listed_vendors(db)] == ["Listed"]
        assert {p.vendor_id for p in marketplace_products(db)} == {listed.id}

    def test_unavailable_products_are_hidden(self, db, make_vendor, make_product):
        vendor = make_vendor()
        make_product(vendor, name="Available")
        make_product(vendor, name="Sold out", is_available=False)

        assert [p.name for p in marketplace_products(db)] == ["Available"]

    def test_scoped_listing(self, db, test_ashram, other_ashram, make_vendor):
        make_vendor(ashram=test_ashram, name="Sunrise Crafts")
        make_vendor(ashram=other_ashram, name="River Foods")

        scope = resolve_tenant_scope(db, "sunrise")
        assert [v.business_name for v in listed_vendors(db, scope)] == ["Sunrise Crafts"]
        assert len(listed_vendors(db, GLOBAL_SCOPE)) == 2


class TestOrders:
    """Orders carry the charity split"""

    def test_order_charity_split(self, db, make_vendor, make_product):
        vendor = make_vendor(charity_percentage=10)
        product = make_product(vendor, price="250.00")

        order = place_order(db, product.id, quantity=2)

        assert order.total_amount == Decimal("500.00")
        assert order.charity_amount == Decimal("50.00")
        assert order.status.value == "pending"

    def test_order_from_unverified_vendor(self, db, make_vendor, make_product):
        product = make_product(make_vendor(is_verified=False))
        with pytest.raises(ProductUnavailable):
            place_order(db, product.id)

    def test_order_quantity(self, db, make_vendor, make_product):
        product = make_product(make_vendor())
        with pytest.raises(ValueError, match="at least 1"):
            place_order(db, product.id, quantity=0)


class TestVendorEndpoints:
    """Vendor API"""

    @pytest.mark.parametrize("charity, expected", [(4, 422), (5, 201), (25, 201), (26, 422)])
    def test_charity_percentage_bounds(self, client, make_user, auth_headers, charity, expected):
        response = client.post(
            "/api/v1/vendors/register",
            json={"business_name": "Ghar Ka Khana", "category": "homemade", "charity_percentage": charity},
            headers=auth_headers(make_user()),
        )
        assert response.status_code == expected

    def test_registration_is_hidden_until_verified(self, client, user, sub_admin_user, auth_headers):
        response = client.post(
            "/api/v1/vendors/register",
            json={"business_name": "Ghar Ka Khana", "category": "homemade"},
            headers=auth_headers(user),
        )
        assert response.status_code == 201
        vendor = response.json()
        assert vendor["is_verified"] is False
        assert vendor["charity_percentage"] == 10
        assert client.get("/api/v1/vendors/").json() == []

        admin_headers = auth_headers(sub_admin_user, AppRole.SUB_ADMIN)
        response = client.patch(
            f"/api/v1/vendors/{vendor['id']}/verification",
            json={"is_verified": True},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert [v["id"] for v in client.get("/api/v1/vendors/").json()] == [vendor["id"]]

        client.patch(f"/api/v1/vendors/{vendor['id']}/activation", json={"is_active": False}, headers=admin_headers)
        assert client.get("/api/v1/vendors/").json() == []

    def test_one_vendor_per_account(self, client, user, auth_headers):
        payload = {"business_name": "Ghar Ka Khana", "category": "homemade"}
        client.post("/api/v1/vendors/register", json=payload, headers=auth_headers(user))

        response = client.post("/api/v1/vendors/register", json=payload, headers=auth_headers(user))
        assert response.status_code == 409

    def test_vendor_email_is_validated(self, client, user, auth_headers):
        payload = {"business_name": "Ghar Ka Khana", "category": "homemade"}

        response = client.post(
            "/api/v1/vendors/register", json={**payload, "email": "kitchen-at-home"}, headers=auth_headers(user)
        )
        assert response.status_code == 422

        response = client.post(
            "/api/v1/vendors/register", json={**payload, "email": "kitchen@ashramconnect.org"}, headers=auth_headers(user)
        )
        assert response.status_code == 201
        assert response.json()["email"] == "kitchen@ashramconnect.org"

    def test_verification_requires_vendor_management(self, client, user, make_vendor, auth_headers):
        vendor = make_vendor(is_verified=False)
        response = client.patch(
            f"/api/v1/vendors/{vendor.id}/verification",
            json={"is_verified": True},
            headers=auth_headers(user),
        )
        assert response.status_code == 403

    def test_owner_product_lifecycle(self, client, user, auth_headers):
        headers = auth_headers(user)
        client.post("/api/v1/vendors/register", json={"business_name": "Crafts", "category": "handicrafts"}, headers=headers)

        response = client.post(
            "/api/v1/vendors/me/products",
            json={"name": "Clay lamp", "price": "120.50"},
            headers=headers,
        )
        assert response.status_code == 201
        product_id = response.json()["id"]

        response = client.patch(f"/api/v1/vendors/me/products/{product_id}", json={"price": "99.00"}, headers=headers)
        assert Decimal(response.json()["price"]) == Decimal("99.00")

        assert client.delete(f"/api/v1/vendors/me/products/{product_id}", headers=headers).status_code == 204
        products = client.get("/api/v1/vendors/me/products", headers=headers).json()
        assert products[0]["is_available"] is False

    def test_products_without_vendor_profile(self, client, user, auth_headers):
        response = client.get("/api/v1/vendors/me/products", headers=auth_headers(user))
        assert response.status_code == 404

    def test_marketplace_and_vendor_page(self, client, make_vendor, make_product):
        vendor = make_vendor()
        make_product(vendor, name="Thali")
        hidden = make_vendor(is_verified=False, name="Hidden")
        make_product(hidden, name="Secret")

        names = [p["name"] for p in client.get("/api/v1/vendors/products").json()]
        assert names == ["Thali"]

        page = client.get(f"/api/v1/vendors/{vendor.id}").json()
        assert [p["name"] for p in page["products"]] == ["Thali"]
        assert client.get(f"/api/v1/vendors/{hidden.id}").status_code == 404

    def test_place_order(self, client, user, auth_headers, make_vendor, make_product):
        product = make_product(make_vendor(charity_percentage=20), price="150.00")

        response = client.post(
            f"/api/v1/vendors/products/{product.id}/orders",
            json={"quantity": 3, "shipping_address": "12 MG Road"},
            headers=auth_headers(user),
        )

        assert response.status_code == 201
        assert Decimal(response.json()["total_amount"]) == Decimal("450.00")
        assert Decimal(response.json()["charity_amount"]) == Decimal("90.00")
        assert response.json()["buyer_id"] == str(user.id)

    def test_order_requires_sign_in(self, client, make_vendor, make_product):
        product = make_product(make_vendor())
        response = client.post(f"/api/v1/vendors/products/{product.id}/orders", json={"quantity": 1})
        assert response.status_code == 401
