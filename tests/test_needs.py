"""
Tests for children needs and their progress
"""

import pytest

from ashram_connect.models import AppRole, ChildrenNeed, NeedCategory, NeedUrgency


class TestNeedProgress:
    """Fulfillment progress on the model"""

    def test_sixty_percent_fulfilled(self):
        need = ChildrenNeed(title="Notebooks", category=NeedCategory.EDUCATION, quantity_needed=50, quantity_fulfilled=30)

        assert need.fulfilled_percent() == 60
        assert need.remaining_percent() == 40
        assert need.progress_labels() == ("60% fulfilled", "40% remaining")
        assert need.quantity_remaining() == 20
        assert not need.is_fulfilled()

    def test_progress_is_capped(self):
        need = ChildrenNeed(title="Rice", category=NeedCategory.FOOD, quantity_needed=3, quantity_fulfilled=3)
        assert need.fulfilled_percent() == 100
        assert need.remaining_percent() == 0
        assert need.is_fulfilled()

    def test_record_fulfillment(self):
        need = ChildrenNeed(title="Rice", category=NeedCategory.FOOD, quantity_needed=10, quantity_fulfilled=4)
        need.record_fulfillment(6)
        assert need.quantity_fulfilled == 10

    def test_record_fulfillment_cannot_exceed_need(self):
        need = ChildrenNeed(title="Rice", category=NeedCategory.FOOD, quantity_needed=10, quantity_fulfilled=8)
        with pytest.raises(ValueError, match="only 2 remaining"):
            need.record_fulfillment(3)
        assert need.quantity_fulfilled == 8

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_record_fulfillment_must_be_positive(self, quantity):
        need = ChildrenNeed(title="Rice", category=NeedCategory.FOOD, quantity_needed=10)
        with pytest.raises(ValueError, match="must be positive"):
            need.record_fulfillment(quantity)

    def test_fulfilled_quantity_never_decreases(self):
        need = ChildrenNeed(title="Soap", category=NeedCategory.DAILY_ESSENTIALS, quantity_needed=10, quantity_fulfilled=5)
        with pytest.raises(ValueError, match="cannot decrease"):
            need.set_quantities(quantity_fulfilled=4)

    def test_needed_cannot_drop_below_fulfilled(self):
        need = ChildrenNeed(title="Soap", category=NeedCategory.DAILY_ESSENTIALS, quantity_needed=10, quantity_fulfilled=5)
        with pytest.raises(ValueError, match="cannot exceed"):
            need.set_quantities(quantity_needed=4)

    def test_urgency_rank(self):
        assert NeedUrgency.CRITICAL.rank > NeedUrgency.HIGH.rank > NeedUrgency.MEDIUM.rank > NeedUrgency.LOW.rank


class TestNeedEndpoints:
    """Needs API"""

    def test_list_orders_by_urgency_then_newest(self, client, make_need):
        make_need(title="Old low", urgency=NeedUrgency.LOW)
        make_need(title="Old critical", urgency=NeedUrgency.CRITICAL)
        make_need(title="New low", urgency=NeedUrgency.LOW)
        make_need(title="New critical", urgency=NeedUrgency.CRITICAL)
        make_need(title="Hidden", urgency=NeedUrgency.CRITICAL, is_active=False)

        titles = [need["title"] for need in client.get("/api/v1/needs/").json()]
        assert titles == ["New critical", "Old critical", "New low", "Old low"]

    def test_list_filters_by_category(self, client, make_need):
        make_need(title="Notebooks", category=NeedCategory.EDUCATION)
        make_need(title="Milk", category=NeedCategory.FOOD)

        data = client.get("/api/v1/needs/?category=food").json()
        assert [need["title"] for need in data] == ["Milk"]

    def test_get_need_shows_progress(self, client, make_need):
        need = make_need(quantity_needed=50, quantity_fulfilled=30)

        data = client.get(f"/api/v1/needs/{need.id}").json()
        assert data["fulfilled_percent"] == 60
        assert data["fulfilled_label"] == "60% fulfilled"
        assert data["remaining_label"] == "40% remaining"

    def test_create_requires_manage_capability(self, client, user, auth_headers):
        payload = {"title": "Shoes", "category": "clothing"}
        assert client.post("/api/v1/needs/", json=payload).status_code == 401

        response = client.post("/api/v1/needs/", json=payload, headers=auth_headers(user))
        assert response.status_code == 403
        assert response.json()["detail"] == "Permission required: needs:manage"

    def test_tenant_admin_creates_need_in_own_ashram(self, client, tenant_admin_user, test_ashram, auth_headers):
        response = client.post(
            "/api/v1/tenant/sunrise/needs/",
            json={"title": "Shoes", "category": "clothing", "urgency": "high", "quantity_needed": 20},
            headers=auth_headers(tenant_admin_user),
        )

        assert response.status_code == 201
        assert response.json()["ashram_id"] == str(test_ashram.id)

    def test_tenant_admin_cannot_manage_other_ashram(self, client, tenant_admin_user, other_ashram, auth_headers):
        response = client.post(
            "/api/v1/tenant/riverside/needs/",
            json={"title": "Shoes", "category": "clothing"},
            headers=auth_headers(tenant_admin_user),
        )
        assert response.status_code == 403

    def test_fulfill_and_overflow(self, client, sub_admin_user, auth_headers, make_need):
        need = make_need(quantity_needed=10)
        headers = auth_headers(sub_admin_user, AppRole.SUB_ADMIN)

        response = client.post(f"/api/v1/needs/{need.id}/fulfill", json={"quantity": 4}, headers=headers)
        assert response.status_code == 200
        assert response.json()["fulfilled_percent"] == 40

        response = client.post(f"/api/v1/needs/{need.id}/fulfill", json={"quantity": 7}, headers=headers)
        assert response.status_code == 400

    def test_update_rejects_decrease(self, client, sub_admin_user, auth_headers, make_need):
        need = make_need(quantity_needed=10, quantity_fulfilled=5)

        response = client.patch(
            f"/api/v1/needs/{need.id}",
            json={"quantity_fulfilled": 2},
            headers=auth_headers(sub_admin_user, AppRole.SUB_ADMIN),
        )
        assert response.status_code == 400

    def test_update_fields(self, client, sub_admin_user, auth_headers, make_need):
        need = make_need(quantity_needed=10)

        response = client.patch(
            f"/api/v1/needs/{need.id}",
            json={"urgency": "critical", "quantity_needed": 12},
            headers=auth_headers(sub_admin_user, AppRole.SUB_ADMIN),
        )
        assert response.status_code == 200
        assert response.json()["urgency"] == "critical"
        assert response.json()["quantity_needed"] == 12

    def test_delete_hides_need(self, client, sub_admin_user, auth_headers, make_need):
        need = make_need()

        response = client.delete(f"/api/v1/needs/{need.id}", headers=auth_headers(sub_admin_user, AppRole.SUB_ADMIN))
        assert response.status_code == 204
        assert client.get("/api/v1/needs/").json() == []
